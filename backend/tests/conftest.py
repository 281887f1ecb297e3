"""
Pytest fixtures for test database, client, authentication and a fake
payment provider.

Uses TEST_DATABASE_URL when set (e.g. a Postgres test database), otherwise a
local SQLite file through aiosqlite. Tables are created and dropped per test.
"""

import os
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from adventure_api.clients.revolut import PaymentProviderError
from adventure_api.core.security import create_access_token, hash_password
from adventure_api.db.base import Base
from adventure_api.db.session import Database, get_db
from adventure_api.main import create_app
from adventure_api.models.item import Item
from adventure_api.models.otp import Otp
from adventure_api.models.user import User

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///./test.db")

# NullPool: every test runs on its own event loop, so connections are never reused
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


class FakePaymentClient:
    """In-memory stand-in for RevolutClient."""

    def __init__(self):
        self.orders: dict[str, dict] = {}
        self.captured: list[str] = []
        self.fail = False

    async def create_order(self, amount: float, currency: str, description: str) -> dict:
        if self.fail:
            raise PaymentProviderError("Payment provider returned 503", status_code=503)
        order_id = f"order-{len(self.orders) + 1}"
        order = {
            "id": order_id,
            "amount": int(round(amount * 100)),
            "currency": currency,
            "description": description,
            "state": "pending",
        }
        self.orders[order_id] = order
        return order

    async def capture_order(self, order_id: str) -> dict:
        if self.fail:
            raise PaymentProviderError("Payment provider returned 503", status_code=503)
        self.captured.append(order_id)
        self.orders[order_id]["state"] = "completed"
        return {"id": order_id, "state": "completed"}

    async def get_order(self, order_id: str) -> dict:
        if self.fail or order_id not in self.orders:
            raise PaymentProviderError("Payment provider returned 404", status_code=404)
        return self.orders[order_id]

    async def aclose(self) -> None:
        pass


@pytest.fixture
def payment_client() -> FakePaymentClient:
    return FakePaymentClient()


@pytest.fixture
def app(payment_client: FakePaymentClient):
    return create_app(
        database=Database(TEST_DATABASE_URL, engine=test_engine),
        payment_client=payment_client,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def client(app, db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db_session: AsyncSession, email: str, role: str = "user", verified: bool = True) -> User:
    user = User(
        email=email,
        name=email.split("@")[0],
        password_hash=hash_password("testpassword123"),
        role=role,
        verified=verified,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


def _headers_for(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id), "email": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """A verified user with password `testpassword123`."""
    return await _create_user(db_session, "test@example.com")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "other@example.com")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "admin@example.com", role="admin")


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    """Authorization headers with Bearer token."""
    return _headers_for(test_user)


@pytest_asyncio.fixture
async def other_headers(other_user: User) -> dict:
    return _headers_for(other_user)


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> dict:
    return _headers_for(admin_user)


@pytest_asyncio.fixture
async def test_item(db_session: AsyncSession) -> Item:
    """Purchase-only item priced at 25.00."""
    item = Item(name="Climbing Rope", category="climbing", price=25.0, rental_price=0, purchase=True, rent=False)
    db_session.add(item)
    await db_session.commit()
    await db_session.refresh(item)
    return item


@pytest_asyncio.fixture
async def rental_item(db_session: AsyncSession) -> Item:
    """Rent-only item at 10.00 per day."""
    item = Item(name="Kayak", category="water", price=0, rental_price=10.0, purchase=False, rent=True)
    db_session.add(item)
    await db_session.commit()
    await db_session.refresh(item)
    return item


@pytest.fixture
def count_users(db_session: AsyncSession):
    """Count user rows, optionally for one email."""

    async def _count(email: Optional[str] = None) -> int:
        query = select(func.count()).select_from(User)
        if email is not None:
            query = query.where(User.email == email)
        return (await db_session.execute(query)).scalar()

    return _count


@pytest.fixture
def current_otp(db_session: AsyncSession):
    """Read the code currently held by a user; stands in for the OTP e-mail."""

    async def _current(email: str) -> Optional[int]:
        result = await db_session.execute(
            select(Otp.code).join(User, User.id == Otp.user_id).where(User.email == email)
        )
        return result.scalar_one_or_none()

    return _current
