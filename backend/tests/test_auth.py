"""
Tests for authentication endpoints: signup, OTP verification, login,
password reset and logout.
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy import select, update

from adventure_api.models.otp import Otp
from adventure_api.models.user import User


async def _sign_up(client: AsyncClient, email: str = "new@example.com", password: str = "securepassword123"):
    return await client.post("/api/auth/signUp", json={"email": email, "password": password})


@pytest.mark.asyncio
async def test_sign_up_creates_one_user(client: AsyncClient, count_users, current_otp):
    """Successful signup returns the sanitized user and stores exactly one record."""
    response = await _sign_up(client, email="New.User@Example.COM")
    assert response.status_code == 201
    body = response.json()
    assert body["statusCode"] == 201
    assert body["success"] is True
    assert body["message"] == "User registered Succesfully"

    user = body["data"]
    assert user["email"] == "new.user@example.com"
    assert user["verified"] is False
    for hidden in ("password", "password_hash", "refresh_token", "role"):
        assert hidden not in user

    assert await count_users("new.user@example.com") == 1
    assert await current_otp("new.user@example.com") is not None


@pytest.mark.asyncio
async def test_sign_up_duplicate_email(client: AsyncClient, test_user, count_users):
    """Duplicate email returns 409 and writes nothing."""
    before = await count_users()
    response = await _sign_up(client, email="TEST@example.com")
    assert response.status_code == 409
    assert response.json() == {"success": False, "message": "User with this email already exists !"}
    assert await count_users() == before


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"email": "blank@example.com", "password": "   "},
    {"email": "blank@example.com"},
    {"password": "securepassword123"},
    {"email": "not-an-email", "password": "securepassword123"},
])
async def test_sign_up_rejects_invalid_input(client: AsyncClient, count_users, payload):
    """Missing or blank fields return 400 with field errors."""
    response = await client.post("/api/auth/signUp", json=payload)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert body["errors"]
    assert await count_users() == 0


@pytest.mark.asyncio
async def test_webhook_signup(client: AsyncClient, db_session, count_users):
    """Identity-provider webhook creates a verified user; a replay answers 400."""
    event = {
        "type": "user.created",
        "data": {
            "id": "user_2abc",
            "email_addresses": [{"email_address": "Hiker@Example.com"}],
            "first_name": "Ada",
            "last_name": "Hiker",
            "created_at": 1700000000,
        },
    }
    response = await client.post("/api/auth/signup", json=event)
    assert response.status_code == 200
    user = response.json()["data"]
    assert user["email"] == "hiker@example.com"
    assert user["name"] == "Ada Hiker"
    assert user["external_id"] == "user_2abc"
    assert user["verified"] is True

    replay = await client.post("/api/auth/signup", json=event)
    assert replay.status_code == 400
    assert replay.json()["message"] == "User already exists"
    assert await count_users("hiker@example.com") == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("created_at", [1700000000000, -1])
async def test_webhook_signup_rejects_out_of_range_created_at(client: AsyncClient, count_users, created_at):
    """Millisecond or negative timestamps are a 400, not a server error."""
    event = {
        "type": "user.created",
        "data": {
            "id": "user_ms",
            "email_addresses": [{"email_address": "millis@example.com"}],
            "created_at": created_at,
        },
    }
    response = await client.post("/api/auth/signup", json=event)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errors"][0]["field"] == "data.created_at"
    assert await count_users("millis@example.com") == 0


@pytest.mark.asyncio
async def test_verify_otp_logs_user_in(client: AsyncClient, db_session, current_otp):
    """The e-mailed code verifies the account and issues tokens."""
    await _sign_up(client)
    code = await current_otp("new@example.com")

    response = await client.post("/api/auth/verifyOtp", json={"email": "new@example.com", "otp": str(code)})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["verified"] is True
    assert data["accessToken"]
    assert "accessToken" in response.cookies
    assert "refreshToken" in response.cookies

    # Code is single use
    assert await current_otp("new@example.com") is None


@pytest.mark.asyncio
async def test_verify_otp_wrong_code(client: AsyncClient, current_otp):
    await _sign_up(client)
    code = await current_otp("new@example.com")
    wrong = 100000 if code != 100000 else 100001

    response = await client.post("/api/auth/verifyOtp", json={"email": "new@example.com", "otp": str(wrong)})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid OTP"


@pytest.mark.asyncio
async def test_verify_otp_expired(client: AsyncClient, db_session, current_otp):
    await _sign_up(client)
    code = await current_otp("new@example.com")
    await db_session.execute(update(Otp).values(expires_at=datetime.now(timezone.utc) - timedelta(minutes=1)))
    await db_session.commit()

    response = await client.post("/api/auth/verifyOtp", json={"email": "new@example.com", "otp": str(code)})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_resend_otp_replaces_code(client: AsyncClient, current_otp, monkeypatch):
    """Resending keeps exactly one live code per user."""
    codes = iter([111111, 222222])
    monkeypatch.setattr("adventure_api.services.auth_service.generate_otp_code", lambda: next(codes))

    await _sign_up(client)
    assert await current_otp("new@example.com") == 111111

    response = await client.post("/api/auth/resendOtp", json={"email": "new@example.com"})
    assert response.status_code == 200
    assert response.json()["data"] == {"email": "new@example.com"}
    assert await current_otp("new@example.com") == 222222


@pytest.mark.asyncio
async def test_resend_otp_unknown_user(client: AsyncClient):
    response = await client.post("/api/auth/resendOtp", json={"email": "ghost@example.com"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_user):
    """Valid credentials return the user, an access token and auth cookies."""
    response = await client.post("/api/auth/login", json={
        "email": "test@example.com",
        "password": "testpassword123",
    })
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["email"] == "test@example.com"
    assert data["accessToken"]
    assert "refreshToken" in response.cookies


@pytest.mark.asyncio
async def test_login_unverified_user(client: AsyncClient):
    await _sign_up(client)
    response = await client.post("/api/auth/login", json={
        "email": "new@example.com",
        "password": "securepassword123",
    })
    assert response.status_code == 403
    assert response.json()["message"] == "User not verified"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user):
    response = await client.post("/api/auth/login", json={
        "email": "test@example.com",
        "password": "wrongpassword",
    })
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid Password"


@pytest.mark.asyncio
async def test_login_unknown_user(client: AsyncClient):
    response = await client.post("/api/auth/login", json={
        "email": "nobody@example.com",
        "password": "whatever123",
    })
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_password_reset_flow(client: AsyncClient, test_user, current_otp):
    """forgotPassword -> forgotPasswordVerify -> updatePassword -> login."""
    response = await client.post("/api/auth/forgotPassword", json={"email": "test@example.com"})
    assert response.status_code == 200
    code = await current_otp("test@example.com")

    response = await client.post("/api/auth/forgotPasswordVerify", json={"email": "test@example.com", "otp": str(code)})
    assert response.status_code == 200

    response = await client.post("/api/auth/updatePassword", json={"email": "test@example.com", "password": "brandnew456"})
    assert response.status_code == 200
    assert await current_otp("test@example.com") is None

    old = await client.post("/api/auth/login", json={"email": "test@example.com", "password": "testpassword123"})
    assert old.status_code == 400
    new = await client.post("/api/auth/login", json={"email": "test@example.com", "password": "brandnew456"})
    assert new.status_code == 200


@pytest.mark.asyncio
async def test_update_password_requires_reset_code(client: AsyncClient, test_user):
    response = await client.post("/api/auth/updatePassword", json={"email": "test@example.com", "password": "brandnew456"})
    assert response.status_code == 403
    assert response.json()["message"] == "User not Authorized"


@pytest.mark.asyncio
async def test_update_password_requires_verified_code(client: AsyncClient, test_user):
    await client.post("/api/auth/forgotPassword", json={"email": "test@example.com"})
    response = await client.post("/api/auth/updatePassword", json={"email": "test@example.com", "password": "brandnew456"})
    assert response.status_code == 403
    assert response.json()["message"] == "User not verified"


@pytest.mark.asyncio
async def test_logout_clears_refresh_token(client: AsyncClient, db_session, test_user):
    login = await client.post("/api/auth/login", json={"email": "test@example.com", "password": "testpassword123"})
    token = login.json()["data"]["accessToken"]

    response = await client.post("/api/auth/logout", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["data"] is None

    stored = await db_session.execute(select(User.refresh_token).where(User.email == "test@example.com"))
    assert stored.scalar_one() is None


@pytest.mark.asyncio
async def test_logout_requires_token(client: AsyncClient):
    response = await client.post("/api/auth/logout")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_with_cookie_token(client: AsyncClient, test_user):
    """The access-token cookie authenticates like the Bearer header."""
    login = await client.post("/api/auth/login", json={"email": "test@example.com", "password": "testpassword123"})
    token = login.json()["data"]["accessToken"]

    client.cookies.set("accessToken", token)
    response = await client.get("/api/users/me")
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "test@example.com"


@pytest.mark.asyncio
async def test_me_rejects_garbage_token(client: AsyncClient):
    response = await client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["success"] is False
