"""
Authentication service: registration (password and identity-provider webhook),
OTP verification, login, password reset and logout.

Duplicate emails are caught by the unique index on users.email: the insert
is attempted directly and the IntegrityError is the conflict signal, so two
concurrent signups for the same address cannot both succeed.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from adventure_api.core.config import get_settings
from adventure_api.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from adventure_api.core.logging import get_logger
from adventure_api.core.metrics import record_login, record_otp_issued, record_registration
from adventure_api.core.security import (
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
)
from adventure_api.models.otp import Otp
from adventure_api.models.user import User
from adventure_api.schemas.user import SignUpWebhook

logger = get_logger(__name__)


@dataclass
class AuthTokens:
    user: User
    access_token: str
    refresh_token: str


def normalize_email(email: str) -> str:
    return email.strip().lower()


def generate_otp_code() -> int:
    return 100000 + secrets.randbelow(900000)


async def get_user_by_email(db: AsyncSession, email: str) -> User:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")
    return user


async def issue_otp(db: AsyncSession, user: User, purpose: str) -> int:
    """Replace any code the user holds with a fresh one and return it."""
    settings = get_settings()
    await db.execute(delete(Otp).where(Otp.user_id == user.id))

    code = generate_otp_code()
    db.add(Otp(
        user_id=user.id,
        code=code,
        expires_at=datetime.now(timezone.utc) + timedelta(seconds=settings.OTP_EXPIRE_SECONDS),
    ))
    await db.flush()

    record_otp_issued(purpose)
    logger.info("otp_issued", user_id=user.id, purpose=purpose)
    return code


async def _get_live_otp(db: AsyncSession, user: User) -> Optional[Otp]:
    result = await db.execute(
        select(Otp).where(
            Otp.user_id == user.id,
            Otp.expires_at > datetime.now(timezone.utc),
        )
    )
    return result.scalar_one_or_none()


async def _check_otp(db: AsyncSession, user: User, submitted: str) -> Otp:
    otp = await _get_live_otp(db, user)
    try:
        code = int(submitted)
    except ValueError:
        code = None

    if otp is None or otp.code != code:
        logger.warning("otp_rejected", user_id=user.id)
        raise ValidationError("Invalid OTP")
    return otp


async def _issue_tokens(db: AsyncSession, user: User) -> AuthTokens:
    access_token = create_access_token(data={"sub": str(user.id), "email": user.email})
    refresh_token = create_refresh_token(data={"sub": str(user.id)})
    user.refresh_token = refresh_token
    await db.flush()
    return AuthTokens(user=user, access_token=access_token, refresh_token=refresh_token)


async def register_user(db: AsyncSession, email: str, password: str) -> tuple[User, int]:
    """
    Create an unverified password user and issue the verification code.
    Raises 409 if the email is already registered.
    """
    user = User(email=normalize_email(email), password_hash=hash_password(password))
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        record_registration("password", "conflict")
        logger.warning("registration_failed", reason="email_exists", email=normalize_email(email))
        raise ConflictError("User with this email already exists !")

    await db.refresh(user)
    code = await issue_otp(db, user, purpose="signup")

    record_registration("password", "created")
    logger.info("user_registered", user_id=user.id, email=user.email)
    return user, code


async def register_from_webhook(db: AsyncSession, event: SignUpWebhook) -> User:
    """
    Create a user from an identity-provider `user.created` event.
    The provider has already verified the address. Duplicates answer 400.
    """
    data = event.data
    name = " ".join(part for part in (data.first_name, data.last_name) if part) or None
    user = User(
        email=normalize_email(data.email_addresses[0].email_address),
        external_id=data.id,
        name=name,
        verified=True,
    )
    if data.created_at is not None:
        try:
            user.created_at = datetime.fromtimestamp(data.created_at, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            raise ValidationError("Invalid created_at timestamp")

    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        record_registration("webhook", "conflict")
        logger.warning("webhook_registration_failed", reason="user_exists", external_id=data.id)
        raise ConflictError("User already exists", status_code=400)

    await db.refresh(user)
    record_registration("webhook", "created")
    logger.info("user_registered", user_id=user.id, email=user.email, external_id=user.external_id)
    return user


async def verify_otp(db: AsyncSession, email: str, otp: str) -> AuthTokens:
    user = await get_user_by_email(db, email)
    await _check_otp(db, user, otp)

    await db.execute(delete(Otp).where(Otp.user_id == user.id))
    user.verified = True
    tokens = await _issue_tokens(db, user)

    logger.info("user_verified", user_id=user.id)
    return tokens


async def resend_otp(db: AsyncSession, email: str) -> tuple[User, int]:
    user = await get_user_by_email(db, email)
    code = await issue_otp(db, user, purpose="resend")
    return user, code


async def authenticate_user(db: AsyncSession, email: str, password: str) -> AuthTokens:
    """
    Log a verified user in.
    404 unknown email, 403 unverified account, 400 wrong password.
    """
    try:
        user = await get_user_by_email(db, email)
    except NotFoundError:
        record_login("not_found")
        logger.warning("login_failed", reason="not_found", email=normalize_email(email))
        raise

    if not user.verified:
        record_login("unverified")
        raise ForbiddenError("User not verified")

    if not verify_password(password, user.password_hash):
        record_login("bad_password")
        logger.warning("login_failed", reason="bad_password", user_id=user.id)
        raise ValidationError("Invalid Password")

    tokens = await _issue_tokens(db, user)
    record_login("success")
    logger.info("user_logged_in", user_id=user.id)
    return tokens


async def forgot_password(db: AsyncSession, email: str) -> tuple[User, int]:
    user = await get_user_by_email(db, email)
    code = await issue_otp(db, user, purpose="password_reset")
    return user, code


async def verify_password_reset(db: AsyncSession, email: str, otp: str) -> User:
    user = await get_user_by_email(db, email)
    record = await _check_otp(db, user, otp)
    record.verified = True
    await db.flush()

    logger.info("password_reset_verified", user_id=user.id)
    return user


async def update_password(db: AsyncSession, email: str, password: str) -> User:
    """Set a new password once the reset code has been verified."""
    user = await get_user_by_email(db, email)

    otp = await _get_live_otp(db, user)
    if otp is None:
        raise ForbiddenError("User not Authorized")
    if not otp.verified:
        raise ForbiddenError("User not verified")

    user.password_hash = hash_password(password)
    # Existing sessions end with the old password
    user.refresh_token = None
    await db.execute(delete(Otp).where(Otp.user_id == user.id))
    await db.flush()

    logger.info("password_updated", user_id=user.id)
    return user


async def logout_user(db: AsyncSession, user: User) -> None:
    user.refresh_token = None
    await db.flush()
    logger.info("user_logged_out", user_id=user.id)
