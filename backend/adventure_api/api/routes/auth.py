"""
Authentication endpoints: signup (password and identity-provider webhook),
OTP verification, login, password reset and logout.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from adventure_api.clients.mailer import send_otp_email
from adventure_api.core.security import ACCESS_COOKIE, REFRESH_COOKIE, get_current_user
from adventure_api.db.session import get_db
from adventure_api.models.user import User
from adventure_api.schemas.envelope import ApiResponse, respond
from adventure_api.schemas.user import (
    AuthPayload,
    EmailPayload,
    EmailRequest,
    LoginRequest,
    OtpVerifyRequest,
    SignUpRequest,
    SignUpWebhook,
    UpdatePasswordRequest,
    UserResponse,
)
from adventure_api.services import auth_service
from adventure_api.services.auth_service import AuthTokens

router = APIRouter(prefix="/auth", tags=["Authentication"])

COOKIE_OPTIONS = {"httponly": True, "secure": True, "samesite": "none"}


def _login_response(response: Response, tokens: AuthTokens, message: str) -> ApiResponse:
    response.set_cookie(ACCESS_COOKIE, tokens.access_token, **COOKIE_OPTIONS)
    response.set_cookie(REFRESH_COOKIE, tokens.refresh_token, **COOKIE_OPTIONS)
    payload = AuthPayload(user=UserResponse.model_validate(tokens.user), access_token=tokens.access_token)
    return respond(payload, message)


@router.post("/signup", response_model=ApiResponse[UserResponse])
async def signup_webhook(event: SignUpWebhook, db: AsyncSession = Depends(get_db)):
    """Create a user from the identity provider's `user.created` webhook."""
    user = await auth_service.register_from_webhook(db, event)
    return respond(UserResponse.model_validate(user), "User created successfully")


@router.post("/signUp", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def sign_up(
    data: SignUpRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    """Register with email and password; a verification code is e-mailed."""
    user, code = await auth_service.register_user(db, data.email, data.password)
    background_tasks.add_task(send_otp_email, user.email, code)
    return respond(UserResponse.model_validate(user), "User registered Succesfully", status.HTTP_201_CREATED)


@router.post("/verifyOtp", response_model=ApiResponse[AuthPayload])
async def verify_otp(data: OtpVerifyRequest, response: Response, db: AsyncSession = Depends(get_db)):
    tokens = await auth_service.verify_otp(db, data.email, data.otp)
    return _login_response(response, tokens, "User Verified Successfully")


@router.post("/resendOtp", response_model=ApiResponse[EmailPayload])
async def resend_otp(data: EmailRequest, background_tasks: BackgroundTasks, db: AsyncSession = Depends(get_db)):
    user, code = await auth_service.resend_otp(db, data.email)
    background_tasks.add_task(send_otp_email, user.email, code)
    return respond(EmailPayload(email=user.email), "OTP sent Succesfully")


@router.post("/login", response_model=ApiResponse[AuthPayload])
async def login(data: LoginRequest, response: Response, db: AsyncSession = Depends(get_db)):
    tokens = await auth_service.authenticate_user(db, data.email, data.password)
    return _login_response(response, tokens, "User logged in Successfully")


@router.post("/forgotPassword", response_model=ApiResponse[EmailPayload])
async def forgot_password(data: EmailRequest, background_tasks: BackgroundTasks, db: AsyncSession = Depends(get_db)):
    user, code = await auth_service.forgot_password(db, data.email)
    background_tasks.add_task(send_otp_email, user.email, code, "Reset password OTP")
    return respond(EmailPayload(email=user.email), "OTP sent Succesfully")


@router.post("/forgotPasswordVerify", response_model=ApiResponse[EmailPayload])
async def forgot_password_verify(data: OtpVerifyRequest, db: AsyncSession = Depends(get_db)):
    user = await auth_service.verify_password_reset(db, data.email, data.otp)
    return respond(EmailPayload(email=user.email), "OTP Verified Successfully")


@router.post("/updatePassword", response_model=ApiResponse[EmailPayload])
async def update_password(data: UpdatePasswordRequest, db: AsyncSession = Depends(get_db)):
    user = await auth_service.update_password(db, data.email, data.password)
    return respond(EmailPayload(email=user.email), "Password Updated Successfully")


@router.post("/logout", response_model=ApiResponse[None])
async def logout(
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await auth_service.logout_user(db, user)
    response.delete_cookie(ACCESS_COOKIE, **COOKIE_OPTIONS)
    response.delete_cookie(REFRESH_COOKIE, **COOKIE_OPTIONS)
    return respond(None, "User logged out")
