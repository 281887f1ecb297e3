"""
Pydantic schemas for user and auth request/response validation.
"""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

# Present and not only whitespace
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=128)]

# 9999-12-31T23:59:59Z
MAX_UNIX_SECONDS = 253402300799


class SignUpRequest(BaseModel):
    email: EmailStr
    password: NonBlankStr


class LoginRequest(BaseModel):
    email: EmailStr
    password: NonBlankStr


class EmailRequest(BaseModel):
    email: EmailStr


class OtpVerifyRequest(BaseModel):
    email: EmailStr
    otp: NonBlankStr


class UpdatePasswordRequest(BaseModel):
    email: EmailStr
    password: NonBlankStr


class WebhookEmailAddress(BaseModel):
    email_address: EmailStr


class WebhookUserData(BaseModel):
    id: str = Field(..., min_length=1)
    email_addresses: list[WebhookEmailAddress] = Field(..., min_length=1)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    # unix seconds; millisecond values are rejected
    created_at: Optional[int] = Field(None, ge=0, le=MAX_UNIX_SECONDS)


class SignUpWebhook(BaseModel):
    """Identity-provider `user.created` event."""

    type: Optional[str] = None
    data: WebhookUserData


class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str]
    verified: bool
    level: int
    external_id: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthPayload(BaseModel):
    user: UserResponse
    access_token: str = Field(..., alias="accessToken")

    model_config = ConfigDict(populate_by_name=True)


class EmailPayload(BaseModel):
    email: str
