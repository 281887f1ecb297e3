from adventure_api.schemas.envelope import ApiResponse, ErrorResponse, respond
from adventure_api.schemas.user import (
    SignUpRequest, LoginRequest, EmailRequest, OtpVerifyRequest, UpdatePasswordRequest,
    SignUpWebhook, UserResponse, AuthPayload, EmailPayload,
)
from adventure_api.schemas.item import ItemCreate, ItemResponse
from adventure_api.schemas.booking import (
    BookingCreate, BookingResponse, BookingCreatedResponse, PaymentStatusResponse,
    PaymentWebhook, OrderDetailsResponse,
)
from adventure_api.schemas.achievement import UserAchievementResponse, UserAchievementUpdate
from adventure_api.schemas.location import LocationResponse

__all__ = [
    "ApiResponse", "ErrorResponse", "respond",
    "SignUpRequest", "LoginRequest", "EmailRequest", "OtpVerifyRequest", "UpdatePasswordRequest",
    "SignUpWebhook", "UserResponse", "AuthPayload", "EmailPayload",
    "ItemCreate", "ItemResponse",
    "BookingCreate", "BookingResponse", "BookingCreatedResponse", "PaymentStatusResponse",
    "PaymentWebhook", "OrderDetailsResponse",
    "UserAchievementResponse", "UserAchievementUpdate",
    "LocationResponse",
]
