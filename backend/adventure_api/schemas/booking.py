"""
Pydantic schemas for item-booking request/response validation.
"""

from datetime import date, datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

PaymentMode = Literal["card", "cash"]


class BookingLineCreate(BaseModel):
    item: int
    quantity: int = Field(..., ge=1)
    purchased: bool = False
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class BookingCreate(BaseModel):
    items: list[BookingLineCreate] = Field(..., min_length=1)
    mode_of_payment: PaymentMode = "card"


class BookingLineResponse(BaseModel):
    item_id: int
    quantity: int
    purchased: bool
    start_date: Optional[date]
    end_date: Optional[date]
    days: Optional[int]

    model_config = ConfigDict(from_attributes=True)


class BookingResponse(BaseModel):
    id: int
    user_id: int
    lines: list[BookingLineResponse]
    status: str
    transaction_id: Optional[str]
    amount: float
    booking_date: datetime
    mode_of_payment: str
    payment_status: str
    payment_completed_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class BookingCreatedResponse(BaseModel):
    booking: BookingResponse
    payment_order: Optional[dict[str, Any]] = None


class PaymentStatusResponse(BaseModel):
    booking_id: int
    transaction_id: Optional[str]
    status: str
    payment_status: str
    amount: float
    payment_completed_at: Optional[datetime]


class PaymentWebhook(BaseModel):
    order_id: str = Field(..., alias="orderId", min_length=1)
    status: Literal["pending", "completed", "failed", "cancelled"]

    model_config = ConfigDict(populate_by_name=True)


class OrderDetailsResponse(BaseModel):
    provider_order: dict[str, Any]
    booking: Optional[BookingResponse]
