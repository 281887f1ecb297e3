"""
Item booking endpoints: checkout, payment confirmation and cancellation.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from adventure_api.api.deps import get_payment_client
from adventure_api.clients.revolut import RevolutClient
from adventure_api.core.security import get_current_user, require_roles
from adventure_api.db.session import get_db
from adventure_api.models.user import User
from adventure_api.schemas.booking import (
    BookingCreate,
    BookingCreatedResponse,
    BookingResponse,
    OrderDetailsResponse,
    PaymentStatusResponse,
    PaymentWebhook,
)
from adventure_api.schemas.envelope import ApiResponse, respond
from adventure_api.services import booking_service

router = APIRouter(prefix="/item-bookings", tags=["Item Bookings"])

admin_only = require_roles("admin", "superadmin")


@router.post("/webhook/payment-completed", response_model=ApiResponse[BookingResponse])
async def payment_webhook(event: PaymentWebhook, db: AsyncSession = Depends(get_db)):
    """Payment provider callback. Not authenticated."""
    booking = await booking_service.handle_payment_update(db, event.order_id, event.status)
    return respond(BookingResponse.model_validate(booking), "Payment status updated successfully")


@router.post("", response_model=ApiResponse[BookingCreatedResponse], status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    payment_client: RevolutClient = Depends(get_payment_client),
):
    """
    Book one or more items.

    Card bookings come back with the provider order the client pays against;
    the booking stays pending until the payment webhook or capture settles it.
    """
    booking, payment_order = await booking_service.create_booking(db, user, booking_data, payment_client)
    payload = BookingCreatedResponse(
        booking=BookingResponse.model_validate(booking),
        payment_order=payment_order,
    )
    message = "Booking Created with Payment Order" if payment_order else "Booking Created"
    return respond(payload, message, status.HTTP_201_CREATED)


@router.get("/my-bookings", response_model=ApiResponse[list[BookingResponse]])
async def list_my_bookings(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    bookings = await booking_service.get_user_bookings(db, user.id)
    return respond([BookingResponse.model_validate(b) for b in bookings], "Bookings retrieved successfully")


@router.get("/all-bookings", response_model=ApiResponse[list[BookingResponse]], dependencies=[Depends(admin_only)])
async def list_all_bookings(db: AsyncSession = Depends(get_db)):
    bookings = await booking_service.list_all_bookings(db)
    return respond([BookingResponse.model_validate(b) for b in bookings], "Bookings retrieved successfully")


@router.get("/payment-status/{booking_id}", response_model=ApiResponse[PaymentStatusResponse])
async def get_payment_status(
    booking_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_service.get_booking_for_user(db, user, booking_id)
    payload = PaymentStatusResponse(
        booking_id=booking.id,
        transaction_id=booking.transaction_id,
        status=booking.status,
        payment_status=booking.payment_status,
        amount=booking.amount,
        payment_completed_at=booking.payment_completed_at,
    )
    return respond(payload, "Payment status retrieved successfully")


@router.post("/approve/{order_id}", response_model=ApiResponse[BookingResponse])
async def approve_booking(
    order_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    payment_client: RevolutClient = Depends(get_payment_client),
):
    """Capture the authorised payment and confirm the booking."""
    booking, _ = await booking_service.capture_payment(db, user, order_id, payment_client)
    return respond(BookingResponse.model_validate(booking), "Payment captured successfully")


@router.get("/order/{order_id}", response_model=ApiResponse[OrderDetailsResponse])
async def get_order_details(
    order_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    payment_client: RevolutClient = Depends(get_payment_client),
):
    order, booking = await booking_service.get_order_details(db, user, order_id, payment_client)
    payload = OrderDetailsResponse(provider_order=order, booking=BookingResponse.model_validate(booking))
    return respond(payload, "Order details retrieved successfully")


@router.post("/{booking_id}/cancel", response_model=ApiResponse[BookingResponse])
async def cancel_booking(
    booking_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_service.cancel_booking(db, user, booking_id)
    return respond(BookingResponse.model_validate(booking), "Booking cancelled successfully")


@router.post("/{booking_id}/confirm", response_model=ApiResponse[BookingResponse], dependencies=[Depends(admin_only)])
async def confirm_cash_booking(booking_id: int, db: AsyncSession = Depends(get_db)):
    """Record payment for a cash booking. Admins only."""
    booking = await booking_service.confirm_cash_booking(db, booking_id)
    return respond(BookingResponse.model_validate(booking), "Booking confirmed successfully")
