"""
Item booking service: checkout, payment confirmation and cancellation.

STATUS MODEL
============

A booking is created `pending`. It leaves that state exactly once:

  pending -> confirmed   payment completed or captured, or cash collected
  pending -> cancelled   payment failed/cancelled, or the owner cancels

Replaying the transition a booking already went through is a no-op (payment
webhooks are delivered at least once); any other change to a settled
booking is a 409.

PRICING
=======

  purchase line:  price * quantity
  rental line:    rental_price * quantity * days(end_date - start_date)

Card bookings open a manually-captured order with the payment provider
before the booking row is written, so a provider failure leaves nothing
behind.
"""

from datetime import date, datetime, timezone
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from adventure_api.clients.revolut import PaymentProviderError, RevolutClient
from adventure_api.core.config import get_settings
from adventure_api.core.errors import (
    ApiError,
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from adventure_api.core.logging import get_logger
from adventure_api.core.metrics import record_booking_attempt, record_booking_transition
from adventure_api.models.booking import ItemBooking, ItemBookingLine
from adventure_api.models.item import Item
from adventure_api.models.user import User
from adventure_api.schemas.booking import BookingCreate, BookingLineCreate

logger = get_logger(__name__)

# Payment status reported by the provider -> booking status it settles to
PAYMENT_OUTCOMES = {
    "completed": "confirmed",
    "failed": "cancelled",
    "cancelled": "cancelled",
}


def _validate_rental_period(line: BookingLineCreate, today: date) -> None:
    if line.start_date is None or line.end_date is None:
        raise ValidationError("Start date and end date are required for rental items")
    if line.start_date >= line.end_date:
        raise ValidationError("End date must be after start date for rental items")
    if line.start_date < today:
        raise ValidationError("Start date cannot be in the past")


async def _price_lines(db: AsyncSession, requested: list[BookingLineCreate]) -> tuple[list[ItemBookingLine], float]:
    """Validate the requested lines against the catalogue and total them."""
    today = datetime.now(timezone.utc).date()
    for line in requested:
        if not line.purchased:
            _validate_rental_period(line, today)

    item_ids = {line.item for line in requested}
    result = await db.execute(select(Item).where(Item.id.in_(item_ids)))
    items = {item.id: item for item in result.scalars().all()}

    lines = []
    total = 0.0
    for position, line in enumerate(requested):
        item = items.get(line.item)
        if item is None:
            raise NotFoundError(f"Item with ID {line.item} not found")

        if line.purchased:
            if not item.purchase:
                raise ValidationError(f"Item {line.item} is not available for purchase")
            total += item.price * line.quantity
            lines.append(ItemBookingLine(
                position=position,
                item_id=item.id,
                quantity=line.quantity,
                purchased=True,
            ))
        else:
            if not item.rent:
                raise ValidationError(f"Item {line.item} is not available for rent")
            days = (line.end_date - line.start_date).days
            total += item.rental_price * line.quantity * days
            lines.append(ItemBookingLine(
                position=position,
                item_id=item.id,
                quantity=line.quantity,
                purchased=False,
                start_date=line.start_date,
                end_date=line.end_date,
                days=days,
            ))

    return lines, round(total, 2)


def _settle(booking: ItemBooking, target: str) -> bool:
    """Move a pending booking to `target`. Returns False when already there."""
    if booking.status == target:
        return False
    if booking.status != "pending":
        raise ConflictError(f"Booking is already {booking.status}")

    booking.status = target
    record_booking_transition(target)
    return True


async def _get_booking_by_order(db: AsyncSession, order_id: str) -> ItemBooking:
    result = await db.execute(select(ItemBooking).where(ItemBooking.transaction_id == order_id))
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFoundError("Booking not found for this payment order")
    return booking


def _ensure_owner(booking: ItemBooking, user: User, action: str = "view") -> None:
    if booking.user_id != user.id:
        raise UnauthorizedError(f"You are not authorized to {action} this booking")


async def create_booking(
    db: AsyncSession,
    user: User,
    booking_data: BookingCreate,
    payment_client: RevolutClient,
) -> tuple[ItemBooking, Optional[dict[str, Any]]]:
    """
    Create a pending booking for the requested lines.
    Card bookings also return the provider order the client pays against.
    """
    try:
        lines, amount = await _price_lines(db, booking_data.items)
    except ApiError as e:
        record_booking_attempt("rejected")
        logger.warning("booking_rejected", user_id=user.id, reason=e.message)
        raise

    payment_order = None
    transaction_id = None
    if booking_data.mode_of_payment == "card":
        settings = get_settings()
        try:
            payment_order = await payment_client.create_order(
                amount,
                settings.PAYMENT_CURRENCY,
                f"Item Booking - User: {user.name or user.email}",
            )
        except PaymentProviderError:
            record_booking_attempt("payment_error")
            raise InternalError("Failed to create payment order")
        transaction_id = payment_order.get("id")

    booking = ItemBooking(
        user_id=user.id,
        amount=amount,
        mode_of_payment=booking_data.mode_of_payment,
        transaction_id=transaction_id,
        status="pending",
        payment_status="pending",
        lines=lines,
    )
    db.add(booking)
    await db.flush()
    await db.refresh(booking)

    record_booking_attempt("created")
    logger.info(
        "booking_created",
        booking_id=booking.id,
        user_id=user.id,
        amount=amount,
        lines=len(lines),
        mode_of_payment=booking.mode_of_payment,
        transaction_id=transaction_id,
    )
    return booking, payment_order


async def handle_payment_update(db: AsyncSession, order_id: str, payment_status: str) -> ItemBooking:
    """Apply a payment-provider status report to the booking that owns the order."""
    booking = await _get_booking_by_order(db, order_id)

    target = PAYMENT_OUTCOMES.get(payment_status)
    if target is None:
        # Non-final report; only meaningful while the booking is still open
        if booking.status == "pending":
            booking.payment_status = payment_status
    else:
        changed = _settle(booking, target)
        if changed:
            booking.payment_status = payment_status
            if payment_status == "completed":
                booking.payment_completed_at = datetime.now(timezone.utc)

    await db.flush()
    await db.refresh(booking)

    logger.info(
        "payment_update_applied",
        booking_id=booking.id,
        order_id=order_id,
        payment_status=payment_status,
        status=booking.status,
    )
    return booking


async def capture_payment(
    db: AsyncSession,
    user: User,
    order_id: str,
    payment_client: RevolutClient,
) -> tuple[ItemBooking, dict[str, Any]]:
    """Capture an authorised card payment and confirm the booking."""
    booking = await _get_booking_by_order(db, order_id)
    _ensure_owner(booking, user, action="approve")
    if booking.status != "pending":
        raise ConflictError(f"Booking is already {booking.status}")

    try:
        capture = await payment_client.capture_order(order_id)
    except PaymentProviderError:
        raise InternalError("Failed to capture payment")

    _settle(booking, "confirmed")
    booking.payment_status = "completed"
    booking.payment_completed_at = datetime.now(timezone.utc)
    await db.flush()
    await db.refresh(booking)

    logger.info("booking_payment_captured", booking_id=booking.id, order_id=order_id)
    return booking, capture


async def get_order_details(
    db: AsyncSession,
    user: User,
    order_id: str,
    payment_client: RevolutClient,
) -> tuple[dict[str, Any], ItemBooking]:
    booking = await _get_booking_by_order(db, order_id)
    _ensure_owner(booking, user)
    try:
        order = await payment_client.get_order(order_id)
    except PaymentProviderError:
        raise InternalError("Failed to get order details")
    return order, booking


async def get_booking_for_user(db: AsyncSession, user: User, booking_id: int) -> ItemBooking:
    result = await db.execute(select(ItemBooking).where(ItemBooking.id == booking_id))
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFoundError("Booking not found")
    _ensure_owner(booking, user)
    return booking


async def cancel_booking(db: AsyncSession, user: User, booking_id: int) -> ItemBooking:
    """Owner cancels a booking that has not been paid for yet."""
    booking = await get_booking_for_user(db, user, booking_id)
    if booking.status == "cancelled":
        raise ValidationError("Booking is already cancelled")

    _settle(booking, "cancelled")
    if booking.payment_status == "pending":
        booking.payment_status = "cancelled"
    await db.flush()
    await db.refresh(booking)

    logger.info("booking_cancelled", booking_id=booking.id, user_id=user.id)
    return booking


async def confirm_cash_booking(db: AsyncSession, booking_id: int) -> ItemBooking:
    """Mark a cash booking paid once the money has been collected."""
    result = await db.execute(select(ItemBooking).where(ItemBooking.id == booking_id))
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFoundError("Booking not found")
    if booking.mode_of_payment != "cash":
        raise ValidationError("Only cash bookings can be confirmed manually")

    if _settle(booking, "confirmed"):
        booking.payment_status = "completed"
        booking.payment_completed_at = datetime.now(timezone.utc)
    await db.flush()
    await db.refresh(booking)

    logger.info("cash_booking_confirmed", booking_id=booking.id)
    return booking


async def get_user_bookings(db: AsyncSession, user_id: int) -> list[ItemBooking]:
    """Get all bookings for a user, newest first."""
    result = await db.execute(
        select(ItemBooking)
        .where(ItemBooking.user_id == user_id)
        .order_by(ItemBooking.booking_date.desc(), ItemBooking.id.desc())
    )
    return list(result.scalars().all())


async def list_all_bookings(db: AsyncSession) -> list[ItemBooking]:
    result = await db.execute(
        select(ItemBooking).order_by(ItemBooking.booking_date.desc(), ItemBooking.id.desc())
    )
    return list(result.scalars().all())
