"""
Item booking: a user's reservation of one or more shop items.

Key design decisions:
- Lines are a child table ordered by `position`, so the requested order survives
- Status field allows cancellation without deleting records
- transaction_id holds the payment provider's order id (card bookings only)
- Status only ever leaves `pending`; the service layer enforces the direction,
  the CHECK constraints only pin the allowed values
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import relationship

from adventure_api.db.base import Base, TimestampMixin

BOOKING_STATUSES = ("pending", "confirmed", "cancelled")
PAYMENT_MODES = ("card", "cash")
PAYMENT_STATUSES = ("pending", "completed", "failed", "cancelled")


class ItemBooking(Base, TimestampMixin):
    __tablename__ = "item_bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")
    transaction_id = Column(String(255), nullable=True, unique=True, index=True)
    amount = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    booking_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    mode_of_payment = Column(String(20), nullable=False, default="card")
    payment_status = Column(String(20), nullable=False, default="pending")
    payment_completed_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", lazy="raise")
    lines = relationship(
        "ItemBookingLine",
        back_populates="booking",
        order_by="ItemBookingLine.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("amount >= 0", name="check_booking_amount_non_negative"),
        CheckConstraint("status IN ('pending', 'confirmed', 'cancelled')", name="check_item_booking_status"),
        CheckConstraint("mode_of_payment IN ('card', 'cash')", name="check_item_booking_payment_mode"),
        CheckConstraint(
            "payment_status IN ('pending', 'completed', 'failed', 'cancelled')",
            name="check_item_booking_payment_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<ItemBooking(id={self.id}, user={self.user_id}, status={self.status}, amount={self.amount})>"


class ItemBookingLine(Base):
    __tablename__ = "item_booking_lines"

    id = Column(Integer, primary_key=True)
    booking_id = Column(Integer, ForeignKey("item_bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("items.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=1)
    purchased = Column(Boolean, nullable=False, default=False)

    # Rental period, empty for purchases
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    days = Column(Integer, nullable=True)

    booking = relationship("ItemBooking", back_populates="lines")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="check_booking_line_quantity_positive"),
        CheckConstraint("days IS NULL OR days >= 1", name="check_booking_line_days_positive"),
    )
