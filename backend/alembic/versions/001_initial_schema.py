"""Initial schema: users, otps, items, item bookings, user achievements.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("external_id", sa.String(255), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("refresh_token", sa.String(1024), nullable=True),
        sa.Column("level", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
        sa.CheckConstraint(
            "role IN ('user', 'admin', 'instructor', 'hotel', 'superadmin')",
            name="check_user_role",
        ),
    )
    op.create_index("ix_users_id", "users", ["id"])
    # The unique index is the duplicate-signup guard
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_external_id", "users", ["external_id"], unique=True)

    op.create_table(
        "otps",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("code", sa.Integer(), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_otps_user_id", "otps", ["user_id"], unique=True)
    op.create_index("ix_otps_expires_at", "otps", ["expires_at"])

    op.create_table(
        "items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(2000), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("rental_price", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("purchase", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("rent", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
        sa.CheckConstraint("price >= 0", name="check_item_price_non_negative"),
        sa.CheckConstraint("rental_price >= 0", name="check_item_rental_price_non_negative"),
    )
    op.create_index("ix_items_id", "items", ["id"])
    op.create_index("ix_items_category", "items", ["category"])

    op.create_table(
        "item_bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("transaction_id", sa.String(255), nullable=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("booking_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("mode_of_payment", sa.String(20), nullable=False, server_default="card"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("amount >= 0", name="check_booking_amount_non_negative"),
        sa.CheckConstraint("status IN ('pending', 'confirmed', 'cancelled')", name="check_item_booking_status"),
        sa.CheckConstraint("mode_of_payment IN ('card', 'cash')", name="check_item_booking_payment_mode"),
        sa.CheckConstraint(
            "payment_status IN ('pending', 'completed', 'failed', 'cancelled')",
            name="check_item_booking_payment_status",
        ),
    )
    op.create_index("ix_item_bookings_id", "item_bookings", ["id"])
    op.create_index("ix_item_bookings_user_id", "item_bookings", ["user_id"])
    op.create_index("ix_item_bookings_transaction_id", "item_bookings", ["transaction_id"], unique=True)

    op.create_table(
        "item_booking_lines",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("item_bookings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("item_id", sa.Integer(), sa.ForeignKey("items.id"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("purchased", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("days", sa.Integer(), nullable=True),
        sa.CheckConstraint("quantity >= 1", name="check_booking_line_quantity_positive"),
        sa.CheckConstraint("days IS NULL OR days >= 1", name="check_booking_line_days_positive"),
    )
    op.create_index("ix_item_booking_lines_booking_id", "item_booking_lines", ["booking_id"])
    op.create_index("ix_item_booking_lines_item_id", "item_booking_lines", ["item_id"])

    op.create_table(
        "user_achievements",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_completed_adventures", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_experience_points", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("unique_categories", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("adventures_by_category", sa.JSON(), nullable=False),
        sa.Column("experience_by_category", sa.JSON(), nullable=False),
        sa.Column("achievements", sa.JSON(), nullable=False),
        sa.Column("calculated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        *_timestamps(),
    )
    op.create_index("ix_user_achievements_user_id", "user_achievements", ["user_id"], unique=True)
    op.create_index("ix_user_achievements_level", "user_achievements", ["level"])
    op.create_index("ix_user_achievements_total_experience_points", "user_achievements", ["total_experience_points"])


def downgrade() -> None:
    op.drop_table("user_achievements")
    op.drop_table("item_booking_lines")
    op.drop_table("item_bookings")
    op.drop_table("items")
    op.drop_table("otps")
    op.drop_table("users")
