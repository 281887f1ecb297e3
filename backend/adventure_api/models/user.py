"""
User model. Email is the natural key and is stored trimmed and lowercased.

Key design decisions:
- Unique index on email is the only duplicate guard; inserts rely on it
  instead of a check-then-insert lookup
- password_hash is optional: users created from the identity-provider
  webhook have an external_id and no password
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Integer, String
from sqlalchemy.orm import validates

from adventure_api.db.base import Base, TimestampMixin

USER_ROLES = ("user", "admin", "instructor", "hotel", "superadmin")


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=True)
    external_id = Column(String(255), unique=True, index=True, nullable=True)
    role = Column(String(20), nullable=False, default="user")
    verified = Column(Boolean, nullable=False, default=False)
    refresh_token = Column(String(1024), nullable=True)
    level = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint(
            "role IN ('user', 'admin', 'instructor', 'hotel', 'superadmin')",
            name="check_user_role",
        ),
    )

    @validates("email")
    def _normalize_email(self, key, value):
        return value.strip().lower() if value else value

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
