"""
One-time passcodes used for e-mail verification and password reset.
At most one live code per user (unique user_id); issuing a new code replaces it.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, func

from adventure_api.db.base import Base


class Otp(Base):
    __tablename__ = "otps"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    code = Column(Integer, nullable=False)
    # Set once the password-reset flow has confirmed the code
    verified = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<Otp(user={self.user_id}, expires_at={self.expires_at})>"
