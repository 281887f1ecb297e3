"""
Per-user achievement aggregate. One row per user; rewritten wholesale by the
achievement updater and only read over HTTP.
"""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, func

from adventure_api.db.base import Base, TimestampMixin


class UserAchievement(Base, TimestampMixin):
    __tablename__ = "user_achievements"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    # Denormalised user info for quick reads
    email = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)

    level = Column(Integer, nullable=False, default=0, index=True)
    total_completed_adventures = Column(Integer, nullable=False, default=0)
    total_experience_points = Column(Integer, nullable=False, default=0, index=True)
    unique_categories = Column(Integer, nullable=False, default=0)

    # {"hiking": 5, "skiing": 3}
    adventures_by_category = Column(JSON, nullable=False, default=dict)
    experience_by_category = Column(JSON, nullable=False, default=dict)
    # [{"name", "description", "category", "earned_at", "level"}]
    achievements = Column(JSON, nullable=False, default=list)

    calculated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<UserAchievement(user={self.user_id}, level={self.level})>"
