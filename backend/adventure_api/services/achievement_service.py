"""
User achievement aggregate: read by the API, written by the achievement updater.
"""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from adventure_api.core.errors import NotFoundError
from adventure_api.core.logging import get_logger
from adventure_api.models.achievement import UserAchievement
from adventure_api.schemas.achievement import UserAchievementUpdate

logger = get_logger(__name__)


async def get_user_achievements(db: AsyncSession, user_id: int) -> UserAchievement:
    result = await db.execute(select(UserAchievement).where(UserAchievement.user_id == user_id))
    achievement = result.scalar_one_or_none()
    if not achievement:
        raise NotFoundError("User achievements not found")
    return achievement


async def upsert_user_achievement(db: AsyncSession, user_id: int, snapshot: UserAchievementUpdate) -> UserAchievement:
    """
    Replace the user's aggregate with a freshly calculated snapshot,
    creating the row on first use.
    """
    result = await db.execute(select(UserAchievement).where(UserAchievement.user_id == user_id))
    achievement = result.scalar_one_or_none()
    if achievement is None:
        achievement = UserAchievement(user_id=user_id)
        db.add(achievement)

    values = snapshot.model_dump(mode="json")
    for field, value in values.items():
        setattr(achievement, field, value)
    achievement.unique_categories = len(snapshot.adventures_by_category)
    achievement.calculated_at = datetime.now(timezone.utc)

    await db.flush()
    await db.refresh(achievement)

    logger.info(
        "user_achievement_updated",
        user_id=user_id,
        level=achievement.level,
        experience=achievement.total_experience_points,
    )
    return achievement
