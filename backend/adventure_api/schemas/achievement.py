"""
Pydantic schemas for user achievements.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AchievementBadge(BaseModel):
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    earned_at: Optional[datetime] = None
    level: int = 1


class UserAchievementUpdate(BaseModel):
    """Full recalculated snapshot written by the achievement updater."""

    email: str
    name: str
    level: int = Field(0, ge=0)
    total_completed_adventures: int = Field(0, ge=0)
    total_experience_points: int = Field(0, ge=0)
    adventures_by_category: dict[str, int] = Field(default_factory=dict)
    experience_by_category: dict[str, int] = Field(default_factory=dict)
    achievements: list[AchievementBadge] = Field(default_factory=list)


class UserAchievementResponse(BaseModel):
    user_id: int
    email: str
    name: str
    level: int
    total_completed_adventures: int
    total_experience_points: int
    unique_categories: int
    adventures_by_category: dict[str, int]
    experience_by_category: dict[str, int]
    achievements: list[AchievementBadge]
    calculated_at: datetime

    model_config = ConfigDict(from_attributes=True)
