"""
Endpoints for the authenticated user's profile and achievements.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from adventure_api.core.security import get_current_user
from adventure_api.db.session import get_db
from adventure_api.models.user import User
from adventure_api.schemas.achievement import UserAchievementResponse
from adventure_api.schemas.envelope import ApiResponse, respond
from adventure_api.schemas.user import UserResponse
from adventure_api.services.achievement_service import get_user_achievements

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_me(user: User = Depends(get_current_user)):
    return respond(UserResponse.model_validate(user), "User retrieved successfully")


@router.get("/getUserAchievements", response_model=ApiResponse[UserAchievementResponse])
async def get_my_achievements(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    achievement = await get_user_achievements(db, user.id)
    return respond(
        UserAchievementResponse.model_validate(achievement),
        "User achievements retrieved successfully",
    )
