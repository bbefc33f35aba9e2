# src/stackstudy/api/v1/endpoints/users.py
"""User profile and achievement endpoints."""

from fastapi import APIRouter

from stackstudy.models import UserAchievement
from stackstudy.schemas.user import UserAchievementResponse, UserProfileResponse
from stackstudy.services import forum
from stackstudy.services.achievements import list_user_achievements

from ..dependencies import CurrentUserIdDep, ReadSessionDep

router = APIRouter(prefix="/users", tags=["users"])


def _to_response(award: UserAchievement) -> UserAchievementResponse:
    return UserAchievementResponse(
        code=award.achievement.code,
        name=award.achievement.name,
        description=award.achievement.description,
        icon_name=award.achievement.icon_name,
        awarded_at=award.awarded_at,
    )


@router.get("/me/achievements", response_model=list[UserAchievementResponse])
async def get_my_achievements(
    user_id: CurrentUserIdDep,
    db: ReadSessionDep,
) -> list[UserAchievementResponse]:
    """Achievements of the authenticated user."""
    return [_to_response(award) for award in list_user_achievements(db, user_id)]


@router.get("/{user_id}", response_model=UserProfileResponse)
async def get_user_profile(user_id: int, db: ReadSessionDep) -> UserProfileResponse:
    """Public profile including the user's aggregate rating."""
    return UserProfileResponse.model_validate(forum.get_user(db, user_id))


@router.get("/{user_id}/achievements", response_model=list[UserAchievementResponse])
async def get_user_achievements(user_id: int, db: ReadSessionDep) -> list[UserAchievementResponse]:
    forum.get_user(db, user_id)
    return [_to_response(award) for award in list_user_achievements(db, user_id)]
