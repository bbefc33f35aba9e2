"""User-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict

from .common import UtcDateTime


class UserInfo(BaseModel):
    """Public author card embedded in posts and comments."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    picture_url: str | None = None


class UserProfileResponse(UserInfo):
    rating: int


class UserAchievementResponse(BaseModel):
    code: str
    name: str
    description: str
    icon_name: str
    awarded_at: UtcDateTime
