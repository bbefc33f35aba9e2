"""Comment-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field

from stackstudy.models.comment import COMMENT_MAX_LENGTH

from .common import UtcDateTime
from .user import UserInfo


class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=COMMENT_MAX_LENGTH)


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str
    created_at: UtcDateTime
    user: UserInfo
