"""Question and answer Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field

from .common import UtcDateTime
from .tag import TagResponse
from .user import UserInfo


class QuestionCreate(BaseModel):
    """Schema for creating a new question."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list, max_length=10)


class AnswerCreate(BaseModel):
    """Schema for posting an answer."""

    content: str = Field(..., min_length=10, description="At least 10 characters")


class AnswerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    created_at: UtcDateTime
    is_accepted: bool
    rating: int
    author: UserInfo
    question_id: int


class QuestionSummaryResponse(BaseModel):
    """Question entry in the list view."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    created_at: UtcDateTime
    author: UserInfo
    tags: list[TagResponse]
    rating: int
    answer_count: int = 0
    is_solved: bool = False


class QuestionDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    created_at: UtcDateTime
    author: UserInfo
    tags: list[TagResponse]
    rating: int
    answers: list[AnswerResponse]
