"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .acceptance import AcceptanceResponse
from .comment import CommentCreate, CommentResponse
from .question import (
    AnswerCreate,
    AnswerResponse,
    QuestionCreate,
    QuestionDetailResponse,
    QuestionSummaryResponse,
)
from .tag import TagResponse, TagWithCountResponse
from .user import UserAchievementResponse, UserInfo, UserProfileResponse
from .vote import MyVoteResponse, VoteCreate, VoteResponse

__all__ = [
    "AcceptanceResponse",
    "CommentCreate", "CommentResponse",
    "AnswerCreate", "AnswerResponse",
    "QuestionCreate", "QuestionDetailResponse", "QuestionSummaryResponse",
    "TagResponse", "TagWithCountResponse",
    "UserAchievementResponse", "UserInfo", "UserProfileResponse",
    "MyVoteResponse", "VoteCreate", "VoteResponse",
]
