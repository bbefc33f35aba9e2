"""SQLAlchemy models for the StackStudy forum."""

from .achievement import Achievement, UserAchievement
from .answer import Answer
from .comment import Comment
from .question import Question, question_tags
from .tag import Tag
from .user import User, UserRole
from .vote import Vote

__all__ = [
    "Achievement", "UserAchievement",
    "Answer",
    "Comment",
    "Question", "question_tags",
    "Tag",
    "User", "UserRole",
    "Vote",
]
