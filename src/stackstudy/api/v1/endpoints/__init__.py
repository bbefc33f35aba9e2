"""API endpoint modules for version 1."""

from .answers import router as answers_router
from .comments import router as comments_router
from .questions import router as questions_router
from .tags import router as tags_router
from .users import router as users_router
from .votes import router as votes_router

__all__ = [
    "answers_router",
    "comments_router",
    "questions_router",
    "tags_router",
    "users_router",
    "votes_router",
]
