"""Version 1 API endpoints."""

from .endpoints import (
    answers_router,
    comments_router,
    questions_router,
    tags_router,
    users_router,
    votes_router,
)

__all__ = [
    "answers_router",
    "comments_router",
    "questions_router",
    "tags_router",
    "users_router",
    "votes_router",
]
