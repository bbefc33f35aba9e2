# src/stackstudy/services/__init__.py
"""Business logic services for the StackStudy forum."""

from .acceptance import accept_answer
from .achievements import award_achievement
from .moderation import delete_answer, delete_comment, delete_tag
from .unit_of_work import run_in_transaction
from .votes import cast_vote

__all__ = [
    "accept_answer",
    "award_achievement",
    "cast_vote",
    "delete_answer",
    "delete_comment",
    "delete_tag",
    "run_in_transaction",
]
