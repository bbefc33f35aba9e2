"""Plain domain types shared by the vote and acceptance engines."""

from .acceptance import AcceptAction, AcceptanceOutcome
from .posts import PostRef
from .votes import VoteAction, VoteOutcome, VoteType

__all__ = [
    "AcceptAction", "AcceptanceOutcome",
    "PostRef",
    "VoteAction", "VoteOutcome", "VoteType",
]
