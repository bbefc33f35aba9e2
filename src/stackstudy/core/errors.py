"""Typed failures raised by the rating and acceptance core.

Every error carries a message that is safe to show to API clients. Storage
details never end up in the message; they travel as the chained
``__cause__`` and in the server log.
"""

from __future__ import annotations


class ForumError(RuntimeError):
    """Base exception for all forum core failures."""

    default_message = "Request could not be completed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(ForumError):
    """Raised when a user, question or answer does not exist."""

    default_message = "Not found"


class InvalidArgumentError(ForumError):
    """Raised for a malformed vote type or target selection."""

    default_message = "Invalid argument"


class ForbiddenError(ForumError):
    """Raised for self-votes and acceptance attempts by non-authors."""

    default_message = "Forbidden"


class TransientStoreError(ForumError):
    """Raised when retries for a transient storage failure are exhausted."""

    default_message = "The service is busy, please retry"


class UnknownError(ForumError):
    """Raised for unexpected failures; details are only logged server-side."""

    default_message = "Internal server error"
