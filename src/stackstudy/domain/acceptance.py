"""Result of accepting or unaccepting an answer."""

from __future__ import annotations

from dataclasses import dataclass


class AcceptAction:
    ACCEPTED = "accepted"
    UNACCEPTED = "unaccepted"


@dataclass(frozen=True, slots=True)
class AcceptanceOutcome:
    """``accepted_answer_id`` is None after an unaccept."""

    action: str
    accepted_answer_id: int | None
    question_id: int
