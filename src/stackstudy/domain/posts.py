"""Reference to a votable post: exactly one of a question or an answer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from stackstudy.core.errors import InvalidArgumentError

PostKind = Literal["question", "answer"]


@dataclass(frozen=True, slots=True)
class PostRef:
    """Tagged union over question and answer ids.

    Construction fails unless exactly one id is set, so a ``PostRef`` in hand
    always names a single target.
    """

    question_id: int | None = None
    answer_id: int | None = None

    def __post_init__(self) -> None:
        if (self.question_id is None) == (self.answer_id is None):
            raise InvalidArgumentError("Exactly one of question_id or answer_id must be supplied")

    @classmethod
    def question(cls, question_id: int) -> PostRef:
        return cls(question_id=question_id)

    @classmethod
    def answer(cls, answer_id: int) -> PostRef:
        return cls(answer_id=answer_id)

    @property
    def kind(self) -> PostKind:
        return "question" if self.question_id is not None else "answer"

    @property
    def target_id(self) -> int:
        if self.question_id is not None:
            return self.question_id
        if self.answer_id is not None:
            return self.answer_id
        raise InvalidArgumentError("Post reference has no target")

    def __str__(self) -> str:
        return f"{self.kind}:{self.target_id}"
