"""Models capturing voting on questions and answers."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    SmallInteger,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from stackstudy.db.session import Base
from stackstudy.db.time import utcnow
from stackstudy.domain.votes import VoteType

# Exactly one of question_id / answer_id is set.
EXACTLY_ONE_TARGET = (
    "(question_id IS NOT NULL AND answer_id IS NULL) "
    "OR (question_id IS NULL AND answer_id IS NOT NULL)"
)


class VoteTypeColumn(TypeDecorator[VoteType]):
    """Store ``VoteType`` as its signed weight."""

    impl = SmallInteger
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> int | None:
        if value is None:
            return None
        return int(VoteType(value))

    def process_result_value(self, value: Any, dialect: Any) -> VoteType | None:
        if value is None:
            return None
        return VoteType(value)


class Vote(Base):
    """A user's single active vote on one question or one answer."""

    __tablename__ = "votes"
    __table_args__ = (
        # One vote per user per post. NULLs are distinct, so a user's answer
        # votes never collide on the question constraint and vice versa.
        UniqueConstraint("user_id", "question_id", name="uq_votes_user_question"),
        UniqueConstraint("user_id", "answer_id", name="uq_votes_user_answer"),
        CheckConstraint(EXACTLY_ONE_TARGET, name="ck_votes_target"),
        CheckConstraint("vote_type IN (1, -1)", name="ck_votes_vote_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    question_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    answer_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("answers.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    vote_type: Mapped[VoteType] = mapped_column(VoteTypeColumn, nullable=False)
    voted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
