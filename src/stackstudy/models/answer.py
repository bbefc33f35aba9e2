"""SQLAlchemy model for answers."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stackstudy.db.session import Base
from stackstudy.db.time import utcnow

if TYPE_CHECKING:
    from .question import Question
    from .user import User


class Answer(Base):
    """An answer to a question.

    At most one answer per question has ``is_accepted`` set; only the
    acceptance engine writes the flag.
    """

    __tablename__ = "answers"
    __table_args__ = (
        Index("ix_answers_question_id_is_accepted", "question_id", "is_accepted"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    is_accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
    )

    author: Mapped[User] = relationship("User", back_populates="answers")
    question: Mapped[Question] = relationship("Question", back_populates="answers")
