"""Comments left on questions or answers."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stackstudy.db.session import Base
from stackstudy.db.time import utcnow

from .vote import EXACTLY_ONE_TARGET

if TYPE_CHECKING:
    from .user import User

COMMENT_MAX_LENGTH = 500


class Comment(Base):
    __tablename__ = "comments"
    __table_args__ = (CheckConstraint(EXACTLY_ONE_TARGET, name="ck_comments_target"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(String(COMMENT_MAX_LENGTH), nullable=False)
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
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    user: Mapped[User] = relationship("User")
