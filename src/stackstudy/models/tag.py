"""Tags attached to questions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stackstudy.db.session import Base

if TYPE_CHECKING:
    from .question import Question


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    questions: Mapped[list[Question]] = relationship(
        "Question",
        secondary="question_tags",
        back_populates="tags",
    )
