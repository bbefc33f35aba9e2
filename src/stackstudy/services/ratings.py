"""Audit and repair of derived rating columns.

Post ratings are maintained incrementally by the vote engine. This module
recomputes them from the vote rows (and user ratings from the votes on the
posts each user authored) to detect and fix drift.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import Integer, func, select, type_coerce, update
from sqlalchemy.orm import Session

from stackstudy.models import Answer, Question, User, Vote

logger = logging.getLogger(__name__)

_WEIGHT = type_coerce(Vote.vote_type, Integer)


@dataclass(frozen=True)
class RatingDrift:
    kind: str  # "question" | "answer" | "user"
    id: int
    stored: int
    expected: int


def _vote_column(model: type[Question] | type[Answer]):
    return Vote.question_id if model is Question else Vote.answer_id


def _post_drift(session: Session, model: type[Question] | type[Answer], kind: str) -> list[RatingDrift]:
    vote_column = _vote_column(model)
    sums = (
        select(vote_column.label("post_id"), func.sum(_WEIGHT).label("total"))
        .where(vote_column.is_not(None))
        .group_by(vote_column)
        .subquery()
    )
    rows = session.execute(
        select(model.id, model.rating, func.coalesce(sums.c.total, 0))
        .outerjoin(sums, sums.c.post_id == model.id)
        .order_by(model.id)
    )
    return [
        RatingDrift(kind=kind, id=post_id, stored=stored, expected=int(expected))
        for post_id, stored, expected in rows
        if stored != int(expected)
    ]


def _expected_user_ratings(session: Session) -> dict[int, int]:
    totals: dict[int, int] = {}
    for model in (Question, Answer):
        rows = session.execute(
            select(model.author_id, func.sum(_WEIGHT))
            .join(Vote, _vote_column(model) == model.id)
            .group_by(model.author_id)
        )
        for author_id, total in rows:
            totals[author_id] = totals.get(author_id, 0) + int(total or 0)
    return totals


def find_rating_drift(session: Session) -> list[RatingDrift]:
    """Return every post and user whose stored rating disagrees with the votes."""
    drifts = _post_drift(session, Question, "question") + _post_drift(session, Answer, "answer")
    expected_users = _expected_user_ratings(session)
    for user_id, stored in session.execute(select(User.id, User.rating).order_by(User.id)):
        expected = expected_users.get(user_id, 0)
        if stored != expected:
            drifts.append(RatingDrift(kind="user", id=user_id, stored=stored, expected=expected))
    return drifts


def repair_rating_drift(session: Session) -> list[RatingDrift]:
    """Rewrite drifted ratings in the current transaction and return what changed."""
    drifts = find_rating_drift(session)
    models = {"question": Question, "answer": Answer, "user": User}
    for drift in drifts:
        model = models[drift.kind]
        session.execute(
            update(model)
            .where(model.id == drift.id)
            .values(rating=drift.expected)
            .execution_options(synchronize_session=False)
        )
        logger.warning(
            "Repaired %s %s rating: %d -> %d",
            drift.kind,
            drift.id,
            drift.stored,
            drift.expected,
        )
    return drifts
