"""Vote engine: applies a user's vote intent to a question or answer.

One call mutates exactly one vote row (insert, flip or delete) and moves the
post's rating and its author's rating by the same delta, all inside one
retryable unit of work. Ratings are changed with ``rating = rating + delta``
so concurrent voters on the same post never lose each other's updates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from stackstudy.core.errors import ForbiddenError, NotFoundError
from stackstudy.db.time import utcnow
from stackstudy.domain import PostRef, VoteAction, VoteOutcome, VoteType
from stackstudy.models import Answer, Question, User, Vote
from stackstudy.services.unit_of_work import run_in_transaction

logger = logging.getLogger(__name__)

PostModel = type[Question] | type[Answer]


def _post_model(target: PostRef) -> PostModel:
    return Question if target.kind == "question" else Answer


def _vote_filter(user_id: int, target: PostRef) -> tuple[object, ...]:
    if target.question_id is not None:
        return (Vote.user_id == user_id, Vote.question_id == target.question_id)
    return (Vote.user_id == user_id, Vote.answer_id == target.answer_id)


def _load_author_id(session: Session, target: PostRef) -> int:
    model = _post_model(target)
    author_id = session.scalar(
        select(model.author_id).where(model.id == target.target_id).with_for_update()
    )
    if author_id is None:
        raise NotFoundError(f"{target.kind.capitalize()} not found")
    return author_id


def _find_vote(session: Session, user_id: int, target: PostRef, *, lock: bool) -> Vote | None:
    stmt = select(Vote).where(*_vote_filter(user_id, target))
    if lock:
        stmt = stmt.with_for_update()
    return session.scalars(stmt).first()


def _apply_rating_delta(session: Session, target: PostRef, author_id: int, delta: int) -> None:
    model = _post_model(target)
    session.execute(
        update(model)
        .where(model.id == target.target_id)
        .values(rating=model.rating + delta)
        .execution_options(synchronize_session=False)
    )
    session.execute(
        update(User)
        .where(User.id == author_id)
        .values(rating=User.rating + delta)
        .execution_options(synchronize_session=False)
    )


def _current_rating(session: Session, target: PostRef) -> int:
    model = _post_model(target)
    return int(session.scalar(select(model.rating).where(model.id == target.target_id)) or 0)


def apply_vote(session: Session, user_id: int, target: PostRef, vote_type: VoteType) -> VoteOutcome:
    """Apply one vote inside an already-open transaction.

    Reads the target and the caller's existing vote itself, so it is safe
    to re-run on a retry.
    """
    if session.scalar(select(User.id).where(User.id == user_id)) is None:
        raise NotFoundError("User not found")
    author_id = _load_author_id(session, target)
    existing = _find_vote(session, user_id, target, lock=True)

    if existing is None:
        if author_id == user_id:
            raise ForbiddenError("You cannot vote on your own post")
        session.add(
            Vote(
                user_id=user_id,
                question_id=target.question_id,
                answer_id=target.answer_id,
                vote_type=vote_type,
                voted_at=utcnow(),
            )
        )
        delta = int(vote_type)
        action = VoteAction.ADDED
    elif existing.vote_type == vote_type:
        delta = -int(existing.vote_type)
        session.delete(existing)
        action = VoteAction.REMOVED
    else:
        delta = int(vote_type) - int(existing.vote_type)
        existing.vote_type = vote_type
        existing.voted_at = utcnow()
        action = VoteAction.CHANGED

    session.flush()
    if delta:
        _apply_rating_delta(session, target, author_id, delta)

    return VoteOutcome(action=action, new_rating=_current_rating(session, target), delta=delta)


def cast_vote(
    user_id: int,
    vote_type: VoteType | str | int,
    *,
    question_id: int | None = None,
    answer_id: int | None = None,
    session_factory: Callable[[], Session] | None = None,
) -> VoteOutcome:
    """Cast, flip or withdraw ``user_id``'s vote on a question or answer.

    Repeating the same vote type withdraws the vote; the opposite type flips
    it in place. A user may not cast a first vote on their own post, but an
    existing vote on their own post can still be changed or withdrawn.

    Args:
        user_id: Authenticated caller.
        vote_type: ``VoteType`` or anything ``VoteType.parse`` accepts.
        question_id: Target question; mutually exclusive with ``answer_id``.
        answer_id: Target answer; mutually exclusive with ``question_id``.
        session_factory: Overrides the application session factory.

    Returns:
        The action taken and the post's rating after it.

    Raises:
        InvalidArgumentError: Bad vote type or not exactly one target.
        NotFoundError: The target post does not exist.
        ForbiddenError: First vote on the caller's own post.
        TransientStoreError: Storage kept failing transiently.
        UnknownError: Anything else.
    """
    target = PostRef(question_id=question_id, answer_id=answer_id)
    parsed = VoteType.parse(vote_type)
    outcome = run_in_transaction(
        lambda session: apply_vote(session, user_id, target, parsed),
        operation="cast_vote",
        context={
            "user_id": user_id,
            "question_id": question_id,
            "answer_id": answer_id,
            "vote_type": parsed.label,
        },
        session_factory=session_factory,
    )
    logger.info(
        "User %s %s on %s (delta %+d, rating %d)",
        user_id,
        outcome.action,
        target,
        outcome.delta,
        outcome.new_rating,
    )
    return outcome


def get_user_vote(session: Session, user_id: int, target: PostRef) -> VoteType | None:
    """Return the caller's current vote on ``target`` for display."""
    vote = _find_vote(session, user_id, target, lock=False)
    return vote.vote_type if vote is not None else None
