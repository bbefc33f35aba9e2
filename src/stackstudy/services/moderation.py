"""Moderation: deleting answers, tags and comments.

Each delete runs as one retryable unit of work. Votes and comments on a
deleted answer go with it through the ``ON DELETE CASCADE`` foreign keys, and
the votes' weight is taken off the answer author's rating in the same
transaction so user ratings keep matching the remaining votes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy import Integer, delete, func, select, type_coerce, update
from sqlalchemy.orm import Session

from stackstudy.core.errors import ForbiddenError, NotFoundError
from stackstudy.models import Answer, Comment, Tag, User, UserRole, Vote
from stackstudy.services.unit_of_work import run_in_transaction

logger = logging.getLogger(__name__)

MODERATOR_ROLES = frozenset({UserRole.MODERATOR, UserRole.ADMIN})


def _caller_role(session: Session, caller_id: int) -> UserRole:
    role = session.scalar(select(User.role).where(User.id == caller_id))
    if role is None:
        raise NotFoundError("User not found")
    return role


def _require_moderator(session: Session, caller_id: int) -> None:
    if _caller_role(session, caller_id) not in MODERATOR_ROLES:
        raise ForbiddenError("Moderator role required")


def remove_answer(session: Session, caller_id: int, answer_id: int) -> tuple[int, int]:
    """Delete an answer in an open transaction.

    Returns the parent question id and the rating taken off the author.
    """
    _require_moderator(session, caller_id)
    row = session.execute(
        select(Answer.author_id, Answer.question_id).where(Answer.id == answer_id).with_for_update()
    ).first()
    if row is None:
        raise NotFoundError("Answer not found")

    # The author loses exactly the weight of the votes the cascade removes.
    removed = int(
        session.scalar(
            select(func.coalesce(func.sum(type_coerce(Vote.vote_type, Integer)), 0)).where(
                Vote.answer_id == answer_id
            )
        )
    )
    if removed:
        session.execute(
            update(User)
            .where(User.id == row.author_id)
            .values(rating=User.rating - removed)
            .execution_options(synchronize_session=False)
        )
    session.execute(
        delete(Answer).where(Answer.id == answer_id).execution_options(synchronize_session=False)
    )
    return row.question_id, removed


def remove_tag(session: Session, caller_id: int, tag_id: int) -> None:
    _require_moderator(session, caller_id)
    result = session.execute(
        delete(Tag).where(Tag.id == tag_id).execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError("Tag not found")


def remove_comment(session: Session, caller_id: int, comment_id: int) -> None:
    author_id = session.scalar(
        select(Comment.user_id).where(Comment.id == comment_id).with_for_update()
    )
    if author_id is None:
        raise NotFoundError("Comment not found")
    if author_id != caller_id and _caller_role(session, caller_id) not in MODERATOR_ROLES:
        raise ForbiddenError("You can only delete your own comments")
    session.execute(
        delete(Comment).where(Comment.id == comment_id).execution_options(synchronize_session=False)
    )


def delete_answer(
    caller_id: int,
    answer_id: int,
    *,
    session_factory: Callable[[], Session] | None = None,
) -> None:
    """Delete an answer with its votes and comments. Moderators only.

    Raises:
        ForbiddenError: The caller is not a moderator or admin.
        NotFoundError: The caller or the answer does not exist.
        TransientStoreError: Storage kept failing transiently.
        UnknownError: Anything else.
    """
    question_id, removed = run_in_transaction(
        lambda session: remove_answer(session, caller_id, answer_id),
        operation="delete_answer",
        context={"user_id": caller_id, "answer_id": answer_id},
        session_factory=session_factory,
    )
    logger.info(
        "Moderator %s deleted answer %s on question %s (author rating %+d)",
        caller_id,
        answer_id,
        question_id,
        -removed,
    )


def delete_tag(
    caller_id: int,
    tag_id: int,
    *,
    session_factory: Callable[[], Session] | None = None,
) -> None:
    """Delete a tag and detach it from every question. Moderators only."""
    run_in_transaction(
        lambda session: remove_tag(session, caller_id, tag_id),
        operation="delete_tag",
        context={"user_id": caller_id, "tag_id": tag_id},
        session_factory=session_factory,
    )
    logger.info("Moderator %s deleted tag %s", caller_id, tag_id)


def delete_comment(
    caller_id: int,
    comment_id: int,
    *,
    session_factory: Callable[[], Session] | None = None,
) -> None:
    """Delete a comment on behalf of its author or a moderator."""
    run_in_transaction(
        lambda session: remove_comment(session, caller_id, comment_id),
        operation="delete_comment",
        context={"user_id": caller_id, "comment_id": comment_id},
        session_factory=session_factory,
    )
    logger.info("User %s deleted comment %s", caller_id, comment_id)
