"""Acceptance engine: marks or unmarks the accepted answer of a question."""

from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from stackstudy.core.errors import ForbiddenError, NotFoundError
from stackstudy.domain import AcceptAction, AcceptanceOutcome
from stackstudy.models import Answer, Question
from stackstudy.services.unit_of_work import run_in_transaction

logger = logging.getLogger(__name__)


def toggle_acceptance(session: Session, caller_id: int, answer_id: int) -> AcceptanceOutcome:
    """Accept ``answer_id`` (or unaccept it if already accepted) in an open transaction.

    The parent question row is locked before any answer flag is read, which
    serializes concurrent acceptance calls on the same question.
    """
    question_id = session.scalar(select(Answer.question_id).where(Answer.id == answer_id))
    if question_id is None:
        raise NotFoundError("Answer not found")

    author_id = session.scalar(
        select(Question.author_id).where(Question.id == question_id).with_for_update()
    )
    if author_id is None:
        raise NotFoundError("Question not found")
    if author_id != caller_id:
        raise ForbiddenError("Only the author of the question can accept an answer")

    answer = session.scalars(
        select(Answer).where(Answer.id == answer_id).with_for_update()
    ).first()
    if answer is None:
        raise NotFoundError("Answer not found")

    if answer.is_accepted:
        answer.is_accepted = False
        session.flush()
        return AcceptanceOutcome(
            action=AcceptAction.UNACCEPTED,
            accepted_answer_id=None,
            question_id=question_id,
        )

    # Clear every other accepted answer, not just the first one found.
    session.execute(
        update(Answer)
        .where(
            Answer.question_id == question_id,
            Answer.id != answer_id,
            Answer.is_accepted.is_(True),
        )
        .values(is_accepted=False)
        .execution_options(synchronize_session=False)
    )
    answer.is_accepted = True
    session.flush()
    return AcceptanceOutcome(
        action=AcceptAction.ACCEPTED,
        accepted_answer_id=answer_id,
        question_id=question_id,
    )


def accept_answer(
    caller_id: int,
    answer_id: int,
    *,
    session_factory: Callable[[], Session] | None = None,
) -> AcceptanceOutcome:
    """Toggle acceptance of an answer on behalf of the question's author.

    Raises:
        NotFoundError: The answer or its question does not exist.
        ForbiddenError: ``caller_id`` did not author the question.
        TransientStoreError: Storage kept failing transiently.
        UnknownError: Anything else.
    """
    outcome = run_in_transaction(
        lambda session: toggle_acceptance(session, caller_id, answer_id),
        operation="accept_answer",
        context={"user_id": caller_id, "answer_id": answer_id},
        session_factory=session_factory,
    )
    logger.info(
        "User %s %s answer %s on question %s",
        caller_id,
        outcome.action,
        answer_id,
        outcome.question_id,
    )
    return outcome
