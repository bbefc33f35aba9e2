# src/stackstudy/api/v1/endpoints/answers.py
"""Answer acceptance and moderation endpoints."""

import asyncio

from fastapi import APIRouter, Response, status

from stackstudy.schemas.acceptance import AcceptanceResponse
from stackstudy.services.acceptance import accept_answer
from stackstudy.services.moderation import delete_answer

from ..dependencies import CurrentUserIdDep, SessionFactoryDep

router = APIRouter(prefix="/answers", tags=["answers"])


@router.post("/{answer_id}/accept", response_model=AcceptanceResponse)
async def accept(
    answer_id: int,
    user_id: CurrentUserIdDep,
    session_factory: SessionFactoryDep,
) -> AcceptanceResponse:
    """Accept an answer, or withdraw acceptance if it is already accepted.

    Only the author of the parent question may call this.
    """
    outcome = await asyncio.to_thread(
        accept_answer,
        user_id,
        answer_id,
        session_factory=session_factory,
    )
    return AcceptanceResponse(
        action=outcome.action,
        accepted_answer_id=outcome.accepted_answer_id,
        question_id=outcome.question_id,
    )


@router.delete(
    "/{answer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def remove_answer(
    answer_id: int,
    user_id: CurrentUserIdDep,
    session_factory: SessionFactoryDep,
) -> Response:
    """Delete an answer together with its votes and comments (moderators only)."""
    await asyncio.to_thread(delete_answer, user_id, answer_id, session_factory=session_factory)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
