# src/stackstudy/api/v1/endpoints/votes.py
"""Vote-related endpoints for the StackStudy API."""

import asyncio

from fastapi import APIRouter

from stackstudy.domain import PostRef
from stackstudy.schemas.vote import MyVoteResponse, VoteCreate, VoteResponse
from stackstudy.services.votes import cast_vote, get_user_vote

from ..dependencies import CurrentUserIdDep, ReadSessionDep, SessionFactoryDep

router = APIRouter(tags=["votes"])


async def _cast(
    user_id: int,
    vote_data: VoteCreate,
    session_factory: SessionFactoryDep,
    *,
    question_id: int | None = None,
    answer_id: int | None = None,
) -> VoteResponse:
    # The unit of work blocks on the database and may back off between
    # retries, so it runs off the event loop.
    outcome = await asyncio.to_thread(
        cast_vote,
        user_id,
        vote_data.vote_type,
        question_id=question_id,
        answer_id=answer_id,
        session_factory=session_factory,
    )
    return VoteResponse(action=outcome.action, new_rating=outcome.new_rating)


@router.post("/questions/{question_id}/vote", response_model=VoteResponse)
async def vote_for_question(
    question_id: int,
    vote_data: VoteCreate,
    user_id: CurrentUserIdDep,
    session_factory: SessionFactoryDep,
) -> VoteResponse:
    """Cast, flip or withdraw a vote on a question."""
    return await _cast(user_id, vote_data, session_factory, question_id=question_id)


@router.post("/answers/{answer_id}/vote", response_model=VoteResponse)
async def vote_for_answer(
    answer_id: int,
    vote_data: VoteCreate,
    user_id: CurrentUserIdDep,
    session_factory: SessionFactoryDep,
) -> VoteResponse:
    """Cast, flip or withdraw a vote on an answer."""
    return await _cast(user_id, vote_data, session_factory, answer_id=answer_id)


@router.get("/questions/{question_id}/my-vote", response_model=MyVoteResponse)
async def get_my_question_vote(
    question_id: int,
    user_id: CurrentUserIdDep,
    db: ReadSessionDep,
) -> MyVoteResponse:
    """Get current user's vote on a question."""
    vote_type = get_user_vote(db, user_id, PostRef.question(question_id))
    return MyVoteResponse(vote_type=vote_type.label if vote_type else None)


@router.get("/answers/{answer_id}/my-vote", response_model=MyVoteResponse)
async def get_my_answer_vote(
    answer_id: int,
    user_id: CurrentUserIdDep,
    db: ReadSessionDep,
) -> MyVoteResponse:
    """Get current user's vote on an answer."""
    vote_type = get_user_vote(db, user_id, PostRef.answer(answer_id))
    return MyVoteResponse(vote_type=vote_type.label if vote_type else None)
