# src/stackstudy/api/v1/endpoints/comments.py
"""Comment endpoints for questions and answers."""

import asyncio

from fastapi import APIRouter, Response, status

from stackstudy.domain import PostRef
from stackstudy.schemas.comment import CommentCreate, CommentResponse
from stackstudy.services import forum
from stackstudy.services.moderation import delete_comment

from ..dependencies import (
    CurrentUserDep,
    CurrentUserIdDep,
    ReadSessionDep,
    SessionDep,
    SessionFactoryDep,
)

router = APIRouter(tags=["comments"])


@router.get("/questions/{question_id}/comments", response_model=list[CommentResponse])
async def get_question_comments(question_id: int, db: ReadSessionDep) -> list[CommentResponse]:
    comments = forum.list_comments(db, PostRef.question(question_id))
    return [CommentResponse.model_validate(comment) for comment in comments]


@router.get("/answers/{answer_id}/comments", response_model=list[CommentResponse])
async def get_answer_comments(answer_id: int, db: ReadSessionDep) -> list[CommentResponse]:
    comments = forum.list_comments(db, PostRef.answer(answer_id))
    return [CommentResponse.model_validate(comment) for comment in comments]


@router.post(
    "/questions/{question_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_question_comment(
    question_id: int,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CommentResponse:
    comment = forum.create_comment(
        db,
        target=PostRef.question(question_id),
        user_id=current_user.id,
        text=payload.text,
    )
    return CommentResponse.model_validate(comment)


@router.post(
    "/answers/{answer_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_answer_comment(
    answer_id: int,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CommentResponse:
    comment = forum.create_comment(
        db,
        target=PostRef.answer(answer_id),
        user_id=current_user.id,
        text=payload.text,
    )
    return CommentResponse.model_validate(comment)


@router.delete(
    "/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def remove_comment(
    comment_id: int,
    user_id: CurrentUserIdDep,
    session_factory: SessionFactoryDep,
) -> Response:
    """Delete a comment. Allowed for its author and for moderators."""
    await asyncio.to_thread(delete_comment, user_id, comment_id, session_factory=session_factory)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
