# src/stackstudy/api/v1/endpoints/questions.py
"""Question and answer posting endpoints."""

from fastapi import APIRouter, Query, status

from stackstudy.models import Question
from stackstudy.schemas.question import (
    AnswerCreate,
    AnswerResponse,
    QuestionCreate,
    QuestionDetailResponse,
    QuestionSummaryResponse,
)
from stackstudy.services import forum

from ..dependencies import CurrentUserDep, ReadSessionDep, SessionDep

router = APIRouter(prefix="/questions", tags=["questions"])


def _to_summary(question: Question) -> QuestionSummaryResponse:
    summary = QuestionSummaryResponse.model_validate(question)
    summary.answer_count = len(question.answers)
    summary.is_solved = any(answer.is_accepted for answer in question.answers)
    return summary


@router.get("/", response_model=list[QuestionSummaryResponse])
async def list_questions(
    db: ReadSessionDep,
    limit: int = Query(50, ge=1, le=100, description="Maximum number of questions to return"),
    offset: int = Query(0, ge=0),
) -> list[QuestionSummaryResponse]:
    """List questions, newest first."""
    questions = forum.list_questions(db, limit=limit, offset=offset)
    return [_to_summary(question) for question in questions]


@router.get("/{question_id}", response_model=QuestionDetailResponse)
async def get_question(question_id: int, db: ReadSessionDep) -> QuestionDetailResponse:
    """Return a question with its answers, best rated first."""
    question = forum.get_question(db, question_id)
    detail = QuestionDetailResponse.model_validate(question)
    detail.answers.sort(key=lambda answer: (-answer.rating, answer.created_at))
    return detail


@router.post("/", response_model=QuestionSummaryResponse, status_code=status.HTTP_201_CREATED)
async def create_question(
    payload: QuestionCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> QuestionSummaryResponse:
    """Create a new question."""
    question = forum.create_question(
        db,
        author_id=current_user.id,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
    )
    return _to_summary(question)


@router.post(
    "/{question_id}/answers",
    response_model=AnswerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_answer(
    question_id: int,
    payload: AnswerCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> AnswerResponse:
    """Post an answer to a question."""
    answer = forum.create_answer(
        db,
        question_id=question_id,
        author_id=current_user.id,
        content=payload.content,
    )
    return AnswerResponse.model_validate(answer)
