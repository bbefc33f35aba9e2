"""CRUD-style helpers for users, questions, answers, comments and tags.

These are the plain read/write paths around the rating core. None of them
touch ``rating`` or ``is_accepted``; new posts always start at rating 0.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import Row, func, select
from sqlalchemy.orm import Session, selectinload

from stackstudy.core.errors import NotFoundError
from stackstudy.domain import PostRef
from stackstudy.models import Answer, Comment, Question, Tag, User, question_tags
from stackstudy.services.achievements import REGISTRATION, grant_achievement

__all__ = [
    "register_user",
    "get_user",
    "normalize_tag_names",
    "list_questions",
    "get_question",
    "create_question",
    "create_answer",
    "list_tags",
    "suggest_tags",
    "list_comments",
    "create_comment",
]


def register_user(
    db: Session,
    *,
    name: str,
    email: str,
    google_id: str | None = None,
    picture_url: str | None = None,
) -> User:
    """Persist a new user and award the registration achievement."""
    user = User(name=name, email=email, google_id=google_id, picture_url=picture_url, rating=0)
    db.add(user)
    db.flush()
    grant_achievement(db, user.id, REGISTRATION)
    db.commit()
    db.refresh(user)
    return user


def get_user(db: Session, user_id: int) -> User:
    """Return a user by primary key or raise ``NotFoundError``."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def normalize_tag_names(raw: Iterable[str]) -> list[str]:
    """Lower-case, strip and de-duplicate tag names, keeping first-seen order."""
    seen: dict[str, None] = {}
    for name in raw:
        cleaned = name.strip().lower()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def _resolve_tags(db: Session, names: list[str]) -> list[Tag]:
    if not names:
        return []
    existing = {tag.name: tag for tag in db.scalars(select(Tag).where(Tag.name.in_(names)))}
    tags = []
    for name in names:
        tag = existing.get(name)
        if tag is None:
            tag = Tag(name=name)
            db.add(tag)
        tags.append(tag)
    return tags


def list_questions(db: Session, *, limit: int = 50, offset: int = 0) -> Sequence[Question]:
    """Return questions newest first with authors, tags and answers loaded."""
    return db.scalars(
        select(Question)
        .options(
            selectinload(Question.author),
            selectinload(Question.tags),
            selectinload(Question.answers),
        )
        .order_by(Question.created_at.desc(), Question.id.desc())
        .offset(offset)
        .limit(limit)
    ).all()


def get_question(db: Session, question_id: int) -> Question:
    """Return a question with author, tags and answers loaded."""
    question = db.scalars(
        select(Question)
        .where(Question.id == question_id)
        .options(
            selectinload(Question.author),
            selectinload(Question.tags),
            selectinload(Question.answers).selectinload(Answer.author),
        )
    ).first()
    if question is None:
        raise NotFoundError("Question not found")
    return question


def create_question(
    db: Session,
    *,
    author_id: int,
    title: str,
    content: str,
    tags: Iterable[str] = (),
) -> Question:
    """Create a question, creating any tags that do not exist yet."""
    get_user(db, author_id)
    question = Question(
        title=title,
        content=content,
        author_id=author_id,
        rating=0,
        tags=_resolve_tags(db, normalize_tag_names(tags)),
    )
    db.add(question)
    db.commit()
    return get_question(db, question.id)


def create_answer(db: Session, *, question_id: int, author_id: int, content: str) -> Answer:
    """Post an answer to an existing question."""
    if db.get(Question, question_id) is None:
        raise NotFoundError("Question not found")
    get_user(db, author_id)
    answer = Answer(
        question_id=question_id,
        author_id=author_id,
        content=content,
        rating=0,
        is_accepted=False,
    )
    db.add(answer)
    db.commit()
    db.refresh(answer)
    return answer


TAG_SUGGESTION_LIMIT = 10


def list_tags(db: Session) -> Sequence[Row]:
    """Return ``(id, name, question_count)`` rows, most used tags first."""
    question_count = func.count(question_tags.c.question_id).label("question_count")
    return db.execute(
        select(Tag.id, Tag.name, question_count)
        .outerjoin(question_tags, question_tags.c.tag_id == Tag.id)
        .group_by(Tag.id, Tag.name)
        .order_by(question_count.desc(), Tag.name)
    ).all()


def suggest_tags(db: Session, query: str, *, limit: int = TAG_SUGGESTION_LIMIT) -> Sequence[Tag]:
    """Return tags whose name contains ``query``, ignoring case.

    A blank query suggests nothing.
    """
    needle = query.strip().lower()
    if not needle:
        return []
    return db.scalars(
        select(Tag)
        .where(func.lower(Tag.name).contains(needle, autoescape=True))
        .order_by(Tag.name)
        .limit(limit)
    ).all()


def _ensure_target_exists(db: Session, target: PostRef) -> None:
    model = Question if target.kind == "question" else Answer
    if db.get(model, target.target_id) is None:
        raise NotFoundError(f"{target.kind.capitalize()} not found")


def list_comments(db: Session, target: PostRef) -> Sequence[Comment]:
    """Return the comments on a question or answer, oldest first."""
    stmt = select(Comment).options(selectinload(Comment.user))
    if target.question_id is not None:
        stmt = stmt.where(Comment.question_id == target.question_id)
    else:
        stmt = stmt.where(Comment.answer_id == target.answer_id)
    return db.scalars(stmt.order_by(Comment.created_at, Comment.id)).all()


def create_comment(db: Session, *, target: PostRef, user_id: int, text: str) -> Comment:
    """Attach a comment to a question or answer."""
    _ensure_target_exists(db, target)
    get_user(db, user_id)
    comment = Comment(
        text=text,
        user_id=user_id,
        question_id=target.question_id,
        answer_id=target.answer_id,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment
