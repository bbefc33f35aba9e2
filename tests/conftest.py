# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from stackstudy.core.security import create_access_token
from stackstudy.db.session import (
    Base,
    build_engine,
    get_db,
    get_read_db,
    get_session_factory,
    read_only_bind,
)
from stackstudy.domain import VoteType
from stackstudy.main import app as fastapi_app
from stackstudy.models import Answer, Comment, Question, User, UserRole, Vote
from stackstudy.services.achievements import ensure_default_achievements

_USER_COUNTER = count(1)


@pytest.fixture()
def engine(tmp_path) -> Iterator[Engine]:
    # File-backed so that worker threads get their own connections and
    # really contend for the write lock.
    engine = build_engine(f"sqlite:///{tmp_path / 'forum.db'}")
    Base.metadata.create_all(bind=engine)
    with Session(engine) as session, session.begin():
        ensure_default_achievements(session)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture()
def read_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=read_only_bind(engine),
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


class ForumData:
    """Seeds rows in short committed transactions and reads them back fresh.

    Nothing here keeps a session open, so units of work under test never
    wait on a fixture's lock.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def user(self, name: str | None = None, *, role: UserRole = UserRole.USER) -> int:
        number = next(_USER_COUNTER)
        with self.session_factory() as session, session.begin():
            user = User(
                name=name or f"user{number}",
                email=f"user{number}@example.com",
                rating=0,
                role=role,
            )
            session.add(user)
            session.flush()
            return user.id

    def question(self, author_id: int, title: str = "How do I join two tables?") -> int:
        with self.session_factory() as session, session.begin():
            question = Question(
                title=title,
                content="I have two tables and need rows from both.",
                author_id=author_id,
                rating=0,
            )
            session.add(question)
            session.flush()
            return question.id

    def answer(self, question_id: int, author_id: int, *, accepted: bool = False) -> int:
        with self.session_factory() as session, session.begin():
            answer = Answer(
                question_id=question_id,
                author_id=author_id,
                content="Use a JOIN on the foreign key column.",
                rating=0,
                is_accepted=accepted,
            )
            session.add(answer)
            session.flush()
            return answer.id

    def vote(
        self,
        user_id: int,
        vote_type: VoteType,
        *,
        question_id: int | None = None,
        answer_id: int | None = None,
    ) -> None:
        """Insert a vote row directly, keeping the stored ratings consistent."""
        with self.session_factory() as session, session.begin():
            session.add(
                Vote(
                    user_id=user_id,
                    question_id=question_id,
                    answer_id=answer_id,
                    vote_type=vote_type,
                )
            )
            post = (
                session.get(Question, question_id)
                if question_id is not None
                else session.get(Answer, answer_id)
            )
            post.rating += int(vote_type)
            session.get(User, post.author_id).rating += int(vote_type)

    def comment(
        self,
        user_id: int,
        *,
        question_id: int | None = None,
        answer_id: int | None = None,
    ) -> int:
        with self.session_factory() as session, session.begin():
            comment = Comment(
                text="Could you share the schema?",
                user_id=user_id,
                question_id=question_id,
                answer_id=answer_id,
            )
            session.add(comment)
            session.flush()
            return comment.id

    def rating(self, model: type[Question] | type[Answer] | type[User], row_id: int) -> int:
        with self.session_factory() as session:
            return session.scalar(select(model.rating).where(model.id == row_id))

    def accepted_answers(self, question_id: int) -> list[int]:
        with self.session_factory() as session:
            return list(
                session.scalars(
                    select(Answer.id)
                    .where(Answer.question_id == question_id, Answer.is_accepted.is_(True))
                    .order_by(Answer.id)
                )
            )

    def votes_for(
        self,
        *,
        question_id: int | None = None,
        answer_id: int | None = None,
    ) -> list[tuple[int, VoteType]]:
        stmt = select(Vote.user_id, Vote.vote_type).order_by(Vote.user_id)
        if question_id is not None:
            stmt = stmt.where(Vote.question_id == question_id)
        else:
            stmt = stmt.where(Vote.answer_id == answer_id)
        with self.session_factory() as session:
            return [(user_id, vote_type) for user_id, vote_type in session.execute(stmt)]

    def count(self, model: type) -> int:
        with self.session_factory() as session:
            return session.scalar(select(func.count()).select_from(model))


@pytest.fixture()
def forum(session_factory: sessionmaker[Session]) -> ForumData:
    return ForumData(session_factory)


@pytest.fixture()
def app(
    session_factory: sessionmaker[Session],
    read_session_factory: sessionmaker[Session],
) -> Iterator[FastAPI]:
    def _get_db_override() -> Iterator[Session]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    def _get_read_db_override() -> Iterator[Session]:
        db = read_session_factory()
        try:
            yield db
        finally:
            db.close()

    fastapi_app.dependency_overrides[get_db] = _get_db_override
    fastapi_app.dependency_overrides[get_read_db] = _get_read_db_override
    fastapi_app.dependency_overrides[get_session_factory] = lambda: session_factory
    try:
        yield fastapi_app
    finally:
        fastapi_app.dependency_overrides.pop(get_db, None)
        fastapi_app.dependency_overrides.pop(get_read_db, None)
        fastapi_app.dependency_overrides.pop(get_session_factory, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def auth_headers() -> Callable[[int], dict[str, str]]:
    """Return a helper building bearer headers for a user id."""

    def _headers(user_id: int) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _headers
