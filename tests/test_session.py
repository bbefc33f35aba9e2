# tests/test_session.py
"""Tests for the SQLite transaction discipline of write and read sessions."""

import pytest
from sqlalchemy import select, update
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from stackstudy.db.session import build_engine, read_only_bind
from stackstudy.models import Question
from stackstudy.services.unit_of_work import is_transient


@pytest.fixture()
def impatient_engine(engine):
    # Second engine on the same file that gives up on a lock almost at once.
    other = build_engine(str(engine.url), connect_args={"timeout": 0.1})
    try:
        yield other
    finally:
        other.dispose()


def test_read_session_sees_committed_data_while_writer_is_open(
    forum,
    session_factory,
    read_session_factory,
) -> None:
    question = forum.question(forum.user(), title="Before")

    with session_factory() as writer, writer.begin():
        writer.execute(update(Question).where(Question.id == question).values(title="After"))

        with read_session_factory() as reader:
            title = reader.scalar(select(Question.title).where(Question.id == question))

        assert title == "Before"

    with read_session_factory() as reader:
        assert reader.scalar(select(Question.title).where(Question.id == question)) == "After"


def test_write_sessions_take_the_lock_at_begin(forum, session_factory, impatient_engine) -> None:
    question = forum.question(forum.user())

    with session_factory() as writer, writer.begin():
        writer.execute(select(Question.id).where(Question.id == question))

        with Session(impatient_engine) as blocked:
            with pytest.raises(OperationalError) as excinfo:
                blocked.execute(select(Question.id))
        assert is_transient(excinfo.value)

        with Session(read_only_bind(impatient_engine)) as reader:
            assert reader.scalar(select(Question.id).where(Question.id == question)) == question
