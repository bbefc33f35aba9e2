# tests/test_moderation.py
"""Tests for deleting answers, tags and comments."""

import pytest
from sqlalchemy import func, select

from stackstudy.core.errors import ForbiddenError, NotFoundError
from stackstudy.domain import VoteType
from stackstudy.models import (
    Answer,
    Comment,
    Question,
    Tag,
    User,
    UserRole,
    Vote,
    question_tags,
)
from stackstudy.services.forum import create_question
from stackstudy.services.moderation import delete_answer, delete_comment, delete_tag
from stackstudy.services.ratings import find_rating_drift
from stackstudy.services.votes import cast_vote


def test_deleting_voted_answer_keeps_ratings_consistent(forum, session_factory) -> None:
    moderator = forum.user(role=UserRole.MODERATOR)
    asker = forum.user()
    responder = forum.user()
    question = forum.question(asker)
    answer = forum.answer(question, responder)
    other = forum.answer(question, responder)
    forum.vote(forum.user(), VoteType.UP, answer_id=answer)
    forum.vote(forum.user(), VoteType.UP, answer_id=answer)
    forum.vote(forum.user(), VoteType.DOWN, answer_id=other)
    forum.vote(forum.user(), VoteType.UP, question_id=question)
    forum.comment(asker, answer_id=answer)
    assert forum.rating(User, responder) == 1

    delete_answer(moderator, answer, session_factory=session_factory)

    assert forum.rating(User, responder) == -1
    assert forum.rating(Question, question) == 1
    assert forum.votes_for(answer_id=answer) == []
    assert forum.count(Comment) == 0
    assert forum.count(Answer) == 1
    with session_factory() as session:
        assert find_rating_drift(session) == []


def test_admin_may_delete_answers(forum, session_factory) -> None:
    admin = forum.user(role=UserRole.ADMIN)
    answer = forum.answer(forum.question(forum.user()), forum.user())

    delete_answer(admin, answer, session_factory=session_factory)

    assert forum.count(Answer) == 0


def test_regular_user_cannot_delete_answer(forum, session_factory) -> None:
    question = forum.question(forum.user())
    responder = forum.user()
    answer = forum.answer(question, responder)

    with pytest.raises(ForbiddenError):
        delete_answer(responder, answer, session_factory=session_factory)

    assert forum.count(Answer) == 1


def test_deleting_missing_answer_is_not_found(forum, session_factory) -> None:
    moderator = forum.user(role=UserRole.MODERATOR)

    with pytest.raises(NotFoundError, match="Answer not found"):
        delete_answer(moderator, 9999, session_factory=session_factory)


def test_votes_after_delete_see_the_answer_gone(forum, session_factory) -> None:
    moderator = forum.user(role=UserRole.MODERATOR)
    answer = forum.answer(forum.question(forum.user()), forum.user())
    delete_answer(moderator, answer, session_factory=session_factory)

    with pytest.raises(NotFoundError):
        cast_vote(forum.user(), VoteType.UP, answer_id=answer, session_factory=session_factory)

    assert forum.count(Vote) == 0


def test_deleting_tag_detaches_it_from_questions(forum, session_factory) -> None:
    moderator = forum.user(role=UserRole.MODERATOR)
    author = forum.user()
    with session_factory() as session:
        question = create_question(
            session,
            author_id=author,
            title="Window functions",
            content="How do I rank rows per group?",
            tags=["sql", "postgres"],
        )
        tag_id = next(tag.id for tag in question.tags if tag.name == "sql")

    delete_tag(moderator, tag_id, session_factory=session_factory)

    with session_factory() as session:
        assert list(session.scalars(select(Tag.name))) == ["postgres"]
        links = session.scalar(select(func.count()).select_from(question_tags))
    assert links == 1
    assert forum.count(Question) == 1


def test_tag_delete_requires_moderator(forum, session_factory) -> None:
    with pytest.raises(ForbiddenError):
        delete_tag(forum.user(), 1, session_factory=session_factory)
    with pytest.raises(NotFoundError, match="Tag not found"):
        delete_tag(forum.user(role=UserRole.ADMIN), 9999, session_factory=session_factory)


def test_comment_author_and_moderator_may_delete(forum, session_factory) -> None:
    commenter = forum.user()
    question = forum.question(forum.user())
    own = forum.comment(commenter, question_id=question)
    moderated = forum.comment(commenter, question_id=question)

    delete_comment(commenter, own, session_factory=session_factory)
    delete_comment(forum.user(role=UserRole.MODERATOR), moderated, session_factory=session_factory)

    assert forum.count(Comment) == 0


def test_stranger_cannot_delete_comment(forum, session_factory) -> None:
    comment = forum.comment(forum.user(), question_id=forum.question(forum.user()))

    with pytest.raises(ForbiddenError):
        delete_comment(forum.user(), comment, session_factory=session_factory)
    with pytest.raises(NotFoundError, match="Comment not found"):
        delete_comment(forum.user(), 9999, session_factory=session_factory)

    assert forum.count(Comment) == 1
