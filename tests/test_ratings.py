# tests/test_ratings.py
"""Tests for the rating audit and its command-line wrapper."""

from sqlalchemy import update

from stackstudy.domain import VoteType
from stackstudy.models import Answer, Question, User
from stackstudy.scripts import reconcile_ratings
from stackstudy.services.ratings import RatingDrift, find_rating_drift, repair_rating_drift


def _corrupt(session_factory, model, row_id: int, rating: int) -> None:
    with session_factory() as session, session.begin():
        session.execute(update(model).where(model.id == row_id).values(rating=rating))


def _seed(forum):
    author = forum.user()
    responder = forum.user()
    question = forum.question(author)
    answer = forum.answer(question, responder)
    forum.vote(forum.user(), VoteType.UP, question_id=question)
    forum.vote(forum.user(), VoteType.DOWN, answer_id=answer)
    return author, responder, question, answer


def test_consistent_store_has_no_drift(forum, session_factory) -> None:
    _seed(forum)

    with session_factory() as session:
        assert find_rating_drift(session) == []


def test_detects_post_and_user_drift(forum, session_factory) -> None:
    author, responder, question, answer = _seed(forum)
    _corrupt(session_factory, Question, question, 5)
    _corrupt(session_factory, User, responder, 3)

    with session_factory() as session:
        drifts = find_rating_drift(session)

    assert RatingDrift(kind="question", id=question, stored=5, expected=1) in drifts
    assert RatingDrift(kind="user", id=responder, stored=3, expected=-1) in drifts
    assert len(drifts) == 2


def test_repair_rewrites_drifted_rows(forum, session_factory) -> None:
    author, responder, question, answer = _seed(forum)
    _corrupt(session_factory, Answer, answer, 10)
    _corrupt(session_factory, User, author, -4)

    with session_factory() as session, session.begin():
        repaired = repair_rating_drift(session)

    assert len(repaired) == 2
    assert forum.rating(Answer, answer) == -1
    assert forum.rating(User, author) == 1
    with session_factory() as session:
        assert find_rating_drift(session) == []


def test_script_reports_and_fixes(forum, session_factory, monkeypatch, capsys) -> None:
    _author, _responder, question, _answer = _seed(forum)
    _corrupt(session_factory, Question, question, 7)
    monkeypatch.setattr(reconcile_ratings, "SessionLocal", session_factory)

    assert reconcile_ratings.main([]) == 1
    assert "rerun with --fix" in capsys.readouterr().out
    assert forum.rating(Question, question) == 7

    assert reconcile_ratings.main(["--fix"]) == 0
    assert "Repaired 1 rating(s)." in capsys.readouterr().out
    assert forum.rating(Question, question) == 1

    assert reconcile_ratings.main([]) == 0
    assert "All ratings match" in capsys.readouterr().out
