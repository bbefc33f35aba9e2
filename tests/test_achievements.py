# tests/test_achievements.py
"""Tests for achievement awards."""

import logging

from stackstudy.models import Achievement, UserAchievement
from stackstudy.services.achievements import (
    REGISTRATION,
    award_achievement,
    ensure_default_achievements,
    list_user_achievements,
)
from stackstudy.services.forum import register_user


def test_default_catalog_is_seeded_once(forum, session_factory) -> None:
    with session_factory() as session, session.begin():
        ensure_default_achievements(session)

    assert forum.count(Achievement) == 1


def test_award_is_idempotent(forum, session_factory) -> None:
    user_id = forum.user()

    assert award_achievement(user_id, REGISTRATION, session_factory=session_factory) is True
    assert award_achievement(user_id, REGISTRATION, session_factory=session_factory) is False
    assert forum.count(UserAchievement) == 1


def test_unknown_code_is_logged_and_skipped(forum, session_factory, caplog) -> None:
    user_id = forum.user()

    with caplog.at_level(logging.WARNING, logger="stackstudy.services.achievements"):
        awarded = award_achievement(user_id, "NO_SUCH_CODE", session_factory=session_factory)

    assert awarded is False
    assert "NO_SUCH_CODE" in caplog.text
    assert forum.count(UserAchievement) == 0


def test_unknown_user_is_skipped(forum, session_factory) -> None:
    assert award_achievement(9999, REGISTRATION, session_factory=session_factory) is False
    assert forum.count(UserAchievement) == 0


def test_registration_grants_pioneer(session_factory) -> None:
    with session_factory() as session:
        user = register_user(session, name="Ada", email="ada@example.com")
        awards = list_user_achievements(session, user.id)

        assert user.rating == 0
        assert [award.achievement.code for award in awards] == [REGISTRATION]
        assert awards[0].achievement.name == "Pioneer"
