"""Idempotent achievement awards."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stackstudy.models import Achievement, User, UserAchievement
from stackstudy.services.unit_of_work import run_in_transaction

logger = logging.getLogger(__name__)

REGISTRATION = "REGISTRATION"


@dataclass(frozen=True)
class AchievementSeed:
    code: str
    name: str
    description: str
    icon_name: str


DEFAULT_ACHIEVEMENTS: tuple[AchievementSeed, ...] = (
    AchievementSeed(
        code=REGISTRATION,
        name="Pioneer",
        description="Signed up on the platform",
        icon_name="pioneer",
    ),
)


def ensure_default_achievements(session: Session) -> None:
    """Insert catalog entries that are missing; existing rows are left alone."""
    known = set(session.scalars(select(Achievement.code)))
    for seed in DEFAULT_ACHIEVEMENTS:
        if seed.code in known:
            continue
        session.add(
            Achievement(
                code=seed.code,
                name=seed.name,
                description=seed.description,
                icon_name=seed.icon_name,
            )
        )
    session.flush()


def grant_achievement(session: Session, user_id: int, code: str) -> bool:
    """Award ``code`` to ``user_id`` inside an open transaction.

    Returns True only when a new award row was written.
    """
    if session.get(User, user_id) is None:
        logger.warning("User %s not found for achievement %s", user_id, code)
        return False

    achievement = session.scalars(select(Achievement).where(Achievement.code == code)).first()
    if achievement is None:
        logger.warning("Achievement with code %s not found", code)
        return False

    already_awarded = session.scalar(
        select(UserAchievement.id).where(
            UserAchievement.user_id == user_id,
            UserAchievement.achievement_id == achievement.id,
        )
    )
    if already_awarded is not None:
        return False

    try:
        with session.begin_nested():
            session.add(UserAchievement(user_id=user_id, achievement_id=achievement.id))
    except IntegrityError:
        # Awarded concurrently between the check and the insert.
        return False

    logger.info("User %s awarded achievement %s (%s)", user_id, achievement.name, code)
    return True


def award_achievement(
    user_id: int,
    code: str,
    *,
    session_factory: Callable[[], Session] | None = None,
) -> bool:
    """Award an achievement once; repeated calls with the same code are no-ops."""
    return run_in_transaction(
        lambda session: grant_achievement(session, user_id, code),
        operation="award_achievement",
        context={"user_id": user_id, "code": code},
        session_factory=session_factory,
    )


def list_user_achievements(session: Session, user_id: int) -> Sequence[UserAchievement]:
    """Return a user's awards, most recent first."""
    return session.scalars(
        select(UserAchievement)
        .where(UserAchievement.user_id == user_id)
        .order_by(UserAchievement.awarded_at.desc(), UserAchievement.id.desc())
    ).all()
