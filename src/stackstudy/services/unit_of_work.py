"""Retryable, atomic units of work over the relational store.

A unit of work is a callable taking a fresh ``Session``. It runs inside a
single transaction: either everything it wrote commits or nothing does.
When the store reports a transient failure (lost connection, lock
contention, serialization or deadlock conflict) the whole callable runs
again from scratch with a new session, so it re-reads every row it
inspects. Callables must therefore not carry ORM state captured outside
the attempt.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from stackstudy.core.errors import ForumError, TransientStoreError, UnknownError
from stackstudy.core.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# serialization_failure, deadlock_detected
TRANSIENT_SQLSTATES = frozenset({"40001", "40P01"})

# SQLITE_BUSY and SQLITE_LOCKED; other OperationalErrors (no such table,
# syntax errors) are permanent.
LOCK_CONTENTION_MESSAGES = ("database is locked", "database table is locked")


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)
    return None


def is_transient(exc: BaseException) -> bool:
    """Return True when ``exc`` is a storage failure worth retrying."""
    if not isinstance(exc, DBAPIError):
        return False
    if exc.connection_invalidated:
        return True
    if _sqlstate(exc) in TRANSIENT_SQLSTATES:
        return True
    if isinstance(exc, OperationalError):
        message = str(exc.orig).lower()
        return any(marker in message for marker in LOCK_CONTENTION_MESSAGES)
    return False


def backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """Exponential backoff with full jitter for the given 1-based attempt."""
    ceiling = min(max_delay, base_delay * (2 ** (attempt - 1)))
    return random.uniform(0, ceiling)


def _describe(context: Mapping[str, Any] | None) -> str:
    if not context:
        return "-"
    return " ".join(f"{key}={value}" for key, value in context.items())


def run_in_transaction(
    work: Callable[[Session], T],
    *,
    operation: str,
    context: Mapping[str, Any] | None = None,
    session_factory: Callable[[], Session] | None = None,
    max_attempts: int | None = None,
    base_delay: float | None = None,
    max_delay: float | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``work`` atomically, retrying it on transient storage failures.

    Args:
        work: Unit-of-work body; receives a session with an open transaction.
        operation: Short name used in log records (e.g. ``"cast_vote"``).
        context: Identifiers logged alongside failures (user id, targets).
        session_factory: Factory for new sessions; defaults to the app's.
        max_attempts: Total attempts including the first.
        base_delay: Backoff base in seconds.
        max_delay: Backoff cap in seconds.
        sleep: Injected for tests.

    Returns:
        Whatever ``work`` returns from the committed attempt.

    Raises:
        ForumError: Application errors raised by ``work``, unchanged.
        TransientStoreError: Every attempt failed transiently.
        UnknownError: Any other failure; the cause is chained and logged.
    """
    if session_factory is None:
        from stackstudy.db.session import SessionLocal

        session_factory = SessionLocal
    attempts = max_attempts if max_attempts is not None else settings.retry_max_attempts
    base = base_delay if base_delay is not None else settings.retry_base_delay_seconds
    cap = max_delay if max_delay is not None else settings.retry_max_delay_seconds

    attempt = 0
    while True:
        attempt += 1
        try:
            with session_factory() as session, session.begin():
                return work(session)
        except ForumError:
            raise
        except DBAPIError as exc:
            if not is_transient(exc):
                logger.error(
                    "%s failed with a storage error (%s)",
                    operation,
                    _describe(context),
                    exc_info=True,
                )
                raise UnknownError() from exc
            if attempt >= attempts:
                logger.error(
                    "%s gave up after %d attempts (%s): %s",
                    operation,
                    attempt,
                    _describe(context),
                    exc.__class__.__name__,
                )
                raise TransientStoreError() from exc
            delay = backoff_delay(attempt, base, cap)
            logger.warning(
                "%s hit a transient storage failure on attempt %d/%d (%s); retrying in %.3fs",
                operation,
                attempt,
                attempts,
                _describe(context),
                delay,
            )
            sleep(delay)
        except Exception as exc:
            logger.error(
                "%s failed unexpectedly (%s)",
                operation,
                _describe(context),
                exc_info=True,
            )
            raise UnknownError() from exc
