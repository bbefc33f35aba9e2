"""Database session configuration."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from stackstudy.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import stackstudy.models  # noqa: E402,F401


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


# Execution option marking connections that only read. Their SQLite
# transactions start with a plain deferred BEGIN.
READ_ONLY_OPTION = "stackstudy_read_only"


def configure_sqlite_engine(engine: Engine) -> None:
    """Let SQLAlchemy own SQLite transactions and take the write lock up front.

    pysqlite defers BEGIN until the first write, so a read-then-write unit of
    work could interleave with another writer. Emitting BEGIN IMMEDIATE makes
    every transaction a serialized writer; contention shows up as
    ``OperationalError: database is locked``. Connections carrying
    ``READ_ONLY_OPTION`` keep the deferred BEGIN so that reads do not queue
    behind writers.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn: Any) -> None:
        if conn.get_execution_options().get(READ_ONLY_OPTION):
            conn.exec_driver_sql("BEGIN")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(
    url: str,
    *,
    echo: bool = False,
    isolation_level: str | None = None,
    **kwargs: Any,
) -> Engine:
    """Create an engine with the isolation discipline used by units of work."""
    if _is_sqlite(url):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        engine = create_engine(url, echo=echo, connect_args=connect_args, **kwargs)
        configure_sqlite_engine(engine)
        return engine

    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        isolation_level=isolation_level,
        **kwargs,
    )


def read_only_bind(engine: Engine) -> Engine:
    """Return a view of ``engine`` whose connections are marked read-only."""
    return engine.execution_options(**{READ_ONLY_OPTION: True})


engine = build_engine(
    settings.effective_database_url,
    echo=settings.sql_debug,
    isolation_level=settings.db_isolation_level,
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)

# Request-scoped reads (listings, profiles, my-vote lookups)
ReadSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=read_only_bind(engine),
)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_read_db() -> Generator[Session, None, None]:
    """Yield a session for endpoints that only read."""
    db = ReadSessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> sessionmaker[Session]:
    """Return the session factory used by retryable units of work."""
    return SessionLocal


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=engine)
