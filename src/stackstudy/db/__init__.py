# src/stackstudy/db/__init__.py
"""Database configuration and utilities."""

from .session import ReadSessionLocal, SessionLocal, get_db, get_read_db, get_session_factory

__all__ = ["get_db", "get_read_db", "get_session_factory", "ReadSessionLocal", "SessionLocal"]
