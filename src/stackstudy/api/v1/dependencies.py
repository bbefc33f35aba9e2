"""Shared API dependencies for authentication and common functionality."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from stackstudy.core.security import decode_user_id
from stackstudy.db.session import get_db, get_read_db, get_session_factory
from stackstudy.models import User

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Request-scoped session for plain reads and CRUD
SessionDep = Annotated[Session, Depends(get_db)]

# Request-scoped session for endpoints that only read; on SQLite it does not
# take the write lock
ReadSessionDep = Annotated[Session, Depends(get_read_db)]

# Factory for retryable units of work (votes, acceptance)
SessionFactoryDep = Annotated[Callable[[], Session], Depends(get_session_factory)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If token is invalid or user not found
    """
    user_id = decode_user_id(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
) -> int:
    """Return the caller's user id from the token without touching the database.

    Used by the vote and acceptance endpoints, whose units of work open their
    own sessions and validate everything they read.
    """
    user_id = decode_user_id(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    return user_id


CurrentUserIdDep = Annotated[int, Depends(get_current_user_id)]
