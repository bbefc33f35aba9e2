# src/stackstudy/api/v1/endpoints/tags.py
"""Tag listing, suggestion and moderation endpoints."""

import asyncio

from fastapi import APIRouter, Query, Response, status

from stackstudy.schemas.tag import TagResponse, TagWithCountResponse
from stackstudy.services import forum
from stackstudy.services.moderation import delete_tag

from ..dependencies import CurrentUserIdDep, ReadSessionDep, SessionFactoryDep

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("/", response_model=list[TagWithCountResponse])
async def list_tags(db: ReadSessionDep) -> list[TagWithCountResponse]:
    """All tags with their question counts, most used first."""
    return [TagWithCountResponse.model_validate(row) for row in forum.list_tags(db)]


@router.get("/suggest", response_model=list[TagResponse])
async def suggest_tags(
    db: ReadSessionDep,
    query: str = Query("", max_length=50, description="Part of a tag name"),
) -> list[TagResponse]:
    """Up to ten tags whose names contain ``query``, alphabetically."""
    return [TagResponse.model_validate(tag) for tag in forum.suggest_tags(db, query)]


@router.delete(
    "/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def remove_tag(
    tag_id: int,
    user_id: CurrentUserIdDep,
    session_factory: SessionFactoryDep,
) -> Response:
    """Delete a tag and detach it from its questions (moderators only)."""
    await asyncio.to_thread(delete_tag, user_id, tag_id, session_factory=session_factory)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
