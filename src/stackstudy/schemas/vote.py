"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class VoteCreate(BaseModel):
    """Schema for casting a vote.

    The value is parsed case-insensitively by the vote engine so that an
    unknown type is reported as a 400 rather than a schema error.
    """

    vote_type: str = Field(..., description='"up" or "down"')


class VoteResponse(BaseModel):
    action: str = Field(..., description="added vote, changed vote or removed vote")
    new_rating: int


class MyVoteResponse(BaseModel):
    vote_type: Literal["up", "down"] | None = None
