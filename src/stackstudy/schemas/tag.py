"""Tag Pydantic schemas."""

from pydantic import BaseModel, ConfigDict


class TagResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class TagWithCountResponse(TagResponse):
    """Tag together with the number of questions carrying it."""

    question_count: int
