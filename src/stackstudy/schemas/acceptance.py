"""Answer acceptance response schema."""

from pydantic import BaseModel, Field


class AcceptanceResponse(BaseModel):
    action: str = Field(..., description="accepted or unaccepted")
    accepted_answer_id: int | None = Field(
        None,
        description="Accepted answer, or null after an unaccept",
    )
    question_id: int
