"""Pydantic schemas shared by the API and the sync client."""

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class BookRecord(BaseModel):
    """A book as returned by the API."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    title: str
    author: str
    year: int


class ErrorResponse(BaseModel):
    error: str

