"""Request/response schemas for chirps."""

from pydantic import BaseModel, ConfigDict, Field


class ChirpCreateRequest(BaseModel):
    """Body of POST /chirps. Length is enforced by the store, not here."""

    body: str = Field(..., description="Chirp text, at most 140 characters")


class ChirpResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    body: str
    author_id: int
