"""Stored chirp record."""

from pydantic import Field

from chirpy.models.base import Record


class Chirp(Record):
    """Short post. author_id is not checked against existing users."""

    id: int = Field(..., ge=1)
    body: str
    author_id: int
