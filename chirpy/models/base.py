"""Shared pydantic base for stored records."""

from pydantic import BaseModel, ConfigDict


class Record(BaseModel):
    """Immutable stored record. Mutations go through model_copy(update=...)."""

    model_config = ConfigDict(frozen=True, extra="ignore")
