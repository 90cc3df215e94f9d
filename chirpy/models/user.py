"""Stored user record."""

from pydantic import Field

from chirpy.models.base import Record


class User(Record):
    """
    Registered user.

    password_hash is always a bcrypt hash; API responses must drop it.
    is_chirpy_red only ever flips from False to True (Polka upgrade).
    """

    id: int = Field(..., ge=1)
    email: str
    password_hash: str
    is_chirpy_red: bool = False
