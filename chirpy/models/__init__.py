"""Stored record types."""

from chirpy.models.base import Record
from chirpy.models.chirp import Chirp
from chirpy.models.user import User

__all__ = ["Chirp", "Record", "User"]
