"""Core app configuration, record store and security."""

from chirpy.core.config import Settings, get_settings
from chirpy.core.database import ChirpyDB, get_db

__all__ = ["ChirpyDB", "Settings", "get_db", "get_settings"]
