"""Pydantic request/response schemas."""

from chirpy.schemas.auth import LoginRequest, LoginResponse, TokenResponse
from chirpy.schemas.chirps import ChirpCreateRequest, ChirpResponse
from chirpy.schemas.health import HealthResponse
from chirpy.schemas.polka import PolkaEventData, PolkaWebhookRequest
from chirpy.schemas.users import UserCredentialsRequest, UserResponse

__all__ = [
    "ChirpCreateRequest",
    "ChirpResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "PolkaEventData",
    "PolkaWebhookRequest",
    "TokenResponse",
    "UserCredentialsRequest",
    "UserResponse",
]
