"""Request/response schemas for login, refresh and revoke."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., min_length=1, max_length=255, description="Registered email")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class LoginResponse(BaseModel):
    """User fields plus the access and refresh tokens issued at login."""

    id: int
    email: str
    is_chirpy_red: bool
    token: str = Field(..., description="JWT access token (1 hour)")
    refresh_token: str = Field(..., description="JWT refresh token (60 days)")


class TokenResponse(BaseModel):
    """New access token returned by /refresh."""

    token: str = Field(..., description="JWT access token")
