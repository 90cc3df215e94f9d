"""Request/response schemas for user registration and update."""

from pydantic import BaseModel, ConfigDict, Field


class UserCredentialsRequest(BaseModel):
    """Body of POST /users and PUT /users."""

    email: str = Field(..., min_length=1, max_length=255, description="Email address")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class UserResponse(BaseModel):
    """User as returned to clients (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    is_chirpy_red: bool
