"""User registration and self-service update."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from chirpy.api.v1.auth import AuthorizationHeader, get_auth_guard
from chirpy.core.database import ChirpyDB, get_db
from chirpy.models import User
from chirpy.schemas.users import UserCredentialsRequest, UserResponse
from chirpy.services.auth_guard import AuthGuard

router = APIRouter()


def _to_response(user: User) -> UserResponse:
    return UserResponse(id=user.id, email=user.email, is_chirpy_red=user.is_chirpy_red)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCredentialsRequest,
    db: Annotated[ChirpyDB, Depends(get_db)],
) -> UserResponse:
    return _to_response(db.create_user(body.email, body.password))


@router.put("", response_model=UserResponse)
def update_user(
    body: UserCredentialsRequest,
    guard: Annotated[AuthGuard, Depends(get_auth_guard)],
    authorization: AuthorizationHeader = None,
) -> UserResponse:
    """Update the email and password of the user owning the access token."""
    return _to_response(guard.update_user(authorization, body.email, body.password))
