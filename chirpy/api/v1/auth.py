"""Login, refresh and revoke endpoints, and the shared auth dependencies."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request, Response, status

from chirpy.core.config import Settings
from chirpy.schemas.auth import LoginRequest, LoginResponse, TokenResponse
from chirpy.services.auth_guard import AuthGuard

router = APIRouter()

AuthorizationHeader = Annotated[str | None, Header()]


def get_auth_guard(request: Request) -> AuthGuard:
    """Dependency: the AuthGuard built by the app lifespan."""
    return request.app.state.auth_guard


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    guard: Annotated[AuthGuard, Depends(get_auth_guard)],
) -> LoginResponse:
    """
    Authenticate with email and password; returns an access and a refresh token.
    Send the access token as: Authorization: Bearer <token>
    """
    result = guard.login(body.email, body.password)
    return LoginResponse(
        id=result.user.id,
        email=result.user.email,
        is_chirpy_red=result.user.is_chirpy_red,
        token=result.access_token,
        refresh_token=result.refresh_token,
    )


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    guard: Annotated[AuthGuard, Depends(get_auth_guard)],
    authorization: AuthorizationHeader = None,
) -> TokenResponse:
    """Exchange the refresh token in the Authorization header for a new access token."""
    return TokenResponse(token=guard.refresh(authorization))


@router.post("/revoke", status_code=status.HTTP_204_NO_CONTENT)
def revoke(
    guard: Annotated[AuthGuard, Depends(get_auth_guard)],
    authorization: AuthorizationHeader = None,
) -> Response:
    guard.revoke(authorization)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
