"""Readiness endpoint with record store state."""

from typing import Annotated

from fastapi import APIRouter, Depends

from chirpy.api.v1.auth import get_app_settings
from chirpy.core.config import Settings
from chirpy.core.database import ChirpyDB, get_db
from chirpy.schemas.health import HealthResponse

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse)
def get_health(
    db: Annotated[ChirpyDB, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HealthResponse:
    """Used by load balancers and monitoring."""
    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database="closed" if db.closed else "open",
    )
