"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chirpy.api.errors import register_exception_handlers
from chirpy.api.v1 import router as v1_router
from chirpy.core.config import Settings, get_settings
from chirpy.core.database import ChirpyDB
from chirpy.core.tokens import TokenService
from chirpy.services.auth_guard import AuthGuard

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app; the record store is opened on startup and closed on shutdown."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        db_path = Path(settings.DATABASE_PATH)
        if settings.RESET_DATABASE_ON_START:
            logger.warning("Deleting database file before start", extra={"path": str(db_path)})
            db_path.unlink(missing_ok=True)
        db = ChirpyDB.open(db_path, bcrypt_rounds=settings.BCRYPT_ROUNDS)
        tokens = TokenService(
            settings.JWT_SECRET.get_secret_value(),
            access_ttl=timedelta(seconds=settings.ACCESS_TOKEN_TTL_SECONDS),
            refresh_ttl=timedelta(hours=settings.REFRESH_TOKEN_TTL_HOURS),
        )
        app.state.settings = settings
        app.state.db = db
        app.state.auth_guard = AuthGuard(db, tokens, settings.POLKA_KEY.get_secret_value())
        try:
            yield
        finally:
            db.close()

    app = FastAPI(
        title="Chirpy API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(v1_router, prefix=settings.API_PREFIX)
    return app


app = create_app()
