"""Map core errors to JSON HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from chirpy.core.errors import ChirpyError

logger = logging.getLogger(__name__)


def error_response(message: str) -> dict[str, str]:
    return {"error": message}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ChirpyError)
    async def chirpy_error_handler(request: Request, exc: ChirpyError) -> JSONResponse:
        headers = None
        if exc.status_code == 401:
            headers = {"WWW-Authenticate": "Bearer"}
        if exc.status_code >= 500:
            logger.error(
                "Request failed",
                extra={"path": request.url.path, "reason": exc.message[:500]},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message),
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=error_response("Something went wrong"),
        )
