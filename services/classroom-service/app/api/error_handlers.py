"""Exception handlers mapping every failure onto the ``{"message": ...}`` envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..domain.errors import ClassroomError, StorageError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register the domain, validation and HTTP error handlers on the app."""

    @app.exception_handler(ClassroomError)
    async def classroom_error_handler(request: Request, exc: ClassroomError) -> JSONResponse:
        if isinstance(exc, StorageError):
            logger.error("storage failure on %s: %s", request.url.path, exc.message)
        else:
            logger.warning("rejected %s: %s", request.url.path, exc.message)
        return error_response(exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = describe_validation_errors(exc)
        logger.warning("invalid request on %s: %s", request.url.path, message)
        return error_response(message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(str(exc.detail), status_code=exc.status_code)


def error_response(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def describe_validation_errors(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into ``"loc: msg"`` fragments joined by ``"; "``."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "invalid request"
