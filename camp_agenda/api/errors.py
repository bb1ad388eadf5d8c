"""Error types and handlers for the agenda service.

Every error leaves the service as {"error": <message>, "details": <optional>}
so the agenda client can surface the message verbatim.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from camp_agenda.config.settings import settings


class APIError(Exception):
    """Expected, operational API failure with an HTTP status."""

    def __init__(self, status_code: int, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details


def _field_name(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc if part not in {"body", "query", "path"}]
    return ".".join(parts)


async def api_error_handler(_request: Request, exc: APIError) -> JSONResponse:
    content: dict[str, Any] = {"error": exc.message}
    # Field-level validation detail is always returned; other details only in development
    if exc.details is not None and (exc.status_code == 422 or settings.is_development):
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": _field_name(tuple(err.get("loc", ()))), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    logger.info(f"[API] Validation failed for {request.method} {request.url.path}: {details}")
    return JSONResponse(status_code=422, content={"error": "Validation failed", "details": details})


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"[API] Unexpected error for {request.method} {request.url.path}: {exc}")
    content: dict[str, Any] = {"error": "An unexpected error occurred"}
    if settings.is_development:
        content["details"] = str(exc)
    return JSONResponse(status_code=500, content=content)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
