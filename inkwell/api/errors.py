"""
Boundary error handling.

Domain errors are raised where they are detected; these handlers turn
them (and anything unexpected) into the uniform error envelope.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inkwell.api.responses import fail
from inkwell.config import Settings
from inkwell.core.errors import ApiError
from inkwell.integrations.sentry import capture_exception

logger = logging.getLogger(__name__)

_LOCATIONS = ("body", "query", "path", "header", "cookie")
_VALUE_ERROR_PREFIX = "Value error, "


def validation_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into [{field, message}]."""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in _LOCATIONS:
            field = ".".join(loc[1:]) or loc[0]
        else:
            field = ".".join(loc)
        message = err.get("msg", "Invalid value")
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]
        errors.append({"field": field, "message": message})
    return errors


def install_error_handlers(app: FastAPI, settings: Settings) -> None:
    """Register the envelope-producing exception handlers on `app`."""

    def respond(status_code: int, body: dict[str, Any]) -> JSONResponse:
        return JSONResponse(status_code=status_code, content=body)

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{exc.message} on {request.method} {request.url.path}")
        return respond(exc.status_code, fail(exc.message, exc.errors))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return respond(400, fail("Validation failed", validation_errors(exc)))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = f"Route {request.url.path} not found"
        else:
            message = str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content=fail(message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        capture_exception(exc, path=request.url.path, method=request.method)

        body = fail("Internal Server Error")
        if not settings.is_production:
            body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return respond(500, body)
