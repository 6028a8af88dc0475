"""
Centralized error responder.

Every failure leaves the API as `{"message": str}` with a status code:
- AppError -> its own status (dispatched on `kind` for logging)
- RequestValidationError -> 400 with "message: field, ..." in field order
- HTTPException (unknown route, wrong method) -> its status
- anything else -> 500 with a generic message, no internals leaked
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .errors import AppError, ErrorKind, format_field_errors

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"

_VALUE_ERROR_PREFIX = "Value error, "


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


def field_errors(errors: list[dict]) -> list[tuple[str, str]]:
    """
    Turn pydantic/FastAPI error dicts into (field, message) pairs.
    """
    pairs: list[tuple[str, str]] = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "header")]
        field = ".".join(loc) or "body"
        message = str(err.get("msg") or "Invalid value")
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]
        pairs.append((field, message))
    return pairs


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.kind is ErrorKind.AUTH:
        logger.warning("auth_error path=%s status=%s message=%s", request.url.path, exc.status_code, exc.message)
    else:
        logger.info(
            "request_failed kind=%s path=%s status=%s message=%s",
            exc.kind.value,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = format_field_errors(field_errors(list(exc.errors())))
    logger.info("validation_failed path=%s message=%s", request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": message},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error path=%s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": GENERIC_ERROR_MESSAGE},
    )
