"""
Global error translator.

Every exception that escapes a route ends up here and leaves as the
failure envelope, exactly once.  4xx are logged at WARNING, 5xx at
ERROR with the traceback.  Tracebacks reach the response body only
outside production.
"""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from typerone.core.config import settings
from typerone.core.errors import AppError
from typerone.core.responses import error_response
from typerone.services.user_service import duplicate_field

logger = logging.getLogger(__name__)

_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def _log_client_error(request: Request, status_code: int, message: str) -> None:
    logger.warning("%s %s → %d %s", request.method, request.url.path, status_code, message)


def validation_details(exc: RequestValidationError) -> dict[str, list[str]]:
    """Collapse pydantic errors into ``{field: [messages]}``.

    The location prefix (body, query, path, ...) is dropped.
    """
    details: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in _LOCATIONS:
            loc = loc[1:]
        field = ".".join(loc) or "body"
        details.setdefault(field, []).append(err.get("msg", "Invalid value"))
    return details


async def app_error_handler(request: Request, exc: AppError):
    status_code = exc.status_code
    if status_code >= 500:
        logger.error("%s %s → %d %s", request.method, request.url.path, status_code, exc.message)
    else:
        _log_client_error(request, status_code, exc.message)
    return error_response(status_code, exc.message, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = validation_details(exc)
    _log_client_error(request, status.HTTP_400_BAD_REQUEST, f"Validation failed: {details}")
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code >= 500:
        logger.error("%s %s → %d %s", request.method, request.url.path, exc.status_code, message)
    else:
        _log_client_error(request, exc.status_code, message)
    response = error_response(exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def integrity_error_handler(request: Request, exc: IntegrityError):
    field = duplicate_field(exc)
    message = f"Duplicate {field}"
    _log_client_error(request, status.HTTP_409_CONFLICT, message)
    return error_response(
        status.HTTP_409_CONFLICT, message, {field: [f"{field.capitalize()} already exists"]},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc,
    )
    if settings.is_production:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
    stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Internal server error", error=stack)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
