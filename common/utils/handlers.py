"""
Central exception handlers.

Renders every failure through error_response() so clients always see
{"success": false, "error": {...}}. Storage errors are translated by type:
duplicate keys become 409, timeouts and lost connections become 503, and
anything unexpected is logged with its traceback and reported as a
generic 500.

Usage:
    app = FastAPI()
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import (
    AutoReconnect,
    ConnectionFailure,
    DuplicateKeyError,
    NetworkTimeout,
    ServerSelectionTimeoutError,
)
from starlette.exceptions import HTTPException as StarletteHTTPException

from common.utils.exceptions import (
    APIException,
    ConflictException,
    InternalServerException,
    ServiceUnavailableException,
)
from common.utils.responses import error_response

logger = logging.getLogger(__name__)

STORAGE_UNAVAILABLE_ERRORS = (
    ServerSelectionTimeoutError,
    NetworkTimeout,
    AutoReconnect,
    ConnectionFailure,
)

_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    500: "INTERNAL_ERROR",
    503: "SERVICE_UNAVAILABLE",
}


def _render(exc: APIException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.message, code=exc.code, details=exc.details),
        headers=exc.headers,
    )


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Handle the typed API exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}")
    return _render(exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle plain HTTP exceptions raised by the framework (404 routes, 405)."""
    if exc.status_code == 404:
        message = "API endpoint not found"
    else:
        message = str(exc.detail) if exc.detail else f"HTTP {exc.status_code}"

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(message, code=_STATUS_CODES.get(exc.status_code, "ERROR")),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request body/query validation errors as 400."""
    errors = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", []) if part not in ("body", "query", "path")]
        errors[".".join(loc) or "body"] = error.get("msg", "Invalid value")

    logger.info(f"Validation error on {request.url.path}: {len(errors)} issues")

    return JSONResponse(
        status_code=400,
        content=error_response("Validation failed", code="VALIDATION_ERROR", details={"errors": errors}),
    )


async def duplicate_key_handler(request: Request, exc: DuplicateKeyError) -> JSONResponse:
    """Unique-index violations that escaped a service become 409."""
    logger.warning(f"Duplicate key on {request.url.path}")
    return _render(ConflictException("Duplicate entry found", code="DUPLICATE_ENTRY"))


async def storage_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    """Timeouts and lost connections to MongoDB become 503."""
    logger.error(f"Database unavailable on {request.method} {request.url.path}: {type(exc).__name__}")
    return _render(ServiceUnavailableException("Database temporarily unavailable. Please try again."))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without leaking detail."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=True,
    )
    return _render(InternalServerException())


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)
    for error_type in STORAGE_UNAVAILABLE_ERRORS:
        app.add_exception_handler(error_type, storage_unavailable_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
