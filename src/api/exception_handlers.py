"""Exception handlers for the FastAPI application.

Every error leaves the API in one shape: ``{"error_code", "message", "details"}``.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.exceptions import AppException, ErrorCode

logger = structlog.get_logger()

# Seconds a client should wait before retrying when the store is unavailable
STORE_RETRY_AFTER_SECONDS = 5


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a response in the standard error shape."""
    return JSONResponse(
        status_code=status_code,
        content={"error_code": error_code, "message": message, "details": details},
        headers=headers,
    )


def _headers_for(exc: AppException) -> dict[str, str] | None:
    if exc.error_code == ErrorCode.STORE_UNAVAILABLE:
        return {"Retry-After": str(STORE_RETRY_AFTER_SECONDS)}
    if exc.status_code == 401:
        return {"WWW-Authenticate": "Bearer"}
    return None


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render domain failures with their stable error code."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "app_exception",
        error_code=exc.error_code.value,
        message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return error_response(
        exc.status_code,
        exc.error_code.value,
        exc.message,
        exc.details,
        headers=_headers_for(exc),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Unknown routes, wrong methods and other framework-level errors."""
    return error_response(exc.status_code, "HTTP_ERROR", str(exc.detail), headers=exc.headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Request bodies or parameters that fail schema validation."""
    errors = exc.errors()
    logger.info("validation_error", path=request.url.path, errors=errors)
    return error_response(
        422,
        ErrorCode.VALIDATION_ERROR.value,
        "Request validation failed",
        [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in errors
        ],
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without leaking internals in production."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        request_id=request_id,
        exc_info=True,
    )

    message = "An unexpected error occurred" if settings.is_production else str(exc)
    return error_response(
        500,
        ErrorCode.INTERNAL_ERROR.value,
        message,
        {"request_id": request_id},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)
