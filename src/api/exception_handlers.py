"""Exception handlers for the FastAPI application.

Every error leaves the API in the same shape::

    {"error_code": "TASK_NOT_FOUND", "message": "...", "details": {...} | null}

The HTTP client gateway relies on ``error_code`` to rebuild typed errors.
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


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error_code": error_code, "message": message, "details": details},
        headers=headers,
    )


async def handle_app_exception(request: Request, exc: AppException) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "app_exception",
        error_code=exc.error_code.value,
        status_code=exc.status_code,
        path=request.url.path,
        message=exc.message,
    )
    return error_response(exc.status_code, exc.error_code.value, exc.message, exc.details)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(
        exc.status_code,
        "HTTP_ERROR",
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = _field_errors(exc)
    logger.info("request_validation_failed", path=request.url.path, fields=[f["field"] for f in fields])
    return error_response(
        422, ErrorCode.VALIDATION_ERROR.value, "Request validation failed", fields
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    logger.error(
        "unhandled_exception",
        error_type=type(exc).__name__,
        error=str(exc),
        request_id=request_id,
        exc_info=True,
    )
    message = "An unexpected error occurred" if settings.is_production else str(exc)
    return error_response(
        500, ErrorCode.INTERNAL_ERROR.value, message, {"request_id": request_id}
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""
    app.add_exception_handler(AppException, handle_app_exception)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)
