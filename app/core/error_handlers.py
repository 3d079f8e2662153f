"""
Global error handlers for the Payroll Management System.

Every error leaves the API as the same JSON document:
{"error", "status_code", "detail", "error_code", "error_data"?, "timestamp", "request_id"?}
"""

import logging
import traceback
from typing import Dict, Any
from datetime import datetime, timezone

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError, IntegrityError, OperationalError

from app.core.database import integrity_violation
from app.core.exceptions import BaseAPIException, debug_details
from app.core.config import settings

logger = logging.getLogger(__name__)

# (status, error code, detail) per integrity_violation() kind
INTEGRITY_RESPONSES = {
    "payroll_period": (status.HTTP_409_CONFLICT, "DUPLICATE_PAYROLL", "Payroll already processed for this period"),
    "unique": (status.HTTP_409_CONFLICT, "DUPLICATE_RESOURCE", "Resource already exists with the provided data"),
    "foreign_key": (status.HTTP_400_BAD_REQUEST, "INVALID_REFERENCE", "Referenced resource does not exist"),
    "other": (status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR", "Data integrity constraint violated"),
}


def create_error_response(
    status_code: int,
    detail: str,
    error_code: str = None,
    error_data: Dict[str, Any] = None,
    request_id: str = None
) -> JSONResponse:
    """Render the standard error document."""
    content = {
        "error": True,
        "status_code": status_code,
        "detail": detail,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    if error_code:
        content["error_code"] = error_code
    if error_data:
        content["error_data"] = error_data
    if request_id:
        content["request_id"] = request_id

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(content)
    )


def _request_context(request: Request) -> Dict[str, Any]:
    return {
        "request_id": getattr(request.state, "request_id", None),
        "path": request.url.path,
        "method": request.method
    }


async def base_api_exception_handler(request: Request, exc: BaseAPIException) -> JSONResponse:
    """Domain errors raised by the services."""
    context = _request_context(request)

    logger.warning(
        f"API Exception: {exc.error_code or 'UNKNOWN'} - {exc.detail}",
        extra={"status_code": exc.status_code, "error_code": exc.error_code, **context}
    )

    return create_error_response(
        status_code=exc.status_code,
        detail=exc.detail,
        error_code=exc.error_code,
        error_data=exc.error_data,
        request_id=context["request_id"]
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors such as unknown paths and wrong methods."""
    context = _request_context(request)

    logger.warning(f"HTTP Exception: {exc.status_code} - {exc.detail}", extra=context)

    return create_error_response(
        status_code=exc.status_code,
        detail=exc.detail,
        error_code="HTTP_EXCEPTION",
        request_id=context["request_id"]
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies, paths and query parameters."""
    context = _request_context(request)

    validation_errors = [
        {
            "field": " -> ".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    logger.warning(
        f"Validation Error: {len(validation_errors)} validation error(s)",
        extra={"validation_errors": validation_errors, **context}
    )

    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail="Request validation failed",
        error_code="VALIDATION_ERROR",
        error_data={"validation_errors": validation_errors},
        request_id=context["request_id"]
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Database errors that escaped the services' own handling."""
    context = _request_context(request)

    if isinstance(exc, IntegrityError):
        status_code, error_code, detail = INTEGRITY_RESPONSES[integrity_violation(exc)]
    elif isinstance(exc, OperationalError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        error_code = "DATABASE_UNAVAILABLE"
        detail = "Database is unavailable"
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        error_code = "DATABASE_ERROR"
        detail = "Database error occurred"

    logger.error(
        f"Database Error: {error_code} - {detail}",
        extra={"exception_type": type(exc).__name__, "error_details": str(exc), **context}
    )

    return create_error_response(
        status_code=status_code,
        detail=detail,
        error_code=error_code,
        error_data=debug_details(exc),
        request_id=context["request_id"]
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else; the traceback only leaves the server in debug mode."""
    context = _request_context(request)
    trace = traceback.format_exc()

    logger.error(
        f"Unhandled Exception: {type(exc).__name__} - {str(exc)}",
        extra={"exception_type": type(exc).__name__, "traceback": trace, **context}
    )

    if settings.debug:
        detail = f"Internal server error: {str(exc)}"
        error_data = {**debug_details(exc), "traceback": trace.split("\n")}
    else:
        detail = "An unexpected error occurred. Please try again later."
        error_data = None

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
        error_code="INTERNAL_SERVER_ERROR",
        error_data=error_data,
        request_id=context["request_id"]
    )


ERROR_HANDLERS = {
    BaseAPIException: base_api_exception_handler,
    StarletteHTTPException: http_exception_handler,
    RequestValidationError: validation_exception_handler,
    SQLAlchemyError: sqlalchemy_exception_handler,
    Exception: generic_exception_handler,
}


def register_error_handlers(app):
    """Register all error handlers with the FastAPI app."""
    for exception_class, handler in ERROR_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)

    logger.info("Error handlers registered successfully")
