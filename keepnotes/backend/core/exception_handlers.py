"""
Exception Handlers.

FastAPI exception handlers that convert exceptions to the standard error
envelope {error, message, code, errors?}. All exceptions are logged;
internals and stack traces never reach the client.

Usage:
    from keepnotes.backend.core.exception_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from keepnotes.backend.core.exceptions import (
    AccountDeactivatedError,
    ApplicationError,
    AuthenticationError,
    ConflictError,
    DatabaseError,
    IncorrectPasswordError,
    InvalidCredentialsError,
    NoOpChangeError,
    NotFoundError,
)
from keepnotes.backend.core.logging import get_logger
from keepnotes.backend.schemas.base import ErrorResponse, FieldError

logger = get_logger(__name__)

# Map exception types to HTTP status codes
EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    AuthenticationError: 401,
    InvalidCredentialsError: 401,
    IncorrectPasswordError: 400,
    AccountDeactivatedError: 403,
    NoOpChangeError: 400,
    ConflictError: 409,
    DatabaseError: 503,
}

# Request locations FastAPI prefixes onto validation error paths
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _get_request_id(request: Request) -> str | None:
    """Extract request ID from request state or headers."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("x-request-id")


def _error_json(status_code: int, response: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json", exclude_none=True),
    )


def _field_name(loc: tuple | list) -> str:
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts)


async def application_error_handler(
    request: Request,
    exc: ApplicationError,
) -> JSONResponse:
    """
    Handle all ApplicationError subclasses.

    Converts application exceptions to the error envelope with the status
    code registered for the exact exception type.
    """
    status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)
    request_id = _get_request_id(request)

    log_extra = {
        "code": exc.code,
        "error_message": exc.message,
        "status": status_code,
        "path": request.url.path,
        "method": request.method,
    }
    if request_id:
        log_extra["request_id"] = request_id

    if status_code >= 500:
        logger.error("Server error", extra=log_extra)
    else:
        logger.warning("Client error", extra=log_extra)

    response = ErrorResponse(
        error=exc.title,
        message=exc.message,
        code=exc.code,
    )
    json_response = _error_json(status_code, response)
    if status_code == 401:
        json_response.headers["WWW-Authenticate"] = "Bearer"
    return json_response


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle FastAPI/Pydantic request validation errors.

    Each pydantic error becomes one entry of the "errors" list.
    """
    request_id = _get_request_id(request)

    raw_errors = exc.errors()
    errors = [
        FieldError(
            field=_field_name(err.get("loc", [])),
            message=err.get("msg", "Validation error"),
            type=err.get("type", "unknown"),
        )
        for err in raw_errors
    ]

    logger.warning(
        "Request validation failed",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_count": len(raw_errors),
            "fields": [error.field for error in errors],
            "request_id": request_id,
        },
    )

    response = ErrorResponse(
        error="Validation failed",
        message="Request validation failed",
        code="VAL_REQUEST_INVALID",
        errors=errors,
    )
    return _error_json(422, response)


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Wrap framework-level HTTP errors (unknown route, wrong method) in the envelope."""
    response = ErrorResponse(
        error="Request failed",
        message=str(exc.detail),
        code=f"HTTP_{exc.status_code}",
    )
    json_response = _error_json(exc.status_code, response)
    if exc.headers:
        json_response.headers.update(exc.headers)
    return json_response


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Logs the full exception and returns a generic error response.
    """
    request_id = _get_request_id(request)

    logger.exception(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "request_id": request_id,
        },
    )

    response = ErrorResponse(
        error="Internal server error",
        message="An unexpected error occurred. Please try again.",
        code="SYS_INTERNAL_ERROR",
    )
    return _error_json(500, response)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.debug("Exception handlers registered")
