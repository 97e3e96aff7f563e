"""
Exception Handlers.

Every error leaves the API in the ErrorResponse envelope:

    {"success": false, "data": null,
     "error": {"code": ..., "message": ..., "details": ...},
     "metadata": {"timestamp": ..., "request_id": ...}}

Application errors map to their status through EXCEPTION_STATUS_MAP,
request validation failures answer 400, and anything unexpected answers
500 without internal detail.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from notekeeper.backend.core.config import get_app_config
from notekeeper.backend.core.exceptions import (
    ApplicationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    ConflictError: 409,
    DatabaseError: 500,
    StorageError: 500,
}


def _get_request_id(request: Request) -> str | None:
    """Request id set by the middleware, else the incoming header."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("x-request-id")


def _detailed_errors() -> bool:
    return get_app_config().features.api_detailed_errors


def _error_response(request: Request, status_code: int, error: ErrorDetail) -> JSONResponse:
    response = ErrorResponse(
        error=error,
        metadata=ResponseMetadata(request_id=_get_request_id(request)),
    )
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))


def _request_context(request: Request) -> dict[str, str | None]:
    return {
        "path": request.url.path,
        "method": request.method,
        "request_id": _get_request_id(request),
    }


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    """ApplicationError subclasses; unmapped subclasses answer 500."""
    status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Server error" if status_code >= 500 else "Client error",
        extra={"code": exc.code, "message": exc.message, "status": status_code, **_request_context(request)},
    )

    error = ErrorDetail(code=exc.code, message=exc.message)
    if isinstance(exc, ValidationError) and exc.details:
        error.details = exc.details
    return _error_response(request, status_code, error)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Malformed bodies, path ids and query values.

    Field-level details are included when the api_detailed_errors
    feature flag is on.
    """
    errors = exc.errors()
    logger.warning(
        "Request validation failed",
        extra={"error_count": len(errors), **_request_context(request)},
    )

    details = None
    if _detailed_errors():
        details = {
            "validation_errors": [
                {
                    "field": ".".join(str(part) for part in err.get("loc", [])),
                    "message": err.get("msg", "Validation error"),
                    "type": err.get("type", "unknown"),
                }
                for err in errors
            ]
        }
    error = ErrorDetail(code="VAL_REQUEST_INVALID", message="Request validation failed", details=details)
    return _error_response(request, 400, error)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception",
        extra={"exception_type": type(exc).__name__, **_request_context(request)},
    )
    error = ErrorDetail(code="SYS_INTERNAL_ERROR", message="An unexpected error occurred")
    return _error_response(request, 500, error)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.debug("Exception handlers registered")
