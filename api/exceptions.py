"""
Custom exceptions and error handlers for the API.

Core errors from greenlight are translated here into the structured JSON
envelope; routers simply let them propagate.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.logging_config import logger
from greenlight.errors import ErrorKind, GreenlightError

SERVER_ERROR_MESSAGE = "the server encountered a problem and could not process your request"
NOT_FOUND_MESSAGE = "the requested resource could not be found"
EDIT_CONFLICT_MESSAGE = "unable to update the record due to an edit conflict, please try again"


class APIError(HTTPException):
    """Base API error with structured error response."""

    def __init__(
        self,
        status_code: int,
        error: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.error = error
        self.message = message
        self.details = details
        super().__init__(status_code=status_code, detail=message)


class NotFoundError(APIError):
    """Resource not found error."""

    def __init__(self, message: str = NOT_FOUND_MESSAGE):
        super().__init__(status_code=404, error="not_found", message=message)


class BadRequestError(APIError):
    """Malformed request error."""

    def __init__(self, message: str):
        super().__init__(status_code=400, error="bad_request", message=message)


class EditConflictError(APIError):
    """The record changed underneath the client."""

    def __init__(self):
        super().__init__(status_code=409, error="edit_conflict", message=EDIT_CONFLICT_MESSAGE)


class ValidationError(APIError):
    """Request validation error."""

    def __init__(self, details: Dict[str, str]):
        super().__init__(
            status_code=422,
            error="validation_error",
            message="one or more fields failed validation",
            details=details,
        )


class ServerError(APIError):
    """Unexpected server-side failure; never carries internal detail."""

    def __init__(self):
        super().__init__(status_code=500, error="internal_error", message=SERVER_ERROR_MESSAGE)


def to_api_error(exc: GreenlightError) -> APIError:
    """Map a core error onto its HTTP representation."""
    if exc.kind is ErrorKind.validation_failed:
        return ValidationError(exc.errors)
    if exc.kind is ErrorKind.invalid_runtime_format:
        return ValidationError({"runtime": exc.message})
    if exc.kind is ErrorKind.record_not_found:
        return NotFoundError()
    if exc.kind is ErrorKind.edit_conflict:
        return EditConflictError()
    if exc.kind is ErrorKind.malformed_input:
        return BadRequestError(exc.message)
    return ServerError()


def _render(exc: APIError) -> JSONResponse:
    content = {
        "error": exc.error,
        "message": exc.message,
    }
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions and return structured JSON response."""
    return _render(exc)


async def greenlight_error_handler(request: Request, exc: GreenlightError) -> JSONResponse:
    """Handle core errors, logging store faults with their detail."""
    if exc.kind is ErrorKind.storage_fault:
        cause = exc.__cause__
        logger.error(
            f"Server error: {request.method} {request.url.path} {exc.message}"
            + (f": {cause}" if cause else "")
        )
    elif exc.kind is ErrorKind.edit_conflict:
        logger.warning(f"Edit conflict: {request.method} {request.url.path} {exc.message}")
    return _render(to_api_error(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap router-level 404/405 responses in the standard envelope."""
    if exc.status_code == 404:
        return _render(NotFoundError())
    if exc.status_code == 405:
        error = APIError(
            status_code=405,
            error="method_not_allowed",
            message=f"the {request.method} method is not supported for this resource",
        )
        error.headers = exc.headers
        return _render(error)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "http_error", "message": str(exc.detail)},
        headers=exc.headers,
    )
