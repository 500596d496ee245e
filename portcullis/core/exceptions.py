"""
Global exception handling for the application.
Business operations raise typed AppError subclasses; handlers turn them into a
stable error body: {"error": {"code", "message", "details", "path"}}.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)

NOT_INVITED_MESSAGE = "This email is not invited, please contact Admin"


class AppError(Exception):
    """Base class for all application exceptions."""

    code = "ERROR"

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationFailedException(AppError):
    """Input passed schema validation but breaks a business rule."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Invalid request", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class ConflictException(AppError):
    """Duplicate or still-referenced resource."""

    code = "CONFLICT"

    def __init__(self, message: str = "Conflict", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_409_CONFLICT, details)


class EntityNotFoundException(AppError):
    """Resource not found error."""

    code = "NOT_FOUND"

    def __init__(self, message: str = "Entity not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class NotInvitedException(AppError):
    """Signup without a usable invitation.

    The caller always sees the same message; ``reason`` (absent, expired,
    used, race_lost) is kept for logs and tests only.
    """

    code = "NOT_INVITED"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(NOT_INVITED_MESSAGE, status.HTTP_400_BAD_REQUEST)


class UnauthorizedException(AppError):
    """Authentication failure error."""

    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, details)


class ForbiddenException(AppError):
    """Authorization failure error."""

    code = "FORBIDDEN"

    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_403_FORBIDDEN, details)


class InternalInconsistencyException(AppError):
    """State that should be impossible, e.g. a user vanishing right after insert."""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "An unexpected error occurred. Please try again later."):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


def _error_body(request: Request, code: str, message: str, details: Optional[Dict[str, Any]] = None) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details or {},
            "path": request.url.path,
        }
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Map typed application errors to their status code and stable code."""
    if exc.status_code >= 500:
        logger.error("Application error", code=exc.code, message=exc.message, path=request.url.path)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedException) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.code, exc.message, exc.details),
        headers=headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report every field problem of a malformed request body."""
    fields = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(request, ValidationFailedException.code, "Invalid request", {"fields": fields}),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""
    logger.exception("Unhandled exception", path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            request,
            InternalInconsistencyException.code,
            "An unexpected error occurred. Please try again later.",
        ),
    )
