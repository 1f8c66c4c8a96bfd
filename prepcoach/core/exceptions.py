"""
Domain exceptions and their HTTP rendering.

Services raise these instead of HTTPException so the workflow can be used
outside a request; the handler registered in main maps them to responses.
"""
import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PrepCoachError(Exception):
    """Base class for all PrepCoach domain errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_SERVER_ERROR",
        status_code: int = 500,
        detail: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.detail = detail


class ValidationFailedError(PrepCoachError):
    def __init__(self, message: str = "Invalid input", detail: Optional[Any] = None) -> None:
        super().__init__(message=message, code="VALIDATION_FAILED", status_code=400, detail=detail)


class PermissionDeniedError(PrepCoachError):
    def __init__(self, message: str = "Permission denied", detail: Optional[Any] = None) -> None:
        super().__init__(message=message, code="PERMISSION_DENIED", status_code=403, detail=detail)


class NotFoundError(PrepCoachError):
    def __init__(self, message: str = "Resource not found", detail: Optional[Any] = None) -> None:
        super().__init__(message=message, code="NOT_FOUND", status_code=404, detail=detail)


class ConflictError(PrepCoachError):
    def __init__(self, message: str = "Conflict occurred", detail: Optional[Any] = None) -> None:
        super().__init__(message=message, code="CONFLICT", status_code=409, detail=detail)


class InterviewCreationError(PrepCoachError):
    """Raised when an interview could not be persisted together with its questions."""

    def __init__(self, message: str = "Failed to create interview", detail: Optional[Any] = None) -> None:
        super().__init__(message=message, code="INTERVIEW_CREATION_FAILED", status_code=500, detail=detail)


async def prepcoach_exception_handler(request: Request, exc: PrepCoachError) -> JSONResponse:
    """Render a PrepCoachError as a JSON error response."""
    if exc.status_code >= 500:
        logger.error(f"Unhandled {type(exc).__name__} on {request.url.path}: {exc.message}", exc_info=exc)
    else:
        logger.warning(f"{exc.code} on {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "error": {
                "code": exc.code,
                "message": exc.message,
                "detail": exc.detail,
            },
        },
    )
