"""Error taxonomy and classification for checklist operations."""

from enum import Enum

from pydantic import BaseModel

from checklist.core.config import Constants


class UnauthorizedError(PermissionError):
    """No authenticated caller."""


class ForbiddenError(PermissionError):
    """Caller is authenticated but lacks the role or does not own the resource."""


class InvalidInputError(ValueError):
    """Malformed, missing, or out-of-range input."""


class NotFoundError(KeyError):
    """A referenced template, assignment, completion, or user does not exist."""

    def __str__(self) -> str:
        # KeyError repr()s its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    ERR_UNAUTHORIZED = "ERR_UNAUTHORIZED"
    ERR_FORBIDDEN = "ERR_FORBIDDEN"
    ERR_VALIDATION = "ERR_VALIDATION"
    ERR_NOT_FOUND = "ERR_NOT_FOUND"
    ERR_INTERNAL = "ERR_INTERNAL"


class ErrorResponse(BaseModel):
    """Structured error response safe to return to callers."""

    code: str
    message: str
    status_code: int
    severity: ErrorSeverity


def classify_error_with_response(exception: Exception) -> ErrorResponse:
    """Classify an exception into the public error taxonomy.

    Anything that is not one of the checklist error types (including
    persistence failures) is reported as an internal error with a generic
    message so internals never reach the caller.

    Args:
        exception: The exception raised while handling a request

    Returns:
        ErrorResponse with code, message, HTTP status, and severity
    """
    if isinstance(exception, UnauthorizedError):
        return ErrorResponse(
            code=ErrorCode.ERR_UNAUTHORIZED,
            message=str(exception) or "Unauthorized",
            status_code=Constants.HTTP_UNAUTHORIZED,
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, ForbiddenError):
        return ErrorResponse(
            code=ErrorCode.ERR_FORBIDDEN,
            message=str(exception) or "Forbidden",
            status_code=Constants.HTTP_FORBIDDEN,
            severity=ErrorSeverity.MEDIUM,
        )

    if isinstance(exception, InvalidInputError):
        return ErrorResponse(
            code=ErrorCode.ERR_VALIDATION,
            message=str(exception),
            status_code=Constants.HTTP_BAD_REQUEST,
            severity=ErrorSeverity.LOW,
        )

    if isinstance(exception, NotFoundError):
        return ErrorResponse(
            code=ErrorCode.ERR_NOT_FOUND,
            message=str(exception),
            status_code=Constants.HTTP_NOT_FOUND,
            severity=ErrorSeverity.LOW,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_INTERNAL,
        message="Internal server error",
        status_code=Constants.HTTP_SERVER_ERROR,
        severity=ErrorSeverity.HIGH,
    )
