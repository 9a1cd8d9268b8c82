"""
Error handling utilities for Lambda functions.

Provides standardized error bodies with error codes and the HTTP status
each code maps to.
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Application error with error code and message.

    Raised by handlers and converted into an HTTP response by the API router.
    """

    def __init__(self, error_code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return status_code_for(self.error_code)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for the JSON response body."""
        return {
            "error": self.message,
            "errorCode": self.error_code,
            **self.details,
        }


class ErrorCode:
    """Standard error codes for the application."""

    # Authorization errors
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"

    # Resource errors
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

    # System errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


_STATUS_CODES: Dict[str, int] = {
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.ALREADY_EXISTS: 409,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.PAYLOAD_TOO_LARGE: 413,
}


def status_code_for(error_code: str) -> int:
    """Return the HTTP status for an error code (500 for anything unmapped)."""
    return _STATUS_CODES.get(error_code, 500)


def handle_error(error: Exception) -> Dict[str, Any]:
    """
    Convert exception to standardized error body.

    Args:
        error: Exception to handle

    Returns:
        Error dictionary for the JSON response
    """
    if isinstance(error, AppError):
        return error.to_dict()

    # Unexpected error - never leak internals to the client
    return {
        "error": "An unexpected error occurred. Please try again.",
        "errorCode": ErrorCode.INTERNAL_ERROR,
    }
