"""
Input validation utilities.

Validates request bodies, query parameters and upload metadata.
"""

from typing import Any, Dict, Iterable, List, Optional

from .errors import AppError, ErrorCode

DEFAULT_PAGE_LIMIT = 50
MAX_PAGE_LIMIT = 100

MAX_UPLOAD_BYTES = 50 * 1024 * 1024

ALLOWED_IMAGE_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"]
ALLOWED_VIDEO_TYPES = ["video/mp4", "video/quicktime", "video/webm"]

MEMBER_ROLES = ("owner", "admin", "member")
MEMBER_STATUSES = ("active", "pending", "inactive")


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(data: Dict[str, Any], fields: Iterable[str]) -> None:
    """
    Validate that all required fields are present and non-blank.

    Args:
        data: Request body
        fields: Required field names, reported together in the error message

    Raises:
        AppError: INVALID_INPUT naming every required field
    """
    fields = list(fields)
    missing_fields = [field for field in fields if _is_missing(data.get(field))]

    if missing_fields:
        raise AppError(
            ErrorCode.INVALID_INPUT,
            f"Missing required fields: {', '.join(fields)}",
            {"missingFields": missing_fields},
        )


def require_field(data: Dict[str, Any], field: str) -> Any:
    """Return a single required field or raise `{field} is required`."""
    value = data.get(field)
    if _is_missing(value):
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} is required")
    return value


def parse_limit(raw: Optional[str], default: int = DEFAULT_PAGE_LIMIT) -> int:
    """
    Parse a `limit` query parameter.

    Raises:
        AppError: If the value is not an integer between 1 and 100
    """
    if raw is None or raw == "":
        return default
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        limit = 0
    if limit < 1 or limit > MAX_PAGE_LIMIT:
        raise AppError(
            ErrorCode.INVALID_INPUT,
            f"Invalid limit parameter. Must be between 1 and {MAX_PAGE_LIMIT}",
        )
    return limit


def validate_upload_size(size: Any) -> int:
    """Validate a declared upload size in bytes."""
    try:
        size_bytes = int(size or 0)
    except (TypeError, ValueError):
        raise AppError(ErrorCode.INVALID_INPUT, "size must be a number of bytes")
    if size_bytes < 0:
        raise AppError(ErrorCode.INVALID_INPUT, "size must be a number of bytes")
    if size_bytes > MAX_UPLOAD_BYTES:
        raise AppError(
            ErrorCode.PAYLOAD_TOO_LARGE,
            "File size exceeds 50MB",
            {"maxBytes": MAX_UPLOAD_BYTES},
        )
    return size_bytes


def validate_chat_media_type(mime_type: Optional[str]) -> str:
    """Validate a chat attachment mime type."""
    if mime_type not in ALLOWED_IMAGE_TYPES + ALLOWED_VIDEO_TYPES:
        raise AppError(
            ErrorCode.INVALID_INPUT,
            "Unsupported file type",
            {"allowedTypes": ALLOWED_IMAGE_TYPES + ALLOWED_VIDEO_TYPES},
        )
    return mime_type  # type: ignore[return-value]


def validate_choice(field: str, value: Any, choices: Iterable[str]) -> None:
    choices = list(choices)
    if value is not None and value not in choices:
        raise AppError(
            ErrorCode.INVALID_INPUT,
            f"Invalid {field}. Must be one of: {', '.join(choices)}",
        )


def require_string_list(data: Dict[str, Any], field: str) -> List[str]:
    """Return a non-empty list field or raise `{field} array is required`."""
    value = data.get(field)
    if not isinstance(value, list) or not value:
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} array is required")
    return [str(item) for item in value]
