"""
HTTP response helpers for API Gateway proxy integrations.

Builds JSON responses with CORS headers and renders DynamoDB Decimals as
plain JSON numbers.
"""

import json
from decimal import Decimal
from typing import Any, Dict, Optional

from .errors import AppError, handle_error, status_code_for

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,PUT,PATCH,DELETE,OPTIONS",
}


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, set):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(body: Any) -> str:
    """Serialize a response body, keeping Korean text readable."""
    return json.dumps(body, default=_json_default, ensure_ascii=False)


def json_response(
    body: Any, status_code: int = 200, headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Return a response dict with JSON body and CORS headers for API Gateway."""
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json", **CORS_HEADERS, **(headers or {})},
        "body": body if isinstance(body, str) else to_json(body),
    }


def created(body: Any) -> Dict[str, Any]:
    return json_response(body, 201)


def error_response(error: Exception) -> Dict[str, Any]:
    """Convert any exception into an error response with the mapped status."""
    status_code = error.status_code if isinstance(error, AppError) else status_code_for("")
    return json_response(handle_error(error), status_code)
