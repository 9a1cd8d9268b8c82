"""
Accessors for API Gateway HTTP API (payload format 2.0) events.

Read the route key, path parameters, query strings and JSON bodies safely.
"""

import base64
import json
from decimal import Decimal
from typing import Any, Dict, Optional
from urllib.parse import unquote

from .errors import AppError, ErrorCode


def get_route_key(event: Dict[str, Any]) -> str:
    """Return the matched route, e.g. `GET /schedules/{scheduleId}`."""
    route_key = event.get("routeKey") or (event.get("requestContext") or {}).get("routeKey")
    return str(route_key or "")


def get_path_parameter(event: Dict[str, Any], name: str) -> str:
    """
    Get a URL-decoded path parameter.

    Raises:
        AppError: If the parameter is absent
    """
    value = (event.get("pathParameters") or {}).get(name)
    if not value:
        raise AppError(ErrorCode.INVALID_INPUT, f"{name} is required")
    return unquote(str(value))


def get_query_parameter(
    event: Dict[str, Any], name: str, default: Optional[str] = None
) -> Optional[str]:
    """Get a query string parameter or default."""
    params = event.get("queryStringParameters") or {}
    value = params.get(name)
    return default if value is None else str(value)


def get_json_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Parse the request body as a JSON object.

    Returns an empty dict for an empty body.

    Raises:
        AppError: If the body is not a JSON object
    """
    raw = event.get("body")
    if not raw:
        return {}
    if event.get("isBase64Encoded"):
        raw = base64.b64decode(raw).decode("utf-8")
    try:
        body = json.loads(raw, parse_float=Decimal)
    except (TypeError, ValueError):
        raise AppError(ErrorCode.INVALID_INPUT, "Request body must be valid JSON")
    if not isinstance(body, dict):
        raise AppError(ErrorCode.INVALID_INPUT, "Request body must be a JSON object")
    return body
