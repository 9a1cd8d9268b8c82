"""
Logging utilities for Lambda functions.

Every log line is one JSON object on stdout so CloudWatch Logs Insights can
query fields directly. Lines from the same request share a correlation ID.
"""

import json
import logging
import os
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class StructuredLogger:
    """
    JSON logger with a correlation ID and optional bound fields.

    Example:
        logger = get_logger(__name__, get_correlation_id(event))
        logger.info("Schedule created", schedule_id="abc", organization_id="org-1")

        record_logger = logger.bind(event_id=record["eventID"])
        record_logger.error("Failed to derive system messages", error=str(e))
    """

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        fields: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.logger = logging.getLogger(name)
        self.logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.fields: Dict[str, Any] = dict(fields or {})

    def bind(self, **fields: Any) -> "StructuredLogger":
        """Return a logger that adds `fields` to every entry it writes."""
        return StructuredLogger(self.logger.name, self.correlation_id, {**self.fields, **fields})

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        if not self.logger.isEnabledFor(level):
            return

        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": logging.getLevelName(level),
            "message": message,
            "correlationId": self.correlation_id,
            **self.fields,
            **kwargs,
        }
        entry = {key: value for key, value in entry.items() if value is not None}

        # Decimal and datetime fall back to str; Korean text stays readable
        print(json.dumps(entry, default=str, ensure_ascii=False))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, **kwargs)


def get_logger(name: str, correlation_id: Optional[str] = None) -> StructuredLogger:
    """Create a structured logger, optionally bound to a request's correlation ID."""
    return StructuredLogger(name, correlation_id)


def get_correlation_id(event: Dict[str, Any]) -> str:
    """
    Correlation ID for an incoming event.

    Order: the HTTP API `requestContext.requestId`, then an
    `x-correlation-id` header (top-level HTTP API headers, which are
    lower-cased, or `request.headers`), else a new UUID.
    """
    request_id = (event.get("requestContext") or {}).get("requestId")
    if request_id:
        return str(request_id)

    headers = event.get("headers") or (event.get("request") or {}).get("headers") or {}
    header_id = headers.get("x-correlation-id")
    if header_id:
        return str(header_id)

    return str(uuid.uuid4())
