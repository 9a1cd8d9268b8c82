"""
Date and time helpers.

Stored timestamps are epoch milliseconds. Older records carry ISO strings or
`{seconds, nanoseconds}` maps exported from the previous backend, so readers
go through `to_datetime` to accept all of them.
"""

import time
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Optional

# Korea has no daylight saving time
KST = timezone(timedelta(hours=9), "KST")

WEEKDAYS_KO = ["월", "화", "수", "목", "금", "토", "일"]

# Epoch values above this are milliseconds (year 2001 in ms, year 33658 in s)
_MILLIS_THRESHOLD = 1_000_000_000_000


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def to_datetime(value: Any) -> Optional[datetime]:
    """
    Coerce a stored timestamp into an aware datetime.

    Accepts epoch numbers (seconds or milliseconds, including Decimal),
    ISO 8601 strings, `datetime`/`date` objects and `{seconds}` or
    `{_seconds}` maps. Returns None for anything unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=KST)
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
        if number >= _MILLIS_THRESHOLD:
            number /= 1000
        return datetime.fromtimestamp(number, tz=timezone.utc)
    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        return to_datetime(int(seconds)) if seconds is not None else None
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=KST)
    return None


def to_millis(value: Any) -> int:
    """Epoch milliseconds for any value `to_datetime` accepts, 0 when unknown."""
    parsed = to_datetime(value)
    return int(parsed.timestamp() * 1000) if parsed else 0


def format_korean_datetime(moment: datetime) -> str:
    """Format as `3월 15일 (토) 오후 2:00` in Korea time."""
    local = moment.astimezone(KST)
    meridiem = "오전" if local.hour < 12 else "오후"
    hour = local.hour % 12 or 12
    return (
        f"{local.month}월 {local.day}일 ({WEEKDAYS_KO[local.weekday()]}) "
        f"{meridiem} {hour}:{local.minute:02d}"
    )


def schedule_start(date_value: Any, time_value: Any = None) -> Optional[datetime]:
    """
    Combine a schedule's `date` (YYYY-MM-DD) and optional `time` (HH:MM) in KST.

    Non-string dates fall back to `to_datetime`, so epoch start times work too.
    """
    if not date_value:
        return None
    if not isinstance(date_value, str):
        return to_datetime(date_value)
    text = date_value
    if time_value and "T" not in date_value:
        text = f"{date_value}T{time_value}"
    return to_datetime(text)


def format_date(value: Any) -> str:
    """`YYYY-MM-DD` in Korea time, or empty string."""
    parsed = to_datetime(value)
    return parsed.astimezone(KST).strftime("%Y-%m-%d") if parsed else ""
