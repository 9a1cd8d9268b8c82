"""
ID and object key generation utilities.
"""

import os
import secrets
import string
import uuid
from typing import Optional

from .dates import now_millis

_BASE36 = string.digits + string.ascii_lowercase


def new_id() -> str:
    """Random UUID4 string used for organizations and activity logs."""
    return str(uuid.uuid4())


def membership_id(organization_id: str, user_id: str) -> str:
    """
    Membership key for a user in one organization.

    One key per pair lets a conditional put reject a second membership.

    Examples:
        >>> membership_id("org-1", "user-1")
        'org-1_user-1'
    """
    return f"{organization_id}_{user_id}"


def random_suffix(length: int) -> str:
    """Random lowercase base36 string."""
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def new_message_id(timestamp_ms: Optional[int] = None) -> str:
    """
    Chat message ID: `msg_{epochMs}_{9 base36 chars}`.

    Examples:
        >>> new_message_id(1700000000000)[:18]
        'msg_1700000000000_'
    """
    return f"msg_{timestamp_ms if timestamp_ms is not None else now_millis()}_{random_suffix(9)}"


def file_extension(file_name: Optional[str], default: str = "jpg") -> str:
    """
    Lower-case extension of a file name, or default.

    Examples:
        >>> file_extension("photo.PNG")
        'png'
        >>> file_extension("noext")
        'jpg'
    """
    if not file_name:
        return default
    _, ext = os.path.splitext(file_name)
    return ext[1:].lower() if ext else default


def generate_s3_key(prefix: str, file_name: Optional[str] = None) -> str:
    """Object key `{prefix}/{epochMs}-{6 random}.{ext}`."""
    return f"{prefix.rstrip('/')}/{now_millis()}-{random_suffix(6)}.{file_extension(file_name)}"


def chat_media_key(schedule_id: str, file_name: Optional[str]) -> str:
    """Object key for a chat attachment of a schedule."""
    return (
        f"org_schedules/{schedule_id}/messages/media/"
        f"{now_millis()}_{random_suffix(6)}.{file_extension(file_name)}"
    )
