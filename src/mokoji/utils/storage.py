"""
S3 storage helpers for user media and exports.
"""

import os
from typing import Any, Dict, Optional
from urllib.parse import unquote, urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .dynamodb import get_required_env
from .errors import AppError, ErrorCode
from .logging import get_logger
from .validation import MAX_UPLOAD_BYTES

logger = get_logger(__name__)

CACHE_CONTROL = "public, max-age=31536000"
UPLOAD_URL_EXPIRES_SECONDS = 15 * 60

# Module-level proxy that tests can monkeypatch
s3_client: Optional[Any] = None


def _get_s3_client() -> Any:
    """Return the S3 client (module-level override for tests, otherwise a fresh boto3 client)."""
    if s3_client is not None:
        return s3_client
    return boto3.client("s3", endpoint_url=os.getenv("S3_ENDPOINT"))


def get_region() -> str:
    return os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "ap-northeast-2"


def get_media_bucket() -> str:
    """Bucket for user uploads; raises CONFIGURATION_ERROR when unset."""
    bucket = os.getenv("MEDIA_BUCKET")
    if not bucket:
        raise AppError(ErrorCode.CONFIGURATION_ERROR, "Storage is not configured")
    return bucket


def get_exports_bucket() -> str:
    return get_required_env("EXPORTS_BUCKET", "mokoji-exports")


def public_url(bucket: str, key: str) -> str:
    """Virtual-hosted style URL of an object."""
    return f"https://{bucket}.s3.{get_region()}.amazonaws.com/{key}"


def create_upload_post(bucket: str, key: str, content_type: str, max_bytes: int = MAX_UPLOAD_BYTES) -> Dict[str, Any]:
    """
    Presigned POST for a browser upload.

    S3 enforces the policy conditions, so the stored object can never exceed
    `max_bytes` whatever size the client declared beforehand.

    Returns:
        {"url": str, "fields": dict} to send as a multipart form
    """
    fields = {"Content-Type": content_type, "Cache-Control": CACHE_CONTROL}
    return dict(
        _get_s3_client().generate_presigned_post(
            Bucket=bucket,
            Key=key,
            Fields=fields,
            Conditions=[
                {"Content-Type": content_type},
                {"Cache-Control": CACHE_CONTROL},
                ["content-length-range", 0, max_bytes],
            ],
            ExpiresIn=UPLOAD_URL_EXPIRES_SECONDS,
        )
    )


def put_export(bucket: str, key: str, body: bytes, content_type: str) -> None:
    _get_s3_client().put_object(Bucket=bucket, Key=key, Body=body, ContentType=content_type)


def create_download_url(bucket: str, key: str, expires_in: int) -> str:
    return str(
        _get_s3_client().generate_presigned_url(
            "get_object",
            Params={"Bucket": bucket, "Key": key},
            ExpiresIn=expires_in,
        )
    )


def parse_s3_url(url: Optional[str]) -> Optional[Dict[str, str]]:
    """
    Split an S3 object URL into bucket and key.

    Only virtual-hosted S3 URLs (`{bucket}.s3.{region}.amazonaws.com/{key}`)
    are recognized; anything else returns None.
    """
    if not url:
        return None
    parsed = urlparse(url)
    host = parsed.hostname or ""
    if ".s3" not in host or not host.endswith("amazonaws.com"):
        return None
    key = unquote(parsed.path.lstrip("/"))
    if not key:
        return None
    return {"bucket": host.split(".s3", 1)[0], "key": key}


def delete_from_url(url: Optional[str]) -> bool:
    """
    Delete the object behind an S3 URL.

    Failures are logged and reported as False; callers treat deletion of
    media as best effort.
    """
    location = parse_s3_url(url)
    if location is None:
        return False
    try:
        _get_s3_client().delete_object(Bucket=location["bucket"], Key=location["key"])
    except (BotoCoreError, ClientError) as e:
        logger.warning("Failed to delete object", url=url, error=str(e))
        return False
    return True


def format_file_size(size_bytes: int) -> str:
    """
    Examples:
        >>> format_file_size(0)
        '0 Bytes'
        >>> format_file_size(1536)
        '1.5 KB'
    """
    if size_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    size = float(size_bytes)
    unit = 0
    while size >= 1024 and unit < len(units) - 1:
        size /= 1024
        unit += 1
    return f"{round(size, 2):g} {units[unit]}"
