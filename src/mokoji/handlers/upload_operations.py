"""
Media upload Lambda handlers.

Files never pass through Lambda: these handlers validate the declared file
and hand back a presigned POST (form URL plus fields) together with the
public URL the object will have. The POST policy caps the object size.
"""

from typing import Any, Dict

from ..utils import storage
from ..utils.auth import require_auth
from ..utils.errors import AppError, ErrorCode
from ..utils.http_types import get_json_body
from ..utils.ids import chat_media_key, generate_s3_key
from ..utils.logging import get_correlation_id, get_logger
from ..utils.responses import json_response
from ..utils.validation import (
    require_field,
    validate_chat_media_type,
    validate_upload_size,
)

DEFAULT_CONTENT_TYPE = "image/jpeg"


def create_upload(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Presign an upload to an explicit object path.

    Request body:
        path, or prefix and fileName to generate a unique key under prefix;
        contentType (default image/jpeg), size (bytes)

    Returns:
        {"uploadUrl": str, "fields": dict, "url": str, "key": str}
    """
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        caller = require_auth(event)
        body = get_json_body(event)
        if body.get("prefix") and not body.get("path"):
            key = generate_s3_key(str(body["prefix"]).lstrip("/"), body.get("fileName"))
        else:
            key = str(require_field(body, "path")).lstrip("/")
        content_type = body.get("contentType") or DEFAULT_CONTENT_TYPE
        size = validate_upload_size(body.get("size"))
        bucket = storage.get_media_bucket()

        upload = storage.create_upload_post(bucket, key, content_type)

        logger.info("Upload presigned", key=key, size=storage.format_file_size(size), user_id=caller["sub"])
        return json_response(
            {
                "uploadUrl": upload["url"],
                "fields": upload["fields"],
                "url": storage.public_url(bucket, key),
                "key": key,
            }
        )

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to presign upload", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to prepare upload")


def create_chat_media_upload(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Presign an upload for a chat attachment.

    Request body:
        scheduleId, messageId, fileName, mimeType (required), size (bytes)

    Returns:
        {"uploadUrl", "fields", "url", "key", "fileName", "size", "mimeType", "type"}
        where type is "image" for images and "file" otherwise
    """
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        require_auth(event)
        body = get_json_body(event)
        schedule_id = require_field(body, "scheduleId")
        message_id = require_field(body, "messageId")
        file_name = body.get("fileName") or ""
        mime_type = validate_chat_media_type(body.get("mimeType") or body.get("contentType"))
        size = validate_upload_size(body.get("size"))
        bucket = storage.get_media_bucket()

        key = chat_media_key(schedule_id, file_name)
        upload = storage.create_upload_post(bucket, key, mime_type)

        logger.info(
            "Chat media upload presigned",
            schedule_id=schedule_id,
            message_id=message_id,
            key=key,
            size=storage.format_file_size(size),
        )
        return json_response(
            {
                "uploadUrl": upload["url"],
                "fields": upload["fields"],
                "url": storage.public_url(bucket, key),
                "key": key,
                "fileName": file_name,
                "size": size,
                "mimeType": mime_type,
                "type": "image" if mime_type.startswith("image/") else "file",
            }
        )

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to presign chat media upload", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to prepare upload")
