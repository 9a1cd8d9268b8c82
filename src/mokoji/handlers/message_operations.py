"""
Schedule chat Lambda handlers.

Implements:
- GET    /schedules/{scheduleId}/messages: list visible messages
- POST   /schedules/{scheduleId}/messages: send a message
- PATCH  /schedules/{scheduleId}/messages: mark messages as read
- DELETE /schedules/{scheduleId}/messages?messageId=: soft delete own message
"""

from typing import Any, Dict

from botocore.exceptions import BotoCoreError, ClientError

from ..utils import messages, schedules
from ..utils.auth import require_auth
from ..utils.chat import LAST_MESSAGE_LENGTH
from ..utils.dates import now_millis
from ..utils.errors import AppError, ErrorCode
from ..utils.http_types import get_json_body, get_path_parameter, get_query_parameter
from ..utils.ids import new_message_id
from ..utils.logging import get_correlation_id, get_logger
from ..utils.responses import created, json_response
from ..utils.validation import require_field, require_string_list


def _with_id(message: Dict[str, Any]) -> Dict[str, Any]:
    """Clients address messages by `id`."""
    return {**message, "id": message["messageId"]}


def list_messages(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    require_auth(event)
    schedule_id = get_path_parameter(event, "scheduleId")
    visible = [
        _with_id(m) for m in messages.list_messages_by_schedule(schedule_id) if not m.get("isDeleted")
    ]
    return json_response({"messages": visible})


def send_message(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Post a chat message to a schedule.

    Request body:
        content (required for text messages), type (text|image|file),
        senderName (required), senderAvatar, attachments

    Returns:
        201 {"message": {..., "id": messageId}}
    """
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        caller = require_auth(event)
        schedule_id = get_path_parameter(event, "scheduleId")
        body = get_json_body(event)

        message_type = body.get("type") or "text"
        content = body.get("content") or ""
        if not isinstance(content, str):
            raise AppError(ErrorCode.INVALID_INPUT, "Message content must be a string")
        if message_type == "text" and not content.strip():
            raise AppError(ErrorCode.INVALID_INPUT, "Message content is required")
        sender_name = require_field(body, "senderName")

        if not schedules.get_schedule(schedule_id):
            raise AppError(ErrorCode.NOT_FOUND, "Schedule not found")

        timestamp = now_millis()
        message = messages.create_message(
            {
                "messageId": new_message_id(timestamp),
                "scheduleId": schedule_id,
                "senderId": caller["sub"],
                "senderName": sender_name,
                "senderAvatar": body.get("senderAvatar"),
                "content": content.strip(),
                "type": message_type,
                "attachments": body.get("attachments") or [],
                "createdAt": timestamp,
                "updatedAt": timestamp,
                "isDeleted": False,
                "readBy": [caller["sub"]],
            }
        )

        try:
            schedules.set_last_message(
                schedule_id,
                {
                    "content": message["content"][:LAST_MESSAGE_LENGTH],
                    "senderName": sender_name,
                    "sentAt": timestamp,
                },
            )
        except (BotoCoreError, ClientError) as e:
            logger.warning("Failed to update schedule lastMessage", schedule_id=schedule_id, error=str(e))

        logger.info("Message sent", schedule_id=schedule_id, message_id=message["messageId"])
        return created({"message": _with_id(message)})

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to send message", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to send message")


def mark_messages_read(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    caller = require_auth(event)
    schedule_id = get_path_parameter(event, "scheduleId")
    message_ids = require_string_list(get_json_body(event), "messageIds")

    marked = messages.mark_messages_read(schedule_id, message_ids, caller["sub"])
    return json_response({"success": True, "markedCount": marked})


def delete_message(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Soft delete a message; only its sender may do so."""
    logger = get_logger(__name__, get_correlation_id(event))

    caller = require_auth(event)
    schedule_id = get_path_parameter(event, "scheduleId")
    message_id = get_query_parameter(event, "messageId")
    if not message_id:
        raise AppError(ErrorCode.INVALID_INPUT, "messageId is required")

    message = messages.get_message(message_id)
    if not message or message.get("scheduleId") != schedule_id:
        raise AppError(ErrorCode.NOT_FOUND, "Message not found")
    if message.get("senderId") != caller["sub"]:
        raise AppError(ErrorCode.FORBIDDEN, "Not authorized to delete this message")

    messages.soft_delete_message(message_id)
    logger.info("Message deleted", schedule_id=schedule_id, message_id=message_id)
    return json_response({"success": True})
