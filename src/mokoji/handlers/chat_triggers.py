"""
DynamoDB Stream handlers that keep schedule chat rooms up to date.

Trigger: schedules table stream (NEW_AND_OLD_IMAGES)
    on_schedule_change posts system messages for RSVP and schedule changes.

Trigger: messages table stream (NEW_AND_OLD_IMAGES)
    on_message_created refreshes the schedule's chat preview.

A failing record is logged and skipped so one bad item never blocks the
shard.
"""

from typing import Any, Dict, Optional

from boto3.dynamodb.types import TypeDeserializer

from ..utils import messages, schedules
from ..utils.chat import rsvp_change_messages, schedule_update_messages, truncate
from ..utils.logging import get_logger

logger = get_logger(__name__)

_deserializer = TypeDeserializer()


def _image(record: Dict[str, Any], name: str) -> Optional[Dict[str, Any]]:
    """Deserialize `NewImage`/`OldImage` of a stream record."""
    raw = record.get("dynamodb", {}).get(name)
    if not raw:
        return None
    return {key: _deserializer.deserialize(value) for key, value in raw.items()}


def _system_message_id(event_id: str, index: int) -> str:
    """Stable id for the index-th system message of a stream record."""
    return f"sys_{event_id}_{index}"


def on_schedule_change(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Post system messages for modified schedules.

    Each record's messages are written inside that record's error handling,
    keyed by the stream event ID. A redelivered record overwrites the
    messages it already wrote instead of posting them twice.

    Returns:
        {"processed": int, "messages": int, "failed": int}
    """
    processed = written = failed = 0

    for record in event.get("Records", []):
        if record.get("eventName") != "MODIFY":
            continue
        event_id = record.get("eventID")
        record_logger = logger.bind(event_id=event_id)
        try:
            before = _image(record, "OldImage") or {}
            after = _image(record, "NewImage")
            if not after:
                continue
            record_messages = rsvp_change_messages(before, after) + schedule_update_messages(before, after)
            if event_id:
                for index, message in enumerate(record_messages):
                    message["messageId"] = _system_message_id(event_id, index)
            if record_messages:
                written += messages.put_messages(record_messages)
            processed += 1
        except Exception as e:
            failed += 1
            record_logger.error("Failed to post system messages", error=str(e))

    logger.info("Schedule changes processed", processed=processed, messages=written, failed=failed)
    return {"processed": processed, "messages": written, "failed": failed}


def on_message_created(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Update lastChatMessageAt/lastChatMessagePreview for new member messages.

    System messages, deleted messages and messages without a schedule are
    ignored.
    """
    updated = 0

    for record in event.get("Records", []):
        if record.get("eventName") != "INSERT":
            continue
        message = _image(record, "NewImage") or {}
        schedule_id = message.get("scheduleId")
        if message.get("type") == "system" or message.get("isDeleted") or not schedule_id:
            continue

        try:
            schedules.set_chat_preview(
                schedule_id, message.get("createdAt"), truncate(message.get("content"))
            )
            updated += 1
        except Exception as e:
            logger.error(
                "Failed to update chat preview",
                schedule_id=schedule_id,
                message_id=message.get("messageId"),
                error=str(e),
            )

    return {"updated": updated}
