"""
Schedule chat message records.

Table: messages (PK=messageId, GSI scheduleId-createdAt-index).
Messages are never removed; deletion sets `isDeleted`.
"""

from typing import Any, Dict, Iterable, List, Optional

from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from .dates import now_millis
from .dynamodb import is_condition_failure, query_all, tables


def get_message(message_id: str) -> Optional[Dict[str, Any]]:
    response = tables.messages.get_item(Key={"messageId": message_id})
    return response.get("Item")


def list_messages_by_schedule(schedule_id: str) -> List[Dict[str, Any]]:
    """All messages of a schedule, oldest first."""
    return query_all(
        tables.messages,
        IndexName="scheduleId-createdAt-index",
        KeyConditionExpression=Key("scheduleId").eq(schedule_id),
        ScanIndexForward=True,
    )


def create_message(message: Dict[str, Any]) -> Dict[str, Any]:
    tables.messages.put_item(Item=message)
    return message


def put_messages(messages: Iterable[Dict[str, Any]]) -> int:
    """Write many messages with one batch writer; returns how many were written."""
    count = 0
    with tables.messages.batch_writer() as batch:
        for message in messages:
            batch.put_item(Item=message)
            count += 1
    return count


def soft_delete_message(message_id: str) -> None:
    timestamp = now_millis()
    tables.messages.update_item(
        Key={"messageId": message_id},
        UpdateExpression="SET isDeleted = :deleted, deletedAt = :now, updatedAt = :now",
        ExpressionAttributeValues={":deleted": True, ":now": timestamp},
    )


def mark_messages_read(schedule_id: str, message_ids: List[str], user_id: str) -> int:
    """
    Add the user to `readBy` of each message.

    Messages of another schedule and messages the user already read are
    skipped. Returns the number of messages updated.
    """
    marked = 0
    for message_id in message_ids:
        try:
            tables.messages.update_item(
                Key={"messageId": message_id},
                UpdateExpression="SET readBy = list_append(if_not_exists(readBy, :empty), :reader)",
                ConditionExpression="scheduleId = :scheduleId AND NOT contains(readBy, :userId)",
                ExpressionAttributeValues={
                    ":empty": [],
                    ":reader": [user_id],
                    ":scheduleId": schedule_id,
                    ":userId": user_id,
                },
            )
        except ClientError as e:
            if not is_condition_failure(e):
                raise
            continue
        marked += 1
    return marked
