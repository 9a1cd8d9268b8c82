"""
Schedule (crew event) records.

Table: schedules (PK=scheduleId, GSI organizationId-date-index with the
ISO `date` as sort key).
"""

from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Key

from .dates import now_millis
from .dynamodb import build_update_expression, query_all, tables


def get_schedule(schedule_id: str) -> Optional[Dict[str, Any]]:
    response = tables.schedules.get_item(Key={"scheduleId": schedule_id})
    return response.get("Item")


def list_schedules_by_organization(
    organization_id: str,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Schedules of an organization ordered by date.

    The date range only applies when both bounds are given.
    """
    condition = Key("organizationId").eq(organization_id)
    if start_date and end_date:
        condition = condition & Key("date").between(start_date, end_date)
    return query_all(
        tables.schedules,
        IndexName="organizationId-date-index",
        KeyConditionExpression=condition,
    )


def create_schedule(schedule: Dict[str, Any]) -> Dict[str, Any]:
    timestamp = now_millis()
    item = {"createdAt": timestamp, "updatedAt": timestamp, **schedule}
    tables.schedules.put_item(Item=item)
    return item


def update_schedule(schedule_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    """Update the given attributes and bump updatedAt; returns the new record."""
    expression, names, values = build_update_expression({**updates, "updatedAt": now_millis()})
    response = tables.schedules.update_item(
        Key={"scheduleId": schedule_id},
        UpdateExpression=expression,
        ExpressionAttributeNames=names,
        ExpressionAttributeValues=values,
        ConditionExpression="attribute_exists(scheduleId)",
        ReturnValues="ALL_NEW",
    )
    return dict(response["Attributes"])


def set_last_message(schedule_id: str, last_message: Dict[str, Any]) -> None:
    """Record the latest chat message shown in schedule lists."""
    tables.schedules.update_item(
        Key={"scheduleId": schedule_id},
        UpdateExpression="SET lastMessage = :lastMessage",
        ConditionExpression="attribute_exists(scheduleId)",
        ExpressionAttributeValues={":lastMessage": last_message},
    )


def set_chat_preview(schedule_id: str, sent_at: Any, preview: str) -> None:
    tables.schedules.update_item(
        Key={"scheduleId": schedule_id},
        UpdateExpression="SET lastChatMessageAt = :sentAt, lastChatMessagePreview = :preview",
        ConditionExpression="attribute_exists(scheduleId)",
        ExpressionAttributeValues={":sentAt": sent_at, ":preview": preview},
    )


def delete_schedule(schedule_id: str) -> None:
    tables.schedules.delete_item(Key={"scheduleId": schedule_id})
