"""
Crew activity feed records.

Table: activity-logs (PK=logId, GSI organizationId-timestamp-index).
"""

from typing import Any, Dict, List

from boto3.dynamodb.conditions import Key

from .dates import now_millis
from .dynamodb import tables


def list_activity_logs_by_organization(organization_id: str, limit: int = 50) -> List[Dict[str, Any]]:
    """Newest entries first."""
    response = tables.activity_logs.query(
        IndexName="organizationId-timestamp-index",
        KeyConditionExpression=Key("organizationId").eq(organization_id),
        ScanIndexForward=False,
        Limit=limit,
    )
    return list(response.get("Items", []))


def create_activity_log(log: Dict[str, Any]) -> Dict[str, Any]:
    item = {**log, "timestamp": log.get("timestamp") or now_millis()}
    tables.activity_logs.put_item(Item=item)
    return item
