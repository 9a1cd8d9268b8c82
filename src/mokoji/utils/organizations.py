"""
Organization (crew) records.

Table: organizations (PK=organizationId, GSI ownerUid-index).
"""

from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Key
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError

from .dates import now_millis
from .dynamodb import (
    build_update_expression,
    get_dynamodb_resource,
    is_condition_failure,
    query_all,
    tables,
)
from .logging import get_logger

logger = get_logger(__name__)

PROTECTED_FIELDS = ("organizationId", "ownerUid", "createdAt", "memberCount")

_serializer = TypeSerializer()


def get_organization(organization_id: str) -> Optional[Dict[str, Any]]:
    response = tables.organizations.get_item(Key={"organizationId": organization_id})
    return response.get("Item")


def list_organizations(limit: int = 100) -> List[Dict[str, Any]]:
    """Scan up to `limit` organizations."""
    response = tables.organizations.scan(Limit=limit)
    return list(response.get("Items", []))


def list_organizations_by_owner(owner_uid: str) -> List[Dict[str, Any]]:
    return query_all(
        tables.organizations,
        IndexName="ownerUid-index",
        KeyConditionExpression=Key("ownerUid").eq(owner_uid),
    )


def create_organization(
    organization: Dict[str, Any], owner_membership: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Store an organization, optionally together with its owner's membership.

    Both records are written in one transaction so a crew never exists
    without its owner.
    """
    timestamp = now_millis()
    item = {"createdAt": timestamp, "updatedAt": timestamp, **organization}

    if owner_membership is None:
        tables.organizations.put_item(Item=item)
        return item

    client = get_dynamodb_resource().meta.client
    client.transact_write_items(
        TransactItems=[
            {
                "Put": {
                    "TableName": tables.organizations.name,
                    "Item": {k: _serializer.serialize(v) for k, v in item.items()},
                    "ConditionExpression": "attribute_not_exists(organizationId)",
                }
            },
            {
                "Put": {
                    "TableName": tables.members.name,
                    "Item": {k: _serializer.serialize(v) for k, v in owner_membership.items()},
                }
            },
        ]
    )
    return item


def update_organization(organization_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    """Update the given attributes and bump updatedAt; returns the new record."""
    expression, names, values = build_update_expression({**updates, "updatedAt": now_millis()})
    response = tables.organizations.update_item(
        Key={"organizationId": organization_id},
        UpdateExpression=expression,
        ExpressionAttributeNames=names,
        ExpressionAttributeValues=values,
        ConditionExpression="attribute_exists(organizationId)",
        ReturnValues="ALL_NEW",
    )
    return dict(response["Attributes"])


def adjust_member_count(organization_id: str, delta: int) -> None:
    """Atomically add `delta` to memberCount, never going below zero."""
    if delta == 0:
        return
    condition = "attribute_exists(organizationId)"
    values: Dict[str, Any] = {":delta": delta}
    if delta < 0:
        condition += " AND memberCount >= :needed"
        values[":needed"] = -delta
    try:
        tables.organizations.update_item(
            Key={"organizationId": organization_id},
            UpdateExpression="ADD memberCount :delta",
            ConditionExpression=condition,
            ExpressionAttributeValues=values,
        )
    except ClientError as e:
        if not is_condition_failure(e):
            raise
        logger.warning(
            "Member count not adjusted", organization_id=organization_id, delta=delta
        )


def set_member_count(organization_id: str, count: int) -> None:
    tables.organizations.update_item(
        Key={"organizationId": organization_id},
        UpdateExpression="SET memberCount = :count",
        ExpressionAttributeValues={":count": count},
    )


def delete_organization(organization_id: str) -> None:
    tables.organizations.delete_item(Key={"organizationId": organization_id})
