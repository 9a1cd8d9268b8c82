"""
Organization membership records.

Table: organization-members (PK=memberId, GSIs organizationId-index and
userId-index).
"""

from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Key

from .dates import now_millis
from .dynamodb import build_update_expression, query_all, tables


def get_member(member_id: str) -> Optional[Dict[str, Any]]:
    response = tables.members.get_item(Key={"memberId": member_id})
    return response.get("Item")


def list_members_by_organization(organization_id: str) -> List[Dict[str, Any]]:
    return query_all(
        tables.members,
        IndexName="organizationId-index",
        KeyConditionExpression=Key("organizationId").eq(organization_id),
    )


def list_memberships_by_user(user_id: str) -> List[Dict[str, Any]]:
    return query_all(
        tables.members,
        IndexName="userId-index",
        KeyConditionExpression=Key("userId").eq(user_id),
    )


def find_membership(user_id: str, organization_id: str) -> Optional[Dict[str, Any]]:
    """The user's membership in one organization, if any."""
    for membership in list_memberships_by_user(user_id):
        if membership.get("organizationId") == organization_id:
            return membership
    return None


def create_member(member: Dict[str, Any]) -> Dict[str, Any]:
    """
    Store a new membership; a given joinedAt is kept, otherwise it is now.

    Raises ClientError (ConditionalCheckFailedException) if the memberId
    is already taken.
    """
    item = {**member, "joinedAt": member.get("joinedAt") or now_millis()}
    tables.members.put_item(Item=item, ConditionExpression="attribute_not_exists(memberId)")
    return item


def update_member(member_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Update a membership.

    `joinedAt` can never change. Memberships carry no updatedAt, and an
    update with nothing left to set returns the stored record unchanged.
    """
    updates = {k: v for k, v in updates.items() if k not in ("joinedAt", "memberId")}
    if not updates:
        return get_member(member_id)

    expression, names, values = build_update_expression(updates)
    response = tables.members.update_item(
        Key={"memberId": member_id},
        UpdateExpression=expression,
        ExpressionAttributeNames=names,
        ExpressionAttributeValues=values,
        ConditionExpression="attribute_exists(memberId)",
        ReturnValues="ALL_NEW",
    )
    return dict(response["Attributes"])


def delete_member(member_id: str) -> None:
    tables.members.delete_item(Key={"memberId": member_id})
