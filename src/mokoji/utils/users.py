"""
User profile records.

Table: users (PK=userId, GSI email-index). `userId` is the Cognito sub.
"""

from typing import Any, Dict, Optional

from boto3.dynamodb.conditions import Key

from .dates import now_millis
from .dynamodb import build_update_expression, tables

PROTECTED_FIELDS = ("userId", "createdAt", "updatedAt")


def default_profile() -> Dict[str, Any]:
    """Profile values for a user who has not filled in their profile yet."""
    return {
        "avatar": "",
        "gender": "-",
        "birthdate": "-",
        "location": "서울",
        "mbti": "-",
        "interestCategories": [],
        "organizations": [],
    }


def get_user(user_id: str) -> Optional[Dict[str, Any]]:
    response = tables.users.get_item(Key={"userId": user_id})
    return response.get("Item")


def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    """Look up a user through the email-index GSI."""
    response = tables.users.query(
        IndexName="email-index",
        KeyConditionExpression=Key("email").eq(email),
        Limit=1,
    )
    items = response.get("Items", [])
    return items[0] if items else None


def create_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """Store a user; createdAt/updatedAt default to now."""
    timestamp = now_millis()
    item = {"createdAt": timestamp, "updatedAt": timestamp, **user}
    tables.users.put_item(Item=item)
    return item


def update_user(user_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    Update the given attributes and bump updatedAt.

    Raises:
        ConditionalCheckFailedException: If the user does not exist
    """
    expression, names, values = build_update_expression({**updates, "updatedAt": now_millis()})
    response = tables.users.update_item(
        Key={"userId": user_id},
        UpdateExpression=expression,
        ExpressionAttributeNames=names,
        ExpressionAttributeValues=values,
        ConditionExpression="attribute_exists(userId)",
        ReturnValues="ALL_NEW",
    )
    return dict(response["Attributes"])
