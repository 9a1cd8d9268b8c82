"""
Test data builders for Lambda function tests.

Provides factory functions for creating test data and API Gateway events
with sensible defaults. Use these instead of repeating boilerplate across
test files.
"""

import json
from typing import Any, Dict, List, Optional
from uuid import uuid4

from boto3.dynamodb.types import TypeSerializer

_serializer = TypeSerializer()

REGION = "ap-northeast-2"
MEDIA_BUCKET = "mokoji-media-test"
EXPORTS_BUCKET = "mokoji-exports-test"

DEFAULT_JOINED_AT = 1_700_000_000_000


def make_user_id() -> str:
    """Generate a Cognito-style sub (UUID with dashes)."""
    return str(uuid4())


def make_claims(sub: str, email: Optional[str] = None, groups: Optional[List[str]] = None) -> Dict[str, Any]:
    """JWT claims as the HTTP API JWT authorizer passes them."""
    claims: Dict[str, Any] = {"sub": sub, "email": email or f"{sub[:8]}@example.com"}
    if groups is not None:
        claims["cognito:groups"] = groups
    return claims


def make_http_event(
    route_key: str,
    *,
    sub: Optional[str] = None,
    path_parameters: Optional[Dict[str, str]] = None,
    query: Optional[Dict[str, str]] = None,
    body: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Build an API Gateway HTTP API payload 2.0 event.

    Args:
        route_key: e.g. "GET /schedules/{scheduleId}"
        sub: Caller's Cognito sub; None builds an unauthenticated request
        path_parameters: Path parameters
        query: Query string parameters
        body: Request body (dict is JSON encoded, str is passed through)
        headers: Extra headers

    Returns:
        Event dict
    """
    method, _, path = route_key.partition(" ")
    request_context: Dict[str, Any] = {
        "requestId": "test-correlation-id",
        "routeKey": route_key,
        "http": {"method": method, "path": path, "sourceIp": "127.0.0.1"},
    }
    if sub is not None:
        request_context["authorizer"] = {"jwt": {"claims": make_claims(sub), "scopes": None}}

    if body is not None and not isinstance(body, str):
        body = json.dumps(body)

    return {
        "version": "2.0",
        "routeKey": route_key,
        "rawPath": path,
        "headers": {"content-type": "application/json", **(headers or {})},
        "pathParameters": path_parameters or {},
        "queryStringParameters": query,
        "body": body,
        "isBase64Encoded": False,
        "requestContext": request_context,
    }


def parse_body(response: Dict[str, Any]) -> Any:
    """Decode the JSON body of a handler response."""
    return json.loads(response["body"])


def make_organization(owner_uid: str, **overrides: Any) -> Dict[str, Any]:
    """Build an organization record."""
    organization = {
        "organizationId": str(uuid4()),
        "name": "주말 등산 크루",
        "description": "",
        "ownerUid": owner_uid,
        "categories": ["등산/트레킹"],
        "memberCount": 1,
        "photoUrl": "",
        "location": "서울",
        "tags": [],
        "status": "active",
        "createdAt": DEFAULT_JOINED_AT,
        "updatedAt": DEFAULT_JOINED_AT,
    }
    organization.update(overrides)
    return organization


def make_member(organization_id: str, user_id: str, **overrides: Any) -> Dict[str, Any]:
    """Build a membership record."""
    member = {
        "memberId": str(uuid4()),
        "organizationId": organization_id,
        "userId": user_id,
        "name": "홍길동",
        "role": "member",
        "status": "active",
        "joinedAt": DEFAULT_JOINED_AT,
    }
    member.update(overrides)
    return member


def make_schedule(organization_id: str, created_by: str, **overrides: Any) -> Dict[str, Any]:
    """Build a schedule record."""
    schedule = {
        "scheduleId": str(uuid4()),
        "organizationId": organization_id,
        "title": "북한산 등반",
        "date": "2025-03-15",
        "time": "14:00",
        "location": {"name": "북한산 입구"},
        "description": "",
        "createdBy": created_by,
        "participants": [],
        "maxParticipants": 10,
        "hasChat": True,
        "status": "scheduled",
        "createdAt": DEFAULT_JOINED_AT,
        "updatedAt": DEFAULT_JOINED_AT,
    }
    schedule.update(overrides)
    return schedule


def make_message(schedule_id: str, sender_id: str, **overrides: Any) -> Dict[str, Any]:
    """Build a chat message record."""
    created_at = overrides.pop("createdAt", DEFAULT_JOINED_AT)
    message = {
        "messageId": f"msg_{created_at}_{uuid4().hex[:9]}",
        "scheduleId": schedule_id,
        "senderId": sender_id,
        "senderName": "홍길동",
        "senderAvatar": None,
        "content": "안녕하세요",
        "type": "text",
        "attachments": [],
        "readBy": [sender_id],
        "isDeleted": False,
        "createdAt": created_at,
        "updatedAt": created_at,
    }
    message.update(overrides)
    return message


def make_stream_record(
    event_name: str,
    new_image: Optional[Dict[str, Any]] = None,
    old_image: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Build a DynamoDB Stream record with typed images."""
    dynamodb: Dict[str, Any] = {"StreamViewType": "NEW_AND_OLD_IMAGES"}
    if new_image is not None:
        dynamodb["NewImage"] = {k: _serializer.serialize(v) for k, v in new_image.items()}
    if old_image is not None:
        dynamodb["OldImage"] = {k: _serializer.serialize(v) for k, v in old_image.items()}
    return {
        "eventID": uuid4().hex,
        "eventName": event_name,
        "eventSource": "aws:dynamodb",
        "dynamodb": dynamodb,
    }
