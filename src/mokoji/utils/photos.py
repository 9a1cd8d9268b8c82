"""
Crew photo records.

Table: photos (PK=photoId, GSI organizationId-createdAt-index).
"""

from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Key

from .dates import now_millis
from .dynamodb import tables


def get_photo(photo_id: str) -> Optional[Dict[str, Any]]:
    response = tables.photos.get_item(Key={"photoId": photo_id})
    return response.get("Item")


def list_photos_by_organization(organization_id: str, limit: int = 50) -> List[Dict[str, Any]]:
    """Newest photos first."""
    response = tables.photos.query(
        IndexName="organizationId-createdAt-index",
        KeyConditionExpression=Key("organizationId").eq(organization_id),
        ScanIndexForward=False,
        Limit=limit,
    )
    return list(response.get("Items", []))


def create_photo(photo: Dict[str, Any]) -> Dict[str, Any]:
    item = {**photo, "createdAt": photo.get("createdAt") or now_millis()}
    tables.photos.put_item(Item=item)
    return item


def delete_photo(photo_id: str) -> None:
    tables.photos.delete_item(Key={"photoId": photo_id})
