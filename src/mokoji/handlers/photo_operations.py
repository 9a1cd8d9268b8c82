"""
Crew photo Lambda handlers.
"""

from typing import Any, Dict

from ..utils import organizations, photos
from ..utils.auth import is_organization_owner, require_auth
from ..utils.dates import now_millis
from ..utils.errors import AppError, ErrorCode
from ..utils.http_types import get_json_body, get_path_parameter, get_query_parameter
from ..utils.logging import get_correlation_id, get_logger
from ..utils.responses import created, json_response
from ..utils.storage import delete_from_url
from ..utils.validation import parse_limit, require_fields


def create_photo(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Register an uploaded photo.

    Request body:
        photoId, url, organizationId, uploaderUid (required), uploaderName,
        caption, tags, thumbnailUrl

    createdAt is always the server time.
    """
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        require_auth(event)
        body = get_json_body(event)
        require_fields(body, ["photoId", "url", "organizationId", "uploaderUid"])

        photo = photos.create_photo(
            {
                "photoId": body["photoId"],
                "url": body["url"],
                "organizationId": body["organizationId"],
                "uploaderUid": body["uploaderUid"],
                "uploaderName": body.get("uploaderName") or "Unknown",
                "caption": body.get("caption") or "",
                "tags": body.get("tags") or [],
                "thumbnailUrl": body.get("thumbnailUrl") or body["url"],
                "createdAt": now_millis(),
            }
        )

        logger.info("Photo created", photo_id=photo["photoId"], organization_id=photo["organizationId"])
        return created(photo)

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to create photo", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to create photo")


def delete_photo(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Delete a photo record and, best effort, its stored files.

    Allowed for the uploader and the crew owner.
    """
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        caller = require_auth(event)
        photo_id = get_path_parameter(event, "photoId")

        photo = photos.get_photo(photo_id)
        if not photo:
            raise AppError(ErrorCode.NOT_FOUND, "Photo not found")

        if photo.get("uploaderUid") != caller["sub"]:
            organization = organizations.get_organization(photo.get("organizationId", ""))
            if not is_organization_owner(organization, caller["sub"]):
                raise AppError(ErrorCode.FORBIDDEN, "Not authorized to delete this photo")

        photos.delete_photo(photo_id)
        delete_from_url(photo.get("url"))
        if photo.get("thumbnailUrl") and photo.get("thumbnailUrl") != photo.get("url"):
            delete_from_url(photo["thumbnailUrl"])

        logger.info("Photo deleted", photo_id=photo_id)
        return json_response({"success": True, "message": "Photo deleted successfully"})

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to delete photo", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to delete photo")


def list_photos_by_organization(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    require_auth(event)
    organization_id = get_path_parameter(event, "orgId")
    limit = parse_limit(get_query_parameter(event, "limit"))

    result = photos.list_photos_by_organization(organization_id, limit)
    return json_response({"photos": result, "count": len(result)})
