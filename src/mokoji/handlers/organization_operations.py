"""
Organization (crew) Lambda handlers.

Only the owner may change or delete a crew. Creating a crew also creates the
owner's membership.
"""

from typing import Any, Dict

from ..utils import organizations
from ..utils.auth import is_organization_owner, require_auth
from ..utils.categories import normalize_categories
from ..utils.dates import now_millis
from ..utils.errors import AppError, ErrorCode
from ..utils.http_types import get_json_body, get_path_parameter
from ..utils.ids import membership_id, new_id
from ..utils.logging import get_correlation_id, get_logger
from ..utils.responses import created, json_response
from ..utils.validation import require_fields

LIST_LIMIT = 100


def _get_organization_or_404(organization_id: str) -> Dict[str, Any]:
    organization = organizations.get_organization(organization_id)
    if not organization:
        raise AppError(ErrorCode.NOT_FOUND, "Organization not found")
    return organization


def list_organizations(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    require_auth(event)
    return json_response({"organizations": organizations.list_organizations(LIST_LIMIT)})


def list_organizations_by_owner(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    require_auth(event)
    owner_uid = get_path_parameter(event, "ownerUid")
    return json_response({"organizations": organizations.list_organizations_by_owner(owner_uid)})


def get_organization(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    require_auth(event)
    organization_id = get_path_parameter(event, "orgId")
    return json_response({"organization": _get_organization_or_404(organization_id)})


def create_organization(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Create a crew.

    Request body:
        name, ownerUid (required), description, categories, photoUrl,
        location, tags, and any extra display fields

    Returns:
        201 {"organization": {...}}
    """
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        require_auth(event)
        body = get_json_body(event)
        require_fields(body, ["name", "ownerUid"])

        organization_id = new_id()
        extra = {
            k: v
            for k, v in body.items()
            if k not in organizations.PROTECTED_FIELDS and k not in ("updatedAt", "ownerName")
        }
        organization = {
            **extra,
            "organizationId": organization_id,
            "name": body["name"],
            "description": body.get("description") or "",
            "ownerUid": body["ownerUid"],
            "categories": normalize_categories(body.get("categories")),
            "memberCount": 1,
            "photoUrl": body.get("photoUrl") or "",
            "location": body.get("location") or "",
            "tags": body.get("tags") or [],
            "status": "active",
        }
        owner_membership = {
            "memberId": membership_id(organization_id, body["ownerUid"]),
            "organizationId": organization_id,
            "userId": body["ownerUid"],
            "name": body.get("ownerName") or "",
            "role": "owner",
            "status": "active",
            "joinedAt": now_millis(),
        }

        organization = organizations.create_organization(organization, owner_membership)

        logger.info(
            "Organization created", organization_id=organization_id, owner_uid=body["ownerUid"]
        )
        return created({"organization": organization})

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to create organization", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to create organization")


def update_organization(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Update a crew (owner only); identity and counters are not writable."""
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        caller = require_auth(event)
        organization_id = get_path_parameter(event, "orgId")
        organization = _get_organization_or_404(organization_id)

        if not is_organization_owner(organization, caller["sub"]):
            raise AppError(ErrorCode.FORBIDDEN, "Only the owner can update this organization")

        updates = {
            k: v
            for k, v in get_json_body(event).items()
            if k not in organizations.PROTECTED_FIELDS and k != "updatedAt"
        }
        if "categories" in updates:
            updates["categories"] = normalize_categories(updates["categories"])
        if not updates:
            return json_response({"organization": organization})

        organization = organizations.update_organization(organization_id, updates)

        logger.info("Organization updated", organization_id=organization_id, fields=sorted(updates))
        return json_response({"organization": organization})

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to update organization", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to update organization")


def delete_organization(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Delete a crew (owner only). Memberships and schedules are left in place."""
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        caller = require_auth(event)
        organization_id = get_path_parameter(event, "orgId")
        organization = _get_organization_or_404(organization_id)

        if not is_organization_owner(organization, caller["sub"]):
            raise AppError(ErrorCode.FORBIDDEN, "Only the owner can delete this organization")

        organizations.delete_organization(organization_id)

        logger.info("Organization deleted", organization_id=organization_id)
        return json_response({"success": True, "message": "Organization deleted"})

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to delete organization", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to delete organization")
