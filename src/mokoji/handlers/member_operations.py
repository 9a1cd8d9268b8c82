"""
Organization membership Lambda handlers.

Keeps the crew's memberCount in step with its active memberships.
"""

from typing import Any, Dict, Optional

from botocore.exceptions import ClientError

from ..utils import members, organizations
from ..utils.auth import require_auth
from ..utils.dynamodb import is_condition_failure
from ..utils.errors import AppError, ErrorCode
from ..utils.http_types import get_json_body, get_path_parameter
from ..utils.ids import membership_id
from ..utils.logging import get_correlation_id, get_logger
from ..utils.names import add_duplicate_name_suffixes
from ..utils.responses import created, json_response
from ..utils.validation import MEMBER_ROLES, MEMBER_STATUSES, require_fields, validate_choice

ALREADY_MEMBER_MESSAGE = "User is already a member of this organization"


def _is_active(member: Optional[Dict[str, Any]]) -> bool:
    return bool(member) and member.get("status", "active") == "active"  # type: ignore[union-attr]


def create_member(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Add a user to a crew.

    Request body:
        userId, organizationId (required), role, status, name, avatar, joinedAt

    The memberId is derived from the organization and user, so a second
    join (even a concurrent one) fails the conditional write with 409.

    Returns:
        201 with the membership record
    """
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        require_auth(event)
        body = get_json_body(event)
        require_fields(body, ["userId", "organizationId"])
        validate_choice("role", body.get("role"), MEMBER_ROLES)
        validate_choice("status", body.get("status"), MEMBER_STATUSES)

        organization_id = body["organizationId"]
        if not organizations.get_organization(organization_id):
            raise AppError(ErrorCode.NOT_FOUND, "Organization not found")

        # Memberships created before memberIds were derived use random ids
        if members.find_membership(body["userId"], organization_id):
            raise AppError(ErrorCode.ALREADY_EXISTS, ALREADY_MEMBER_MESSAGE)

        try:
            member = members.create_member(
                {
                    **body,
                    "memberId": membership_id(organization_id, body["userId"]),
                    "role": body.get("role") or "member",
                    "status": body.get("status") or "active",
                }
            )
        except ClientError as e:
            if is_condition_failure(e):
                raise AppError(ErrorCode.ALREADY_EXISTS, ALREADY_MEMBER_MESSAGE)
            raise

        if _is_active(member):
            organizations.adjust_member_count(organization_id, 1)

        logger.info(
            "Member added",
            member_id=member["memberId"],
            organization_id=organization_id,
            user_id=member["userId"],
        )
        return created(member)

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to create member", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to create member")


def update_member(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Change a member's role and/or status."""
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        require_auth(event)
        member_id = get_path_parameter(event, "memberId")
        body = get_json_body(event)

        updates = {k: body[k] for k in ("role", "status") if body.get(k) is not None}
        if not updates:
            raise AppError(
                ErrorCode.INVALID_INPUT, "At least one field (role or status) is required"
            )
        validate_choice("role", updates.get("role"), MEMBER_ROLES)
        validate_choice("status", updates.get("status"), MEMBER_STATUSES)

        existing = members.get_member(member_id)
        if not existing:
            raise AppError(ErrorCode.NOT_FOUND, "Member not found")

        member = members.update_member(member_id, updates)

        was_active, is_active = _is_active(existing), _is_active(member)
        if was_active != is_active:
            organizations.adjust_member_count(existing["organizationId"], 1 if is_active else -1)

        logger.info("Member updated", member_id=member_id, fields=sorted(updates))
        return json_response(member)

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to update member", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to update member")


def delete_member(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        require_auth(event)
        member_id = get_path_parameter(event, "memberId")

        member = members.get_member(member_id)
        if not member:
            raise AppError(ErrorCode.NOT_FOUND, "Member not found")

        members.delete_member(member_id)
        if _is_active(member):
            organizations.adjust_member_count(member["organizationId"], -1)

        logger.info("Member removed", member_id=member_id)
        return json_response({"success": True, "memberId": member_id})

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to delete member", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to delete member")


def list_members_by_organization(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Members of a crew, each with a disambiguated displayName."""
    require_auth(event)
    organization_id = get_path_parameter(event, "orgId")
    member_list = members.list_members_by_organization(organization_id)
    return json_response({"members": add_duplicate_name_suffixes(member_list)})


def list_memberships_by_user(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    require_auth(event)
    user_id = get_path_parameter(event, "userId")
    return json_response({"memberships": members.list_memberships_by_user(user_id)})
