"""
API Gateway HTTP API (payload 2.0) entry point. Routes by route key.

Every route of the REST API is served by this one Lambda. Handlers raise
AppError; this module turns errors into JSON responses with the mapped
status code.
"""

from typing import Any, Callable, Dict

from . import (
    activity_log_operations,
    health,
    member_export,
    member_operations,
    message_operations,
    organization_operations,
    photo_operations,
    schedule_operations,
    upload_operations,
    user_operations,
)
from ..utils.errors import AppError
from ..utils.http_types import get_route_key
from ..utils.logging import get_correlation_id, get_logger
from ..utils.responses import error_response, json_response

Handler = Callable[[Dict[str, Any], Any], Dict[str, Any]]

ROUTES: Dict[str, Handler] = {
    "GET /health": health.health_check,
    # Users
    "POST /users": user_operations.create_user,
    "GET /users/{userId}": user_operations.get_user,
    "PUT /users/{userId}": user_operations.update_user,
    "GET /users/email/{email}": user_operations.get_user_by_email,
    # Organizations
    "GET /organizations": organization_operations.list_organizations,
    "POST /organizations": organization_operations.create_organization,
    "GET /organizations/{orgId}": organization_operations.get_organization,
    "PUT /organizations/{orgId}": organization_operations.update_organization,
    "DELETE /organizations/{orgId}": organization_operations.delete_organization,
    "GET /organizations/owner/{ownerUid}": organization_operations.list_organizations_by_owner,
    "POST /organizations/{orgId}/members/export": member_export.export_members,
    # Members
    "POST /members": member_operations.create_member,
    "PUT /members/{memberId}": member_operations.update_member,
    "DELETE /members/{memberId}": member_operations.delete_member,
    "GET /members/organization/{orgId}": member_operations.list_members_by_organization,
    "GET /members/user/{userId}": member_operations.list_memberships_by_user,
    # Schedules
    "POST /schedules": schedule_operations.create_schedule,
    "GET /schedules/{scheduleId}": schedule_operations.get_schedule,
    "PUT /schedules/{scheduleId}": schedule_operations.update_schedule,
    "DELETE /schedules/{scheduleId}": schedule_operations.delete_schedule,
    "GET /schedules/organization/{orgId}": schedule_operations.list_schedules_by_organization,
    # Schedule chat
    "GET /schedules/{scheduleId}/messages": message_operations.list_messages,
    "POST /schedules/{scheduleId}/messages": message_operations.send_message,
    "PATCH /schedules/{scheduleId}/messages": message_operations.mark_messages_read,
    "DELETE /schedules/{scheduleId}/messages": message_operations.delete_message,
    # Photos
    "POST /photos": photo_operations.create_photo,
    "DELETE /photos/{photoId}": photo_operations.delete_photo,
    "GET /photos/organization/{orgId}": photo_operations.list_photos_by_organization,
    # Activity logs
    "POST /activity-logs": activity_log_operations.create_activity_log,
    "GET /activity-logs/organization/{orgId}": activity_log_operations.list_activity_logs_by_organization,
    # Uploads
    "POST /upload": upload_operations.create_upload,
    "POST /upload-chat-media": upload_operations.create_chat_media_upload,
}


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Dispatch the request to its route handler; return JSON with CORS headers."""
    logger = get_logger(__name__, get_correlation_id(event))
    route_key = get_route_key(event)

    if route_key.startswith("OPTIONS "):
        return json_response("", 204)

    route = ROUTES.get(route_key)
    if route is None:
        logger.warning("No route", route_key=route_key)
        return json_response({"error": "Not found"}, 404)

    try:
        return route(event, context)
    except AppError as e:
        log = logger.error if e.status_code >= 500 else logger.info
        log("Request failed", route_key=route_key, error_code=e.error_code, error=e.message)
        return error_response(e)
    except Exception as e:
        logger.error("Unhandled error", route_key=route_key, error=str(e))
        return error_response(e)
