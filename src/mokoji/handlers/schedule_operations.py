"""
Schedule Lambda handlers.

Implements create, read, partial update, delete and the per-crew listing
with an optional date range.
"""

from typing import Any, Dict

from ..utils import schedules
from ..utils.auth import require_auth
from ..utils.errors import AppError, ErrorCode
from ..utils.http_types import get_json_body, get_path_parameter, get_query_parameter
from ..utils.ids import new_id
from ..utils.logging import get_correlation_id, get_logger
from ..utils.responses import created, json_response
from ..utils.validation import require_fields

UPDATABLE_FIELDS = (
    "title",
    "date",
    "time",
    "location",
    "description",
    "participants",
    "maxParticipants",
    "status",
    "hasChat",
)


def _get_schedule_or_404(schedule_id: str) -> Dict[str, Any]:
    schedule = schedules.get_schedule(schedule_id)
    if not schedule:
        raise AppError(ErrorCode.NOT_FOUND, "Schedule not found")
    return schedule


def create_schedule(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Create a schedule for a crew.

    Request body:
        title, date (YYYY-MM-DD), organizationId (required), time, location,
        description, maxParticipants, participants, hasChat

    Returns:
        201 {"schedule": {...}}
    """
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        caller = require_auth(event)
        body = get_json_body(event)
        require_fields(body, ["title", "date", "organizationId"])

        schedule = schedules.create_schedule(
            {
                "scheduleId": new_id(),
                "title": body["title"],
                "date": body["date"],
                "time": body.get("time"),
                "location": body.get("location"),
                "description": body.get("description"),
                "organizationId": body["organizationId"],
                "createdBy": caller["sub"],
                "participants": body.get("participants") or [],
                "maxParticipants": body.get("maxParticipants"),
                "hasChat": body.get("hasChat", True) is not False,
            }
        )

        logger.info(
            "Schedule created",
            schedule_id=schedule["scheduleId"],
            organization_id=body["organizationId"],
        )
        return created({"schedule": schedule})

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to create schedule", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to create schedule")


def get_schedule(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    require_auth(event)
    schedule_id = get_path_parameter(event, "scheduleId")
    return json_response({"schedule": _get_schedule_or_404(schedule_id)})


def update_schedule(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Update only the fields present in the request body."""
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        require_auth(event)
        schedule_id = get_path_parameter(event, "scheduleId")
        body = get_json_body(event)

        schedule = _get_schedule_or_404(schedule_id)
        updates = {field: body[field] for field in UPDATABLE_FIELDS if field in body}
        if not updates:
            return json_response({"schedule": schedule})

        schedule = schedules.update_schedule(schedule_id, updates)

        logger.info("Schedule updated", schedule_id=schedule_id, fields=sorted(updates))
        return json_response({"schedule": schedule})

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to update schedule", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to update schedule")


def delete_schedule(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    logger = get_logger(__name__, get_correlation_id(event))

    require_auth(event)
    schedule_id = get_path_parameter(event, "scheduleId")
    _get_schedule_or_404(schedule_id)

    schedules.delete_schedule(schedule_id)
    logger.info("Schedule deleted", schedule_id=schedule_id)
    return json_response({"success": True})


def list_schedules_by_organization(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Query parameters startDate and endDate (YYYY-MM-DD) narrow the range when both are set."""
    require_auth(event)
    organization_id = get_path_parameter(event, "orgId")
    result = schedules.list_schedules_by_organization(
        organization_id,
        start_date=get_query_parameter(event, "startDate"),
        end_date=get_query_parameter(event, "endDate"),
    )
    return json_response({"schedules": result})
