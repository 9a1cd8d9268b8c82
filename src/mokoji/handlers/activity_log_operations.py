"""
Crew activity feed Lambda handlers.
"""

from typing import Any, Dict

from ..utils import activity_logs
from ..utils.auth import require_auth
from ..utils.dates import now_millis
from ..utils.errors import AppError, ErrorCode
from ..utils.http_types import get_json_body, get_path_parameter, get_query_parameter
from ..utils.ids import new_id
from ..utils.logging import get_correlation_id, get_logger
from ..utils.responses import created, json_response
from ..utils.validation import parse_limit, require_fields


def create_activity_log(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Append an entry to a crew's activity feed.

    Request body:
        organizationId, action, userName (required), userId, userProfileImage,
        details, metadata

    timestamp is always the server time.
    """
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        caller = require_auth(event)
        body = get_json_body(event)
        require_fields(body, ["organizationId", "action", "userName"])

        log = activity_logs.create_activity_log(
            {
                "logId": new_id(),
                "organizationId": body["organizationId"],
                "action": body["action"],
                "userId": body.get("userId") or caller["sub"],
                "userName": body["userName"],
                "userProfileImage": body.get("userProfileImage") or "",
                "details": body.get("details") or "",
                "metadata": body.get("metadata") or {},
                "timestamp": now_millis(),
            }
        )

        logger.info("Activity logged", log_id=log["logId"], action=log["action"])
        return created(log)

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to create activity log", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to create activity log")


def list_activity_logs_by_organization(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    require_auth(event)
    organization_id = get_path_parameter(event, "orgId")
    limit = parse_limit(get_query_parameter(event, "limit"))

    logs = activity_logs.list_activity_logs_by_organization(organization_id, limit)
    return json_response({"logs": logs, "count": len(logs)})
