"""
User profile Lambda handlers.

Implements:
- POST /users: create the caller's profile
- GET /users/{userId}
- PUT /users/{userId}: update the caller's own profile
- GET /users/email/{email}
"""

from typing import Any, Dict

from botocore.exceptions import ClientError

from ..utils import users
from ..utils.auth import require_auth
from ..utils.dynamodb import is_condition_failure
from ..utils.errors import AppError, ErrorCode
from ..utils.http_types import get_json_body, get_path_parameter
from ..utils.logging import get_correlation_id, get_logger
from ..utils.responses import created, json_response
from ..utils.validation import require_field


def create_user(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Create a user profile.

    The caller can only create the profile keyed by their own Cognito sub,
    and an email can belong to one profile only.
    """
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        caller = require_auth(event)
        body = get_json_body(event)
        user_id = require_field(body, "userId")
        email = require_field(body, "email")

        if users.get_user(user_id):
            raise AppError(ErrorCode.ALREADY_EXISTS, "User already exists")

        existing = users.get_user_by_email(email)
        if existing and existing.get("userId") != user_id:
            raise AppError(ErrorCode.ALREADY_EXISTS, "Email already in use")

        if caller["sub"] != user_id:
            raise AppError(ErrorCode.FORBIDDEN, "You can only create your own profile")

        fields = {k: v for k, v in body.items() if k not in ("createdAt", "updatedAt")}
        user = users.create_user({**users.default_profile(), **fields})

        logger.info("User created", user_id=user_id)
        return created(user)

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to create user", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to create user")


def get_user(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Get a user profile by ID."""
    require_auth(event)
    user_id = get_path_parameter(event, "userId")

    user = users.get_user(user_id)
    if not user:
        raise AppError(ErrorCode.NOT_FOUND, "User not found")
    return json_response(user)


def get_user_by_email(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Get a user profile by (URL-encoded) email."""
    require_auth(event)
    email = get_path_parameter(event, "email")

    user = users.get_user_by_email(email)
    if not user:
        raise AppError(ErrorCode.NOT_FOUND, "User not found")
    return json_response(user)


def update_user(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Update the caller's own profile.

    userId, createdAt and updatedAt are never taken from the request.
    """
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        caller = require_auth(event)
        user_id = get_path_parameter(event, "userId")
        if caller["sub"] != user_id:
            raise AppError(ErrorCode.FORBIDDEN, "You can only update your own profile")

        updates = {
            k: v for k, v in get_json_body(event).items() if k not in users.PROTECTED_FIELDS
        }
        if not updates:
            user = users.get_user(user_id)
            if not user:
                raise AppError(ErrorCode.NOT_FOUND, "User not found")
            return json_response(user)

        try:
            user = users.update_user(user_id, updates)
        except ClientError as e:
            if is_condition_failure(e):
                raise AppError(ErrorCode.NOT_FOUND, "User not found")
            raise

        logger.info("User updated", user_id=user_id, fields=sorted(updates))
        return json_response(user)

    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to update user", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to update user")
