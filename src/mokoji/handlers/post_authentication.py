"""
Cognito Post-Authentication Lambda Trigger

Creates or updates the user's profile record in DynamoDB when they sign in,
so every authenticated user has a users record keyed by their Cognito sub.

Trigger: Post Authentication
Event: After user signs in (including first-time social login)
"""

from typing import Any, Dict

from ..utils import users
from ..utils.dates import now_millis
from ..utils.logging import get_logger

logger = get_logger(__name__)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Post-Authentication Lambda Trigger Handler

    Event structure:
    {
        "version": "1",
        "triggerSource": "PostAuthentication_Authentication",
        "region": "ap-northeast-2",
        "userPoolId": "ap-northeast-2_EXAMPLE",
        "userName": "kakao_123456789",
        "request": {
            "userAttributes": {
                "sub": "a1b2c3d4-...",
                "email": "user@example.com",
                "name": "홍길동"
            }
        },
        "response": {}
    }

    Returns:
        event: Must return the event unmodified for Cognito to continue
    """
    try:
        logger.info("Post-authentication trigger invoked", trigger_source=event.get("triggerSource"))

        user_attributes = event.get("request", {}).get("userAttributes", {})
        user_id = user_attributes.get("sub")
        email = user_attributes.get("email", "")

        if not user_id:
            logger.error("Missing sub in user attributes")
            return event

        # Empty strings are not valid email-index keys
        contact = {"email": email} if email else {}

        if users.get_user(user_id):
            logger.info("Updating existing user", user_id=user_id)
            users.update_user(user_id, {**contact, "lastLoginAt": now_millis()})
        else:
            logger.info("Creating new user", user_id=user_id)
            users.create_user(
                {
                    **users.default_profile(),
                    **contact,
                    "userId": user_id,
                    "name": user_attributes.get("name") or email.split("@")[0],
                    "lastLoginAt": now_millis(),
                }
            )

        return event

    except Exception as e:
        # Authentication must not fail because of a profile write
        logger.error("Error in post-authentication trigger", error=str(e))
        return event
