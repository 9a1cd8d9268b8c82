"""Health check handler (unauthenticated)."""

import os
from datetime import datetime, timezone
from typing import Any, Dict

from ..utils.responses import json_response

CHECKED_ENV_VARS = (
    "AWS_REGION",
    "COGNITO_USER_POOL_ID",
    "COGNITO_CLIENT_ID",
    "MEDIA_BUCKET",
    "USERS_TABLE_NAME",
)


def health_check(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Report liveness and which configuration variables are present, never their values."""
    return json_response(
        {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": {
                name: "SET" if os.getenv(name) else "NOT SET" for name in CHECKED_ENV_VARS
            },
        }
    )
