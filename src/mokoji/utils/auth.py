"""
Authentication and authorization utilities.

Tokens are verified by the HTTP API JWT authorizer before the Lambda runs;
handlers only read the verified Cognito claims from the request context.
"""

from typing import Any, Dict, List, Optional, TypedDict

from .errors import AppError, ErrorCode


class AuthUser(TypedDict):
    """Identity of the caller taken from Cognito ID/access token claims."""

    sub: str
    email: Optional[str]
    username: Optional[str]
    groups: List[str]


def get_claims(event: Dict[str, Any]) -> Dict[str, Any]:
    """Return JWT claims from an API Gateway HTTP API (payload 2.0) event."""
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    claims = (authorizer.get("jwt") or {}).get("claims")
    if claims is None:
        # REST API / Lambda authorizer shape
        claims = authorizer.get("claims") or {}
    return dict(claims)


def _parse_groups(raw: Any) -> List[str]:
    """Normalize `cognito:groups`, which arrives as a list or as "[a b]"."""
    if not raw:
        return []
    if isinstance(raw, list):
        return [str(group) for group in raw]
    return [group for group in str(raw).strip("[]").replace(",", " ").split() if group]


def get_auth_user(event: Dict[str, Any]) -> Optional[AuthUser]:
    """
    Extract the authenticated caller from the event.

    Returns:
        AuthUser, or None when the request carries no verified identity
    """
    claims = get_claims(event)
    sub = claims.get("sub")
    if not sub:
        return None
    return {
        "sub": str(sub),
        "email": claims.get("email"),
        "username": claims.get("cognito:username") or claims.get("username"),
        "groups": _parse_groups(claims.get("cognito:groups")),
    }


def require_auth(event: Dict[str, Any]) -> AuthUser:
    """Return the caller or raise UNAUTHORIZED."""
    user = get_auth_user(event)
    if user is None:
        raise AppError(ErrorCode.UNAUTHORIZED, "Unauthorized")
    return user


def is_organization_owner(organization: Optional[Dict[str, Any]], user_id: str) -> bool:
    """Check if the user owns the organization."""
    return bool(organization) and organization.get("ownerUid") == user_id  # type: ignore[union-attr]


def is_organization_admin(
    organization: Optional[Dict[str, Any]],
    membership: Optional[Dict[str, Any]],
    user_id: str,
) -> bool:
    """
    Check if the user may manage the organization.

    The owner always may; otherwise the user needs an active membership
    with role owner or admin.
    """
    if is_organization_owner(organization, user_id):
        return True
    if not membership or membership.get("userId") != user_id:
        return False
    return membership.get("status") == "active" and membership.get("role") in ("owner", "admin")
