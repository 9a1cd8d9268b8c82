"""
Data repair planning used by the maintenance scripts in scripts/.

The planning functions are pure: they take records already read from
DynamoDB and return what should change, so the scripts can print a dry run
before applying anything. `confirm` is the prompt every script shows before
it writes.
"""

from collections import Counter, defaultdict
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .dates import to_millis
from .users import default_profile

PROFILE_FIELDS = ("name", "avatar", "gender", "birthdate", "location", "mbti", "interestCategories")


def confirm(action: str, read: Callable[[str], str] = input) -> bool:
    """Ask before a script writes; only a literal `yes` proceeds."""
    return read(f"⚠️  {action} Continue? (yes/no): ").strip().lower() == "yes"


def find_duplicate_memberships(members: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Memberships to delete so each (userId, organizationId) pair keeps one record.

    The record with the newest joinedAt survives.
    """
    groups: Dict[Tuple[Any, Any], List[Dict[str, Any]]] = defaultdict(list)
    for member in members:
        groups[(member.get("userId"), member.get("organizationId"))].append(member)

    duplicates = []
    for records in groups.values():
        if len(records) < 2:
            continue
        ordered = sorted(records, key=lambda m: to_millis(m.get("joinedAt")), reverse=True)
        duplicates.extend(ordered[1:])
    return duplicates


def is_legacy_user_id(user_id: Optional[str]) -> bool:
    """Cognito subs are UUIDs; ids from the previous auth provider have no '-'."""
    return bool(user_id) and "-" not in str(user_id)


def plan_member_user_id_migration(
    members: Iterable[Dict[str, Any]], users: Iterable[Dict[str, Any]]
) -> Tuple[List[Tuple[Dict[str, Any], str]], List[Dict[str, Any]]]:
    """
    Map memberships keyed by legacy user ids onto Cognito subs.

    A legacy id is resolved through the email of its legacy users record to
    the users record whose id is a Cognito sub.

    Returns:
        (list of (membership, new userId), list of unmappable memberships)
    """
    users = list(users)
    email_by_legacy_id = {
        u["userId"]: u.get("email") for u in users if is_legacy_user_id(u.get("userId"))
    }
    cognito_id_by_email = {
        u.get("email"): u["userId"]
        for u in users
        if u.get("email") and not is_legacy_user_id(u.get("userId"))
    }

    remapped = []
    orphans = []
    for member in members:
        user_id = member.get("userId")
        if not is_legacy_user_id(user_id):
            continue
        new_id = cognito_id_by_email.get(email_by_legacy_id.get(user_id))
        if new_id:
            remapped.append((member, new_id))
        else:
            orphans.append(member)
    return remapped, orphans


def build_user_from_cognito(
    cognito_user: Dict[str, Any], legacy: Optional[Dict[str, Any]] = None
) -> Optional[Dict[str, Any]]:
    """
    A users record for a Cognito ListUsers entry, or None if it has no sub.

    Profile fields are copied from the legacy record with the same email
    when there is one.
    """
    attributes = {a["Name"]: a["Value"] for a in cognito_user.get("Attributes", [])}
    sub = attributes.get("sub")
    if not sub:
        return None
    email = attributes.get("email", "")

    user: Dict[str, Any] = {
        "userId": sub,
        "name": attributes.get("name") or email.split("@")[0],
        **default_profile(),
    }
    if email:
        user["email"] = email
    for field in PROFILE_FIELDS:
        if legacy and legacy.get(field) not in (None, ""):
            user[field] = legacy[field]
    return user


def count_active_members(members: Iterable[Dict[str, Any]]) -> Counter:
    """Active membership count per organizationId."""
    return Counter(
        m.get("organizationId") for m in members if m.get("status", "active") == "active"
    )


def plan_member_count_fixes(
    organizations: Iterable[Dict[str, Any]], members: Iterable[Dict[str, Any]]
) -> List[Tuple[str, int, int]]:
    """(organizationId, stored memberCount, actual count) for every mismatch."""
    counts = count_active_members(members)
    fixes = []
    for organization in organizations:
        org_id = organization["organizationId"]
        stored = int(organization.get("memberCount") or 0)
        actual = counts.get(org_id, 0)
        if stored != actual:
            fixes.append((org_id, stored, actual))
    return fixes
