"""
Chat helpers: system message generation for schedule chat rooms.

System messages are derived by comparing the old and new image of a
schedule and are posted without a sender.
"""

from typing import Any, Dict, List, Optional

from .dates import format_korean_datetime, now_millis, schedule_start
from .ids import new_message_id

UNKNOWN_USER = "알 수 없는 사용자"

RSVP_STATUS_TEXT = {
    "going": "참석",
    "maybe": "미정",
    "declined": "불참",
}

PREVIEW_LENGTH = 50
LAST_MESSAGE_LENGTH = 100


class SystemType:
    """`systemType` values of system messages."""

    RSVP_CHANGE = "rsvp_change"
    SCHEDULE_UPDATE = "schedule_update"
    SCHEDULE_CANCEL = "schedule_cancel"
    SCHEDULE_COMPLETE = "schedule_complete"


def truncate(text: Optional[str], length: int = PREVIEW_LENGTH) -> str:
    """
    Examples:
        >>> truncate("hello", 10)
        'hello'
        >>> truncate("abcdef", 3)
        'abc...'
    """
    text = text or ""
    return text if len(text) <= length else text[:length] + "..."


def build_system_message(
    schedule_id: str,
    content: str,
    system_type: str,
    payload: Optional[Dict[str, Any]] = None,
    timestamp_ms: Optional[int] = None,
) -> Dict[str, Any]:
    """A chat message posted by the system rather than a member."""
    timestamp = timestamp_ms if timestamp_ms is not None else now_millis()
    message: Dict[str, Any] = {
        "messageId": new_message_id(timestamp),
        "scheduleId": schedule_id,
        "senderId": None,
        "senderName": None,
        "senderAvatar": None,
        "content": content,
        "type": "system",
        "systemType": system_type,
        "attachments": [],
        "readBy": [],
        "isDeleted": False,
        "createdAt": timestamp,
        "updatedAt": timestamp,
    }
    if payload is not None:
        message["systemPayload"] = payload
    return message


def chat_enabled(schedule: Dict[str, Any]) -> bool:
    """Chat is on unless the schedule explicitly disables it."""
    return schedule.get("hasChat", True) is not False


def _participants_by_user(schedule: Optional[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Index participants by userId; plain string entries are attending user ids."""
    participants: Dict[str, Dict[str, Any]] = {}
    for entry in (schedule or {}).get("participants") or []:
        if isinstance(entry, str):
            participants[entry] = {"userId": entry, "status": "going"}
        elif isinstance(entry, dict) and entry.get("userId"):
            participants[str(entry["userId"])] = entry
    return participants


def rsvp_change_messages(
    before: Optional[Dict[str, Any]], after: Dict[str, Any]
) -> List[Dict[str, Any]]:
    """One system message per participant who joined or changed their RSVP."""
    if not chat_enabled(after):
        return []

    old_participants = _participants_by_user(before)
    messages = []
    for user_id, participant in _participants_by_user(after).items():
        old_status = old_participants.get(user_id, {}).get("status")
        new_status = participant.get("status")
        if user_id in old_participants and old_status == new_status:
            continue

        user_name = participant.get("userName") or UNKNOWN_USER
        status_text = RSVP_STATUS_TEXT.get(str(new_status), str(new_status))
        messages.append(
            build_system_message(
                after["scheduleId"],
                f"{user_name}님이 {status_text}으로 변경했습니다.",
                SystemType.RSVP_CHANGE,
                {
                    "userId": user_id,
                    "userName": user_name,
                    "oldStatus": old_status,
                    "newStatus": new_status,
                },
            )
        )
    return messages


def _location_name(location: Any) -> Optional[str]:
    if isinstance(location, dict):
        return location.get("name")
    return location or None


def schedule_update_messages(before: Dict[str, Any], after: Dict[str, Any]) -> List[Dict[str, Any]]:
    """System messages announcing title, time, place and status changes."""
    if not chat_enabled(after):
        return []

    schedule_id = after["scheduleId"]
    notices = []

    if before.get("title") != after.get("title"):
        notices.append(
            (f'일정 제목이 "{after.get("title")}"(으)로 변경되었습니다.', SystemType.SCHEDULE_UPDATE)
        )

    old_start = schedule_start(before.get("date"), before.get("time"))
    new_start = schedule_start(after.get("date"), after.get("time"))
    if new_start is not None and old_start != new_start:
        notices.append(
            (
                f"일정 시간이 {format_korean_datetime(new_start)}(으)로 변경되었습니다.",
                SystemType.SCHEDULE_UPDATE,
            )
        )

    old_place = _location_name(before.get("location"))
    new_place = _location_name(after.get("location"))
    if new_place and old_place != new_place:
        notices.append((f'장소가 "{new_place}"(으)로 변경되었습니다.', SystemType.SCHEDULE_UPDATE))

    if before.get("status") != after.get("status"):
        if after.get("status") == "cancelled":
            notices.append(("⚠️ 이 일정이 취소되었습니다.", SystemType.SCHEDULE_CANCEL))
        elif after.get("status") == "completed":
            notices.append(("✅ 이 일정이 완료되었습니다.", SystemType.SCHEDULE_COMPLETE))

    return [build_system_message(schedule_id, content, system_type) for content, system_type in notices]
