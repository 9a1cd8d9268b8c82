"""
Display name helpers for member lists.
"""

import string
from collections import defaultdict
from typing import Any, Dict, List

from .dates import to_millis

UNKNOWN_NAME = "알 수 없음"


def _suffix(index: int) -> str:
    """A, B, ..., Z, AA, AB, ..."""
    letters = ""
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        letters = string.ascii_uppercase[remainder] + letters
    return letters


def add_duplicate_name_suffixes(members: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Give members that share a name a distinguishing `displayName`.

    Members with a unique name keep it as their display name. When several
    members share a name, the earliest to join gets " A", the next " B" and
    so on. Input order is preserved and the input dicts are not modified.
    """
    groups: Dict[str, List[int]] = defaultdict(list)
    for index, member in enumerate(members):
        groups[member.get("name") or UNKNOWN_NAME].append(index)

    display_names: Dict[int, str] = {}
    for name, indexes in groups.items():
        if len(indexes) == 1:
            display_names[indexes[0]] = name
            continue
        ordered = sorted(indexes, key=lambda i: to_millis(members[i].get("joinedAt")))
        for position, index in enumerate(ordered):
            display_names[index] = f"{name} {_suffix(position)}"

    return [
        {**member, "displayName": display_names[index]} for index, member in enumerate(members)
    ]
