"""Tests for ID and object key generation."""

import re
import uuid
from unittest.mock import patch

from mokoji.utils.ids import (
    chat_media_key,
    file_extension,
    generate_s3_key,
    new_id,
    new_message_id,
    random_suffix,
)


def test_new_id_is_uuid() -> None:
    assert uuid.UUID(new_id()).version == 4


def test_random_suffix_is_base36() -> None:
    suffix = random_suffix(9)

    assert re.fullmatch(r"[0-9a-z]{9}", suffix)


def test_new_message_id_format() -> None:
    assert re.fullmatch(r"msg_1700000000000_[0-9a-z]{9}", new_message_id(1700000000000))


def test_file_extension() -> None:
    assert file_extension("photo.PNG") == "png"
    assert file_extension("archive.tar.gz") == "gz"
    assert file_extension("noext") == "jpg"
    assert file_extension(None, default="bin") == "bin"


def test_generate_s3_key() -> None:
    with patch("mokoji.utils.ids.now_millis", return_value=1700000000000):
        key = generate_s3_key("organizations/org-1/", "cover.webp")

    assert re.fullmatch(r"organizations/org-1/1700000000000-[0-9a-z]{6}\.webp", key)


def test_chat_media_key() -> None:
    with patch("mokoji.utils.ids.now_millis", return_value=1700000000000):
        key = chat_media_key("sched-1", "clip.MP4")

    assert re.fullmatch(r"org_schedules/sched-1/messages/media/1700000000000_[0-9a-z]{6}\.mp4", key)
