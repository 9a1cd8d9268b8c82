"""Tests for input validation utilities."""

import pytest

from mokoji.utils.errors import AppError, ErrorCode
from mokoji.utils.validation import (
    MAX_UPLOAD_BYTES,
    parse_limit,
    require_field,
    require_fields,
    require_string_list,
    validate_chat_media_type,
    validate_choice,
    validate_upload_size,
)


class TestRequireFields:
    """Tests for require_fields."""

    def test_all_present(self) -> None:
        require_fields({"name": "크루", "ownerUid": "u"}, ["name", "ownerUid"])

    def test_message_names_every_required_field(self) -> None:
        with pytest.raises(AppError) as exc_info:
            require_fields({"name": "크루", "ownerUid": "  "}, ["name", "ownerUid"])

        error = exc_info.value
        assert error.error_code == ErrorCode.INVALID_INPUT
        assert error.message == "Missing required fields: name, ownerUid"
        assert error.details == {"missingFields": ["ownerUid"]}


class TestRequireField:
    def test_returns_value(self) -> None:
        assert require_field({"userId": "u"}, "userId") == "u"

    def test_missing(self) -> None:
        with pytest.raises(AppError, match="email is required"):
            require_field({}, "email")


class TestParseLimit:
    """Tests for parse_limit."""

    def test_default(self) -> None:
        assert parse_limit(None) == 50
        assert parse_limit("") == 50

    def test_valid(self) -> None:
        assert parse_limit("1") == 1
        assert parse_limit("100") == 100

    @pytest.mark.parametrize("raw", ["0", "101", "-5", "abc"])
    def test_invalid(self, raw: str) -> None:
        with pytest.raises(AppError) as exc_info:
            parse_limit(raw)

        assert exc_info.value.message == "Invalid limit parameter. Must be between 1 and 100"


class TestUploadValidation:
    """Tests for upload size and type checks."""

    def test_size_within_limit(self) -> None:
        assert validate_upload_size(1024) == 1024
        assert validate_upload_size(None) == 0

    def test_size_too_large(self) -> None:
        with pytest.raises(AppError) as exc_info:
            validate_upload_size(MAX_UPLOAD_BYTES + 1)

        assert exc_info.value.error_code == ErrorCode.PAYLOAD_TOO_LARGE
        assert exc_info.value.status_code == 413
        assert exc_info.value.message == "File size exceeds 50MB"

    def test_size_not_a_number(self) -> None:
        with pytest.raises(AppError) as exc_info:
            validate_upload_size("big")

        assert exc_info.value.error_code == ErrorCode.INVALID_INPUT

    def test_chat_media_types(self) -> None:
        assert validate_chat_media_type("image/png") == "image/png"
        assert validate_chat_media_type("video/mp4") == "video/mp4"

    def test_unsupported_media_type(self) -> None:
        with pytest.raises(AppError, match="Unsupported file type"):
            validate_chat_media_type("application/x-msdownload")


class TestValidateChoice:
    def test_none_is_allowed(self) -> None:
        validate_choice("role", None, ["owner", "admin", "member"])

    def test_invalid_choice(self) -> None:
        with pytest.raises(AppError, match="Invalid role. Must be one of: owner, admin, member"):
            validate_choice("role", "king", ["owner", "admin", "member"])


class TestRequireStringList:
    def test_returns_strings(self) -> None:
        assert require_string_list({"messageIds": ["a", "b"]}, "messageIds") == ["a", "b"]

    @pytest.mark.parametrize("value", [None, [], "a"])
    def test_missing_or_empty(self, value: object) -> None:
        with pytest.raises(AppError, match="messageIds array is required"):
            require_string_list({"messageIds": value}, "messageIds")
