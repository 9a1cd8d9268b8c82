"""Tests for the Cognito post-authentication trigger."""

from typing import Any, Dict

from mokoji.handlers.post_authentication import lambda_handler
from mokoji.utils import users


def _event(**attributes: str) -> Dict[str, Any]:
    return {
        "version": "1",
        "triggerSource": "PostAuthentication_Authentication",
        "region": "ap-northeast-2",
        "userPoolId": "ap-northeast-2_TEST",
        "userName": "kakao_123456789",
        "request": {"userAttributes": attributes},
        "response": {},
    }


class TestPostAuthentication:
    """Tests for lambda_handler."""

    def test_creates_profile_on_first_login(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        event = _event(sub="u1", email="hong@example.com", name="홍길동")

        assert lambda_handler(event, lambda_context) is event

        user = users.get_user("u1")
        assert user["email"] == "hong@example.com"
        assert user["name"] == "홍길동"
        assert user["location"] == "서울"
        assert user["lastLoginAt"] > 0

    def test_name_defaults_to_email_local_part(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        lambda_handler(_event(sub="u1", email="hong@example.com"), lambda_context)

        assert users.get_user("u1")["name"] == "hong"

    def test_updates_existing_profile(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        users.create_user({"userId": "u1", "email": "old@example.com", "name": "홍길동", "mbti": "INFP"})

        lambda_handler(_event(sub="u1", email="new@example.com"), lambda_context)

        user = users.get_user("u1")
        assert user["email"] == "new@example.com"
        assert user["mbti"] == "INFP"
        assert "lastLoginAt" in user

    def test_social_login_without_email(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        lambda_handler(_event(sub="u1", name="카카오유저"), lambda_context)

        user = users.get_user("u1")
        assert "email" not in user
        assert user["name"] == "카카오유저"

    def test_missing_sub_is_ignored(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        event = _event(email="hong@example.com")

        assert lambda_handler(event, lambda_context) is event
        assert users.get_user_by_email("hong@example.com") is None

    def test_errors_never_block_sign_in(self, lambda_context: Any, monkeypatch: Any) -> None:
        def fail(user_id: str) -> None:
            raise RuntimeError("table unavailable")

        monkeypatch.setattr(users, "get_user", fail)
        event = _event(sub="u1", email="hong@example.com")

        assert lambda_handler(event, lambda_context) is event
