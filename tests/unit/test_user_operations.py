"""Tests for user profile handlers."""

from typing import Any, Dict
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from mokoji.handlers import user_operations
from mokoji.utils import users
from mokoji.utils.dynamodb import override_table
from mokoji.utils.errors import AppError, ErrorCode
from tests.unit.fixtures import make_http_event, parse_body


def _create_event(sub: str, body: Dict[str, Any]) -> Dict[str, Any]:
    return make_http_event("POST /users", sub=sub, body=body)


class TestCreateUser:
    """Tests for create_user handler."""

    def test_creates_profile_with_defaults(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        response = user_operations.create_user(
            _create_event("u1", {"userId": "u1", "email": "a@example.com", "name": "홍길동", "createdAt": 1}),
            lambda_context,
        )

        assert response["statusCode"] == 201
        body = parse_body(response)
        assert body["userId"] == "u1"
        assert body["location"] == "서울"
        assert body["interestCategories"] == []
        assert body["createdAt"] != 1

    def test_requires_user_id_and_email(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        with pytest.raises(AppError, match="email is required"):
            user_operations.create_user(_create_event("u1", {"userId": "u1"}), lambda_context)

    def test_duplicate_user(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        users.create_user({"userId": "u1", "email": "a@example.com"})

        with pytest.raises(AppError) as exc_info:
            user_operations.create_user(
                _create_event("u1", {"userId": "u1", "email": "a@example.com"}), lambda_context
            )

        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "User already exists"

    def test_email_in_use(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        users.create_user({"userId": "u0", "email": "a@example.com"})

        with pytest.raises(AppError) as exc_info:
            user_operations.create_user(
                _create_event("u1", {"userId": "u1", "email": "a@example.com"}), lambda_context
            )

        assert exc_info.value.message == "Email already in use"

    def test_cannot_create_someone_else(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        with pytest.raises(AppError) as exc_info:
            user_operations.create_user(
                _create_event("u1", {"userId": "u2", "email": "b@example.com"}), lambda_context
            )

        assert exc_info.value.error_code == ErrorCode.FORBIDDEN

    def test_unauthenticated(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        event = make_http_event("POST /users", body={"userId": "u1", "email": "a@example.com"})

        with pytest.raises(AppError) as exc_info:
            user_operations.create_user(event, lambda_context)

        assert exc_info.value.status_code == 401

    def test_database_failure_is_internal_error(self, lambda_context: Any) -> None:
        table = MagicMock()
        table.get_item.side_effect = ClientError(
            {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "slow down"}}, "GetItem"
        )
        override_table("users", table)

        with pytest.raises(AppError) as exc_info:
            user_operations.create_user(
                _create_event("u1", {"userId": "u1", "email": "a@example.com"}), lambda_context
            )

        assert exc_info.value.error_code == ErrorCode.INTERNAL_ERROR
        assert exc_info.value.message == "Failed to create user"


class TestGetUser:
    def test_by_id(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        users.create_user({"userId": "u1", "email": "a@example.com"})
        event = make_http_event("GET /users/{userId}", sub="u2", path_parameters={"userId": "u1"})

        assert parse_body(user_operations.get_user(event, lambda_context))["email"] == "a@example.com"

    def test_by_encoded_email(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        users.create_user({"userId": "u1", "email": "a+b@example.com"})
        event = make_http_event(
            "GET /users/email/{email}", sub="u2", path_parameters={"email": "a%2Bb%40example.com"}
        )

        assert parse_body(user_operations.get_user_by_email(event, lambda_context))["userId"] == "u1"

    def test_not_found(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        event = make_http_event("GET /users/{userId}", sub="u2", path_parameters={"userId": "ghost"})

        with pytest.raises(AppError, match="User not found"):
            user_operations.get_user(event, lambda_context)


class TestUpdateUser:
    """Tests for update_user handler."""

    def _event(self, sub: str, user_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        return make_http_event("PUT /users/{userId}", sub=sub, path_parameters={"userId": user_id}, body=body)

    def test_updates_own_profile(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        users.create_user({"userId": "u1", "email": "a@example.com", "createdAt": 5})

        response = user_operations.update_user(
            self._event("u1", "u1", {"mbti": "INFP", "createdAt": 99, "userId": "hijack"}), lambda_context
        )

        body = parse_body(response)
        assert body["mbti"] == "INFP"
        assert body["createdAt"] == 5
        assert body["userId"] == "u1"

    def test_cannot_update_others(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        with pytest.raises(AppError) as exc_info:
            user_operations.update_user(self._event("u1", "u2", {"mbti": "INFP"}), lambda_context)

        assert exc_info.value.status_code == 403

    def test_missing_profile(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        with pytest.raises(AppError) as exc_info:
            user_operations.update_user(self._event("u1", "u1", {"mbti": "INFP"}), lambda_context)

        assert exc_info.value.status_code == 404

    def test_empty_update_returns_profile(self, dynamodb_tables: Dict[str, Any], lambda_context: Any) -> None:
        users.create_user({"userId": "u1", "email": "a@example.com"})

        response = user_operations.update_user(self._event("u1", "u1", {"updatedAt": 1}), lambda_context)

        assert parse_body(response)["userId"] == "u1"
