"""Tests for crew activity feed handlers."""

from decimal import Decimal
from typing import Any, Dict

import pytest

from mokoji.handlers import activity_log_operations
from mokoji.utils import activity_logs
from mokoji.utils.dates import now_millis
from mokoji.utils.errors import AppError
from tests.unit.fixtures import make_http_event, parse_body


class TestActivityLogs:
    """Tests for create and list handlers."""

    def test_create_defaults_user_to_caller(
        self, dynamodb_tables: Dict[str, Any], lambda_context: Any, owner_id: str
    ) -> None:
        event = make_http_event(
            "POST /activity-logs",
            sub=owner_id,
            body={"organizationId": "o1", "action": "schedule_created", "userName": "크루장"},
        )

        response = activity_log_operations.create_activity_log(event, lambda_context)

        assert response["statusCode"] == 201
        log = parse_body(response)
        assert log["userId"] == owner_id
        assert log["metadata"] == {}
        assert log["timestamp"] > 0

    def test_client_timestamp_is_ignored(
        self, dynamodb_tables: Dict[str, Any], lambda_context: Any, owner_id: str
    ) -> None:
        """The feed sort key is always server time."""
        event = make_http_event(
            "POST /activity-logs",
            sub=owner_id,
            body={"organizationId": "o1", "action": "a", "userName": "a", "timestamp": "yesterday"},
        )
        before = now_millis()

        log = parse_body(activity_log_operations.create_activity_log(event, lambda_context))

        stored = activity_logs.list_activity_logs_by_organization("o1", 10)[0]
        assert isinstance(stored["timestamp"], Decimal)
        assert int(stored["timestamp"]) >= before
        assert log["timestamp"] == int(stored["timestamp"])

    def test_create_requires_fields(self, dynamodb_tables: Dict[str, Any], lambda_context: Any, owner_id: str) -> None:
        event = make_http_event("POST /activity-logs", sub=owner_id, body={"organizationId": "o1"})

        with pytest.raises(AppError, match="Missing required fields: organizationId, action, userName"):
            activity_log_operations.create_activity_log(event, lambda_context)

    def test_list_newest_first(self, dynamodb_tables: Dict[str, Any], lambda_context: Any, owner_id: str) -> None:
        for i, action in enumerate(["member_joined", "photo_uploaded"]):
            activity_logs.create_activity_log(
                {
                    "logId": f"l{i}",
                    "organizationId": "o1",
                    "action": action,
                    "userName": "a",
                    "timestamp": 1_700_000_000_000 + i,
                }
            )
        event = make_http_event(
            "GET /activity-logs/organization/{orgId}", sub=owner_id, path_parameters={"orgId": "o1"}
        )

        body = parse_body(activity_log_operations.list_activity_logs_by_organization(event, lambda_context))

        assert body["count"] == 2
        assert [log["action"] for log in body["logs"]] == ["photo_uploaded", "member_joined"]
