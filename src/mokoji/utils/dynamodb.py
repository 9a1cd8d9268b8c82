"""
Centralized DynamoDB table access utilities.

Provides singleton-pattern table accessors with lazy initialization
and test monkeypatch support, plus the expression and pagination helpers
shared by every data access module.
"""

import os
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple

import boto3

if TYPE_CHECKING:
    from mypy_boto3_dynamodb import DynamoDBServiceResource
    from mypy_boto3_dynamodb.service_resource import Table


# Module-level cache for test overrides
_table_overrides: dict[str, Optional["Table"]] = {}


def get_required_env(name: str, default: Optional[str] = None) -> str:
    """Get a required environment variable.

    In Lambda/production, the env var must be set. For tests and scripts, a
    default can be provided to allow the code to run in mocked environments.

    Args:
        name: Environment variable name
        default: Optional default used when the variable is unset

    Returns:
        The environment variable value

    Raises:
        ValueError: If the env var is not set and no default is provided
    """
    value = os.getenv(name, default)
    if value is None:
        raise ValueError(f"Required environment variable '{name}' is not set")
    return value


def _get_dynamodb() -> "DynamoDBServiceResource":
    """Get DynamoDB resource with optional endpoint override for LocalStack."""
    return boto3.resource("dynamodb", endpoint_url=os.getenv("DYNAMODB_ENDPOINT"))


def get_dynamodb_resource() -> "DynamoDBServiceResource":
    """Get DynamoDB resource for operations that span tables (transactions, batches)."""
    return _get_dynamodb()


class TableAccessor:
    """Centralized access to DynamoDB tables with environment-based naming."""

    _instance: Optional["TableAccessor"] = None

    def __new__(cls) -> "TableAccessor":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _table(self, key: str, env_name: str, default_name: str) -> "Table":
        if override := _table_overrides.get(key):
            return override
        return _get_dynamodb().Table(get_required_env(env_name, default_name))

    @property
    def users(self) -> "Table":
        """Get users table instance."""
        return self._table("users", "USERS_TABLE_NAME", "mokoji-users")

    @property
    def organizations(self) -> "Table":
        """Get organizations (crews) table instance."""
        return self._table("organizations", "ORGANIZATIONS_TABLE_NAME", "mokoji-organizations")

    @property
    def members(self) -> "Table":
        """Get organization members table instance."""
        return self._table("members", "MEMBERS_TABLE_NAME", "mokoji-organization-members")

    @property
    def schedules(self) -> "Table":
        """Get schedules table instance."""
        return self._table("schedules", "SCHEDULES_TABLE_NAME", "mokoji-schedules")

    @property
    def messages(self) -> "Table":
        """Get schedule chat messages table instance."""
        return self._table("messages", "MESSAGES_TABLE_NAME", "mokoji-messages")

    @property
    def activity_logs(self) -> "Table":
        """Get activity logs table instance."""
        return self._table("activity_logs", "ACTIVITY_LOGS_TABLE_NAME", "mokoji-activity-logs")

    @property
    def photos(self) -> "Table":
        """Get photos table instance."""
        return self._table("photos", "PHOTOS_TABLE_NAME", "mokoji-photos")


# Singleton instance for import
tables = TableAccessor()


def build_update_expression(
    updates: Dict[str, Any],
) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
    """
    Build a SET update expression from a dict of attribute values.

    Every attribute goes through a `#name` placeholder so reserved words
    (date, location, status, ...) are safe.

    Returns:
        (UpdateExpression, ExpressionAttributeNames, ExpressionAttributeValues)
    """
    update_expressions = []
    expression_attribute_names: Dict[str, str] = {}
    expression_attribute_values: Dict[str, Any] = {}

    for index, (name, value) in enumerate(updates.items()):
        update_expressions.append(f"#f{index} = :v{index}")
        expression_attribute_names[f"#f{index}"] = name
        expression_attribute_values[f":v{index}"] = value

    return "SET " + ", ".join(update_expressions), expression_attribute_names, expression_attribute_values


def query_all(table: "Table", **kwargs: Any) -> List[Dict[str, Any]]:
    """Run a query and follow LastEvaluatedKey until every page is read."""
    items: List[Dict[str, Any]] = []
    while True:
        response = table.query(**kwargs)
        items.extend(response.get("Items", []))
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            return items
        kwargs["ExclusiveStartKey"] = last_key


def scan_all(table: "Table", **kwargs: Any) -> Iterable[Dict[str, Any]]:
    """Yield every item of a table scan, one page at a time."""
    while True:
        response = table.scan(**kwargs)
        yield from response.get("Items", [])
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            return
        kwargs["ExclusiveStartKey"] = last_key


# Test utilities
def override_table(table_name: str, table: Optional["Table"]) -> None:
    """Override a table for testing. Set to None to clear override."""
    _table_overrides[table_name] = table


def clear_all_overrides() -> None:
    """Clear all table overrides (call in test teardown)."""
    _table_overrides.clear()


def reset_singleton() -> None:
    """Reset the singleton instance (for testing isolation)."""
    TableAccessor._instance = None


def is_condition_failure(error: Exception) -> bool:
    """True for a ClientError caused by a failed ConditionExpression."""
    response = getattr(error, "response", None) or {}
    return response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"
