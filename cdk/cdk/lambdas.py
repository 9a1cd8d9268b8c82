"""Lambda function definitions for the mokoji stack.

This module creates all Lambda functions used by the application:
- API function serving every HTTP route
- Chat stream functions (schedule changes, new messages)
- Post-authentication Cognito trigger
"""

import os
from typing import TYPE_CHECKING, Any

from aws_cdk import Duration
from aws_cdk import aws_iam as iam
from aws_cdk import aws_lambda as lambda_
from aws_cdk import aws_lambda_event_sources as event_sources
from constructs import Construct

if TYPE_CHECKING:
    from aws_cdk import aws_dynamodb as dynamodb
    from aws_cdk import aws_s3 as s3

TABLE_ENV_VARS = {
    "users_table": "USERS_TABLE_NAME",
    "organizations_table": "ORGANIZATIONS_TABLE_NAME",
    "members_table": "MEMBERS_TABLE_NAME",
    "schedules_table": "SCHEDULES_TABLE_NAME",
    "messages_table": "MESSAGES_TABLE_NAME",
    "activity_logs_table": "ACTIVITY_LOGS_TABLE_NAME",
    "photos_table": "PHOTOS_TABLE_NAME",
}


def _stream_source(table: "dynamodb.Table", **kwargs: Any) -> event_sources.DynamoEventSource:
    """New stream records only; a failing batch is split before it is retried."""
    return event_sources.DynamoEventSource(
        table,
        starting_position=lambda_.StartingPosition.LATEST,
        batch_size=100,
        bisect_batch_on_error=True,
        retry_attempts=3,
        **kwargs,
    )


def create_lambda_functions(
    scope: Construct,
    rn: Any,  # Resource naming function
    lambda_execution_role: iam.Role,
    tables: dict[str, "dynamodb.Table"],
    media_bucket: "s3.Bucket",
    exports_bucket: "s3.Bucket",
) -> dict[str, lambda_.Function | lambda_.LayerVersion]:
    """Create all Lambda functions for the stack.

    Args:
        scope: CDK construct scope
        rn: Resource naming function (name -> formatted name)
        lambda_execution_role: IAM role for Lambda execution
        tables: DynamoDB tables keyed as returned by create_dynamodb_tables
        media_bucket: S3 bucket for uploads
        exports_bucket: S3 bucket for exports

    Returns:
        Dictionary containing all Lambda functions and layer
    """
    lambda_env = {
        "MEDIA_BUCKET": media_bucket.bucket_name,
        "EXPORTS_BUCKET": exports_bucket.bucket_name,
        "LOG_LEVEL": "INFO",
        **{env_var: tables[key].table_name for key, env_var in TABLE_ENV_VARS.items()},
    }

    # Lambda Layer for shared dependencies (openpyxl)
    lambda_layer_path = os.path.join(os.path.dirname(__file__), "..", "lambda-layer")
    if not os.path.exists(lambda_layer_path):
        os.makedirs(lambda_layer_path, exist_ok=True)

    shared_layer = lambda_.LayerVersion(
        scope,
        "SharedDependenciesLayer",
        layer_version_name=rn("mokoji-deps"),
        code=lambda_.Code.from_asset(lambda_layer_path),
        compatible_runtimes=[lambda_.Runtime.PYTHON_3_13],
        description="Shared Python dependencies for Lambda functions",
    )

    # Use only the src directory for Lambda code (not the entire repo)
    lambda_code_path = os.path.join(os.path.dirname(__file__), "..", "..", "src")

    lambda_code = lambda_.Code.from_asset(
        lambda_code_path,
        exclude=[
            "__pycache__",
            "*.pyc",
            ".pytest_cache",
        ],
    )

    def make_function(construct_id: str, name: str, handler: str, timeout: int, memory_size: int) -> lambda_.Function:
        return lambda_.Function(
            scope,
            construct_id,
            function_name=rn(name),
            runtime=lambda_.Runtime.PYTHON_3_13,
            handler=handler,
            code=lambda_code,
            layers=[shared_layer],
            timeout=Duration.seconds(timeout),
            memory_size=memory_size,
            role=lambda_execution_role,
            environment=lambda_env,
        )

    # Every HTTP route is served by one function; the roster export needs the extra memory
    api_fn = make_function("ApiFn", "mokoji-api", "mokoji.handlers.api.handler", 30, 512)

    schedule_stream_fn = make_function(
        "ScheduleStreamFn", "mokoji-schedule-stream", "mokoji.handlers.chat_triggers.on_schedule_change", 30, 256
    )
    schedule_stream_fn.add_event_source(_stream_source(tables["schedules_table"]))

    message_stream_fn = make_function(
        "MessageStreamFn", "mokoji-message-stream", "mokoji.handlers.chat_triggers.on_message_created", 30, 256
    )
    message_stream_fn.add_event_source(
        _stream_source(
            tables["messages_table"],
            filters=[lambda_.FilterCriteria.filter({"eventName": lambda_.FilterRule.is_equal("INSERT")})],
        )
    )

    # Post-Authentication Lambda (Cognito Trigger)
    post_auth_fn = make_function(
        "PostAuthenticationFn", "mokoji-post-auth", "mokoji.handlers.post_authentication.lambda_handler", 10, 256
    )

    return {
        "shared_layer": shared_layer,
        "api_fn": api_fn,
        "schedule_stream_fn": schedule_stream_fn,
        "message_stream_fn": message_stream_fn,
        "post_auth_fn": post_auth_fn,
    }
