from typing import Callable, Dict

from aws_cdk import RemovalPolicy
from aws_cdk import aws_dynamodb as ddb
from constructs import Construct


def _table(
    stack: Construct,
    construct_id: str,
    table_name: str,
    partition_key: str,
    stream: bool = False,
) -> ddb.Table:
    return ddb.Table(
        stack,
        construct_id,
        table_name=table_name,
        partition_key=ddb.Attribute(name=partition_key, type=ddb.AttributeType.STRING),
        billing_mode=ddb.BillingMode.PAY_PER_REQUEST,
        point_in_time_recovery_specification=ddb.PointInTimeRecoverySpecification(point_in_time_recovery_enabled=True),
        stream=ddb.StreamViewType.NEW_AND_OLD_IMAGES if stream else None,
        removal_policy=RemovalPolicy.RETAIN,
        deletion_protection=True,
    )


def create_dynamodb_tables(stack: Construct, rn: Callable[[str], str]) -> Dict[str, ddb.Table]:
    """Create all DynamoDB tables used by the application and return them in a dict.

    Schedules and messages have streams enabled; the chat trigger
    functions consume them.

    Args:
        stack: CDK Construct (usually the Stack instance)
        rn: helper function to create resource names (rn(name: str) -> str)

    Returns:
        Mapping of table names to Table constructs
    """
    users_table = _table(stack, "UsersTable", rn("mokoji-users"), "userId")
    users_table.add_global_secondary_index(
        index_name="email-index",
        partition_key=ddb.Attribute(name="email", type=ddb.AttributeType.STRING),
        projection_type=ddb.ProjectionType.ALL,
    )

    organizations_table = _table(stack, "OrganizationsTable", rn("mokoji-organizations"), "organizationId")
    organizations_table.add_global_secondary_index(
        index_name="ownerUid-index",
        partition_key=ddb.Attribute(name="ownerUid", type=ddb.AttributeType.STRING),
        projection_type=ddb.ProjectionType.ALL,
    )

    members_table = _table(stack, "MembersTable", rn("mokoji-organization-members"), "memberId")
    members_table.add_global_secondary_index(
        index_name="organizationId-index",
        partition_key=ddb.Attribute(name="organizationId", type=ddb.AttributeType.STRING),
        projection_type=ddb.ProjectionType.ALL,
    )
    members_table.add_global_secondary_index(
        index_name="userId-index",
        partition_key=ddb.Attribute(name="userId", type=ddb.AttributeType.STRING),
        projection_type=ddb.ProjectionType.ALL,
    )

    schedules_table = _table(stack, "SchedulesTable", rn("mokoji-schedules"), "scheduleId", stream=True)
    schedules_table.add_global_secondary_index(
        index_name="organizationId-date-index",
        partition_key=ddb.Attribute(name="organizationId", type=ddb.AttributeType.STRING),
        sort_key=ddb.Attribute(name="date", type=ddb.AttributeType.STRING),
        projection_type=ddb.ProjectionType.ALL,
    )

    messages_table = _table(stack, "MessagesTable", rn("mokoji-messages"), "messageId", stream=True)
    messages_table.add_global_secondary_index(
        index_name="scheduleId-createdAt-index",
        partition_key=ddb.Attribute(name="scheduleId", type=ddb.AttributeType.STRING),
        sort_key=ddb.Attribute(name="createdAt", type=ddb.AttributeType.NUMBER),
        projection_type=ddb.ProjectionType.ALL,
    )

    activity_logs_table = _table(stack, "ActivityLogsTable", rn("mokoji-activity-logs"), "logId")
    activity_logs_table.add_global_secondary_index(
        index_name="organizationId-timestamp-index",
        partition_key=ddb.Attribute(name="organizationId", type=ddb.AttributeType.STRING),
        sort_key=ddb.Attribute(name="timestamp", type=ddb.AttributeType.NUMBER),
        projection_type=ddb.ProjectionType.ALL,
    )

    photos_table = _table(stack, "PhotosTable", rn("mokoji-photos"), "photoId")
    photos_table.add_global_secondary_index(
        index_name="organizationId-createdAt-index",
        partition_key=ddb.Attribute(name="organizationId", type=ddb.AttributeType.STRING),
        sort_key=ddb.Attribute(name="createdAt", type=ddb.AttributeType.NUMBER),
        projection_type=ddb.ProjectionType.ALL,
    )

    return {
        "users_table": users_table,
        "organizations_table": organizations_table,
        "members_table": members_table,
        "schedules_table": schedules_table,
        "messages_table": messages_table,
        "activity_logs_table": activity_logs_table,
        "photos_table": photos_table,
    }
