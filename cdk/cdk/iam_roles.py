"""
IAM roles and policies for the CDK stack.

Creates:
- Lambda execution role with DynamoDB and S3 permissions
"""

from typing import Callable, Dict, Iterable

from aws_cdk import aws_dynamodb as dynamodb
from aws_cdk import aws_iam as iam
from aws_cdk import aws_s3 as s3
from constructs import Construct


def create_lambda_execution_role(
    stack: Construct,
    rn: Callable[[str], str],
    tables: Dict[str, dynamodb.ITable],
    buckets: Iterable[s3.IBucket],
) -> iam.Role:
    """Create the Lambda execution role with appropriate permissions.

    Args:
        stack: CDK Construct (usually the Stack instance)
        rn: helper function to create resource names
        tables: Dict of DynamoDB tables to grant access to
        buckets: S3 buckets the functions read and write

    Returns:
        The Lambda execution role
    """
    lambda_execution_role = iam.Role(
        stack,
        "LambdaExecutionRole",
        role_name=rn("mokoji-lambda-exec"),
        assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"),
        managed_policies=[iam.ManagedPolicy.from_aws_managed_policy_name("service-role/AWSLambdaBasicExecutionRole")],
    )

    for table in tables.values():
        table.grant_read_write_data(lambda_execution_role)

        # Grant access to GSI indexes
        lambda_execution_role.add_to_policy(
            iam.PolicyStatement(
                actions=["dynamodb:Query", "dynamodb:Scan"],
                resources=[f"{table.table_arn}/index/*"],
            )
        )

    for bucket in buckets:
        bucket.grant_read_write(lambda_execution_role)
        bucket.grant_delete(lambda_execution_role)

    return lambda_execution_role
