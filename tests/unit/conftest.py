"""
Test fixtures for Lambda function tests.

Provides mocked AWS resources (moto), seeded records and Lambda contexts.
"""

from typing import Any, Dict, Generator

import boto3
import pytest
from moto import mock_aws

from mokoji.utils import dynamodb as dynamodb_utils
from mokoji.utils import storage
from tests.unit.fixtures import (
    EXPORTS_BUCKET,
    MEDIA_BUCKET,
    REGION,
    make_member,
    make_organization,
    make_schedule,
    make_user_id,
)
from tests.unit.table_schemas import TABLE_ENV_VARS, create_all_tables


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set fake AWS credentials and table names for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    monkeypatch.setenv("AWS_REGION", REGION)
    monkeypatch.delenv("DYNAMODB_ENDPOINT", raising=False)
    monkeypatch.delenv("S3_ENDPOINT", raising=False)
    for name, value in TABLE_ENV_VARS.items():
        monkeypatch.setenv(name, value)


@pytest.fixture(autouse=True)
def reset_overrides() -> Generator[None, None, None]:
    """Clear table and S3 client overrides between tests."""
    yield
    dynamodb_utils.clear_all_overrides()
    storage.s3_client = None


@pytest.fixture
def dynamodb_tables(aws_credentials: None) -> Generator[Dict[str, Any], None, None]:
    """Create all mock DynamoDB tables; yields name -> Table."""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name=REGION)
        yield create_all_tables(dynamodb)


@pytest.fixture
def s3_buckets(dynamodb_tables: Dict[str, Any], monkeypatch: pytest.MonkeyPatch) -> Any:
    """Create the media and exports buckets inside the same moto context."""
    s3 = boto3.client("s3", region_name=REGION)
    for bucket in (MEDIA_BUCKET, EXPORTS_BUCKET):
        s3.create_bucket(
            Bucket=bucket, CreateBucketConfiguration={"LocationConstraint": REGION}
        )
    monkeypatch.setenv("MEDIA_BUCKET", MEDIA_BUCKET)
    monkeypatch.setenv("EXPORTS_BUCKET", EXPORTS_BUCKET)
    return s3


@pytest.fixture
def lambda_context() -> Any:
    """Mock Lambda context."""

    class Context:
        function_name = "test-function"
        memory_limit_in_mb = 128
        invoked_function_arn = "arn:aws:lambda:ap-northeast-2:123456789012:function:test-function"
        aws_request_id = "test-request-id"

    return Context()


@pytest.fixture
def owner_id() -> str:
    """Cognito sub of the crew owner."""
    return make_user_id()


@pytest.fixture
def other_user_id() -> str:
    """Cognito sub of a user with no special rights."""
    return make_user_id()


@pytest.fixture
def sample_organization(dynamodb_tables: Dict[str, Any], owner_id: str) -> Dict[str, Any]:
    """A crew owned by owner_id, with the owner's membership stored."""
    organization = make_organization(owner_id)
    dynamodb_utils.tables.organizations.put_item(Item=organization)
    dynamodb_utils.tables.members.put_item(
        Item=make_member(organization["organizationId"], owner_id, name="크루장", role="owner")
    )
    return organization


@pytest.fixture
def sample_schedule(sample_organization: Dict[str, Any], owner_id: str) -> Dict[str, Any]:
    """A schedule of sample_organization."""
    schedule = make_schedule(sample_organization["organizationId"], owner_id)
    dynamodb_utils.tables.schedules.put_item(Item=schedule)
    return schedule
