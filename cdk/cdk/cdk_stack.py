import os

from aws_cdk import CfnOutput, Stack
from constructs import Construct

from cdk.auth import create_cognito_auth
from cdk.dynamodb_tables import create_dynamodb_tables
from cdk.helpers import get_region_abbrev, make_resource_namer, parse_origins
from cdk.http_api import create_http_api
from cdk.iam_roles import create_lambda_execution_role
from cdk.lambdas import create_lambda_functions
from cdk.s3_buckets import create_s3_buckets


class CdkStack(Stack):
    """
    mokoji - Core Infrastructure Stack

    Creates:
    - DynamoDB tables (streams on schedules and messages)
    - S3 buckets for media and exports
    - IAM role and Lambda functions
    - Cognito User Pool for authentication
    - HTTP API with a JWT authorizer
    """

    def __init__(self, scope: Construct, construct_id: str, env_name: str = "dev", **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.env_name = env_name
        self.region_abbrev = get_region_abbrev()

        # Helper for consistent resource naming: {name}-{region}-{env}
        rn = make_resource_namer(self.region_abbrev, env_name)
        self.resource_name = rn

        site_url = os.getenv("SITE_URL", "https://mokoji.app")
        allowed_origins = parse_origins(os.getenv("ALLOWED_ORIGINS"))

        self.tables = create_dynamodb_tables(self, rn)

        buckets = create_s3_buckets(self, rn, allowed_origins)
        self.media_bucket = buckets["media_bucket"]
        self.exports_bucket = buckets["exports_bucket"]

        self.lambda_execution_role = create_lambda_execution_role(
            self, rn, dict(self.tables), [self.media_bucket, self.exports_bucket]
        )

        self.functions = create_lambda_functions(
            self,
            rn,
            self.lambda_execution_role,
            self.tables,
            self.media_bucket,
            self.exports_bucket,
        )

        auth = create_cognito_auth(self, rn, site_url, self.functions["post_auth_fn"])
        self.user_pool = auth["user_pool"]
        self.user_pool_client = auth["user_pool_client"]

        api_fn = self.functions["api_fn"]
        api_fn.add_environment("COGNITO_USER_POOL_ID", self.user_pool.user_pool_id)
        api_fn.add_environment("COGNITO_CLIENT_ID", self.user_pool_client.user_pool_client_id)

        self.http_api = create_http_api(
            self, rn, api_fn, self.user_pool, self.user_pool_client, allowed_origins
        )

        CfnOutput(self, "MediaBucketName", value=self.media_bucket.bucket_name)
        CfnOutput(self, "ExportsBucketName", value=self.exports_bucket.bucket_name)
