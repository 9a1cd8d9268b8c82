"""
S3 Bucket creation for the CDK stack.

Creates:
- Media bucket for photos, crew images and chat attachments
- Exports bucket for generated member rosters
"""

from typing import Callable

from aws_cdk import Duration, RemovalPolicy
from aws_cdk import aws_iam as iam
from aws_cdk import aws_s3 as s3
from constructs import Construct


def create_s3_buckets(
    stack: Construct, rn: Callable[[str], str], allowed_origins: list[str]
) -> dict[str, s3.Bucket]:
    """Create S3 buckets for the application.

    Args:
        stack: CDK Construct (usually the Stack instance)
        rn: helper function to create resource names (rn(name: str) -> str)
        allowed_origins: Browser origins allowed to upload with presigned POSTs

    Returns:
        Dict with 'media_bucket' and 'exports_bucket'
    """
    # Media bucket: objects are served by their public URL
    media_bucket = s3.Bucket(
        stack,
        "Media",
        bucket_name=rn("mokoji-media"),
        versioned=False,
        encryption=s3.BucketEncryption.S3_MANAGED,
        block_public_access=s3.BlockPublicAccess(
            block_public_acls=True,
            ignore_public_acls=True,
            block_public_policy=False,
            restrict_public_buckets=False,
        ),
        cors=[
            s3.CorsRule(
                allowed_methods=[s3.HttpMethods.POST, s3.HttpMethods.GET],
                allowed_origins=allowed_origins,
                allowed_headers=["*"],
                max_age=3000,
            )
        ],
        removal_policy=RemovalPolicy.RETAIN,
    )
    media_bucket.add_to_resource_policy(
        iam.PolicyStatement(
            actions=["s3:GetObject"],
            resources=[media_bucket.arn_for_objects("*")],
            principals=[iam.AnyPrincipal()],
        )
    )

    # Exports bucket (for generated rosters, read through presigned URLs)
    exports_bucket = s3.Bucket(
        stack,
        "Exports",
        bucket_name=rn("mokoji-exports"),
        versioned=False,
        encryption=s3.BucketEncryption.S3_MANAGED,
        block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
        lifecycle_rules=[s3.LifecycleRule(prefix="exports/", expiration=Duration.days(7))],
        removal_policy=RemovalPolicy.RETAIN,
    )

    return {
        "media_bucket": media_bucket,
        "exports_bucket": exports_bucket,
    }
