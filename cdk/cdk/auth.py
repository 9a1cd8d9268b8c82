"""Cognito user pool for the mokoji stack.

Users sign in with their email address, or with Google when
GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET are set. Every successful sign-in
runs the post-authentication Lambda, which creates or refreshes the user's
profile record.
"""

import os
from typing import Any

from aws_cdk import CfnOutput, RemovalPolicy
from aws_cdk import aws_cognito as cognito
from aws_cdk import aws_lambda as lambda_
from constructs import Construct

LOCAL_DEV_ORIGIN = "http://localhost:3000"
AUTH_CALLBACK_PATH = "/auth/callback"


def _triggers(scope: Construct, post_auth_fn: lambda_.Function) -> cognito.UserPoolTriggers | None:
    """Post-authentication trigger, left off while importing an existing pool."""
    skip = scope.node.try_get_context("skip_lambda_triggers")
    if str(skip).lower() == "true":
        print("⚠️  Skipping Lambda triggers (import phase - will be added on subsequent deploy)")
        return None
    return cognito.UserPoolTriggers(post_authentication=post_auth_fn)


def _oauth_settings(site_url: str) -> cognito.OAuthSettings:
    """Authorization code flow for the web app and local development."""
    origins = [LOCAL_DEV_ORIGIN, site_url]
    return cognito.OAuthSettings(
        flows=cognito.OAuthFlows(authorization_code_grant=True),
        scopes=[cognito.OAuthScope.EMAIL, cognito.OAuthScope.OPENID, cognito.OAuthScope.PROFILE],
        callback_urls=[url for origin in origins for url in (origin, origin + AUTH_CALLBACK_PATH)],
        logout_urls=origins,
    )


def _configure_social_providers(
    scope: Construct, user_pool: cognito.UserPool
) -> list[cognito.UserPoolClientIdentityProvider]:
    """Configure the Google identity provider when its credentials are set."""
    supported_providers: list[cognito.UserPoolClientIdentityProvider] = [cognito.UserPoolClientIdentityProvider.COGNITO]

    if os.environ.get("GOOGLE_CLIENT_ID") and os.environ.get("GOOGLE_CLIENT_SECRET"):
        google = cognito.UserPoolIdentityProviderGoogle(
            scope,
            "GoogleProvider",
            user_pool=user_pool,
            client_id=os.environ["GOOGLE_CLIENT_ID"],
            client_secret=os.environ["GOOGLE_CLIENT_SECRET"],
            scopes=["email", "profile", "openid"],
            attribute_mapping=cognito.AttributeMapping(
                email=cognito.ProviderAttribute.GOOGLE_EMAIL,
                fullname=cognito.ProviderAttribute.GOOGLE_NAME,
            ),
        )
        supported_providers.append(cognito.UserPoolClientIdentityProvider.GOOGLE)
        user_pool.node.add_dependency(google)

    return supported_providers


def create_cognito_auth(
    scope: Construct,
    rn: Any,  # Resource naming function
    site_url: str,
    post_auth_fn: lambda_.Function,
) -> dict[str, Any]:
    """Create Cognito User Pool and related authentication resources.

    Args:
        scope: CDK construct scope
        rn: Resource naming function (name -> formatted name)
        site_url: Web app origin for OAuth callback URLs
        post_auth_fn: Lambda function for post-authentication trigger

    Returns:
        Dictionary containing user_pool and user_pool_client
    """
    user_pool = cognito.UserPool(
        scope,
        "UserPool",
        user_pool_name=rn("mokoji-users"),
        sign_in_aliases=cognito.SignInAliases(email=True, username=False),
        self_sign_up_enabled=True,
        auto_verify=cognito.AutoVerifiedAttrs(email=True),
        standard_attributes=cognito.StandardAttributes(
            email=cognito.StandardAttribute(required=True, mutable=True),
            fullname=cognito.StandardAttribute(required=False, mutable=True),
        ),
        password_policy=cognito.PasswordPolicy(
            min_length=8, require_lowercase=True, require_uppercase=False, require_digits=True, require_symbols=False
        ),
        account_recovery=cognito.AccountRecovery.EMAIL_ONLY,
        lambda_triggers=_triggers(scope, post_auth_fn),
        removal_policy=RemovalPolicy.RETAIN,
    )

    supported_providers = _configure_social_providers(scope, user_pool)
    user_pool_client = user_pool.add_client(
        "AppClient",
        user_pool_client_name="Mokoji-Web",
        auth_flows=cognito.AuthFlow(user_srp=True, user_password=True),
        o_auth=_oauth_settings(site_url),
        supported_identity_providers=supported_providers,
        prevent_user_existence_errors=True,
    )

    CfnOutput(scope, "UserPoolId", value=user_pool.user_pool_id)
    CfnOutput(scope, "UserPoolClientId", value=user_pool_client.user_pool_client_id)

    return {"user_pool": user_pool, "user_pool_client": user_pool_client}
