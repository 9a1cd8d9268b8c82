"""HTTP API (API Gateway v2) for the mokoji stack.

Every route of the application is proxied to the single API function.
Routes require a valid Cognito JWT except the public health check.
"""

from typing import Any, Iterable

from aws_cdk import CfnOutput, Duration
from aws_cdk import aws_apigatewayv2 as apigwv2
from aws_cdk import aws_apigatewayv2_authorizers as authorizers
from aws_cdk import aws_apigatewayv2_integrations as integrations
from aws_cdk import aws_cognito as cognito
from aws_cdk import aws_lambda as lambda_
from constructs import Construct

from mokoji.handlers.api import ROUTES

PUBLIC_ROUTES = frozenset({"GET /health"})


def _group_routes(route_keys: Iterable[str]) -> dict[str, list[apigwv2.HttpMethod]]:
    """Group route keys (`METHOD /path`) by path."""
    grouped: dict[str, list[apigwv2.HttpMethod]] = {}
    for route_key in route_keys:
        method, _, path = route_key.partition(" ")
        grouped.setdefault(path, []).append(apigwv2.HttpMethod[method])
    return grouped


def create_http_api(
    scope: Construct,
    rn: Any,  # Resource naming function
    api_fn: lambda_.IFunction,
    user_pool: cognito.IUserPool,
    user_pool_client: cognito.IUserPoolClient,
    allowed_origins: list[str],
) -> apigwv2.HttpApi:
    """Create the HTTP API with a JWT authorizer backed by the user pool.

    Args:
        scope: CDK construct scope
        rn: Resource naming function (name -> formatted name)
        api_fn: Function that serves every route
        user_pool: Cognito user pool issuing the tokens
        user_pool_client: App client the tokens are issued to
        allowed_origins: Browser origins allowed by CORS

    Returns:
        The HttpApi construct
    """
    http_api = apigwv2.HttpApi(
        scope,
        "HttpApi",
        api_name=rn("mokoji-api"),
        cors_preflight=apigwv2.CorsPreflightOptions(
            allow_origins=allowed_origins,
            allow_methods=[apigwv2.CorsHttpMethod.ANY],
            allow_headers=["Content-Type", "Authorization"],
            max_age=Duration.days(1),
        ),
    )

    integration = integrations.HttpLambdaIntegration("ApiIntegration", api_fn)
    jwt_authorizer = authorizers.HttpJwtAuthorizer(
        "CognitoAuthorizer",
        user_pool.user_pool_provider_url,
        jwt_audience=[user_pool_client.user_pool_client_id],
    )

    public = _group_routes(key for key in ROUTES if key in PUBLIC_ROUTES)
    protected = _group_routes(key for key in ROUTES if key not in PUBLIC_ROUTES)

    for path, methods in public.items():
        http_api.add_routes(path=path, methods=methods, integration=integration)
    for path, methods in protected.items():
        http_api.add_routes(path=path, methods=methods, integration=integration, authorizer=jwt_authorizer)

    CfnOutput(scope, "ApiUrl", value=http_api.api_endpoint)

    return http_api
