"""API infrastructure stack for Lambda + API Gateway wiring."""

from __future__ import annotations

from pathlib import Path

from aws_cdk import BundlingOptions, CfnOutput, Duration, Stack
from aws_cdk import aws_apigateway as apigateway
from aws_cdk import aws_lambda as lambda_
from constructs import Construct

from stacks.data_stack import DataStack

CORS_ALLOW_HEADERS = [
    "Content-Type",
    "Authorization",
    "X-Amz-Date",
    "X-Api-Key",
    "X-Amz-Security-Token",
]
CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# Resource path -> methods served by the runtime handler.
ROUTES: dict[str, tuple[str, ...]] = {
    "health": ("GET",),
    "auth/login": ("POST",),
    "auth/logout": ("POST",),
    "auth/session": ("GET",),
    "courses": ("GET", "POST"),
    "courses/statistics": ("GET",),
    "courses/{id}": ("GET", "PATCH", "DELETE"),
    "courses/{id}/archive": ("PUT",),
    "courses/{id}/unarchive": ("PUT",),
    "events": ("GET", "POST"),
    "events/statistics": ("GET",),
    "events/{id}": ("GET", "PATCH", "DELETE"),
    "events/{id}/archive": ("PUT",),
    "events/{id}/unarchive": ("PUT",),
    "events/{id}/registrations": ("GET",),
    "inquiries": ("GET", "POST"),
    "inquiries/statistics": ("GET",),
    "inquiries/{id}": ("GET", "PATCH"),
    "demo-bookings": ("GET", "POST"),
    "demo-bookings/statistics": ("GET",),
    "demo-bookings/{id}": ("GET", "PATCH"),
    "event-registrations": ("GET", "POST"),
    "event-registrations/statistics": ("GET",),
    "event-registrations/{id}": ("GET", "PATCH"),
    "contact": ("POST",),
    "uploads": ("POST",),
    "images/{id}": ("GET",),
}


class ApiStack(Stack):
    """Owns API Gateway and the single Lambda serving the back office API."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        data_stack: DataStack,
        stage_name: str,
        admin_email: str,
        admin_name: str,
        admin_password: str,
        session_ttl_hours: str,
        cors_allow_origin: str,
        log_level: str,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        project_root = Path(__file__).resolve().parents[2]
        lambda_code = lambda_.Code.from_asset(
            str(project_root),
            exclude=[
                ".git",
                ".github",
                "infra",
                "cdk.out",
                "__pycache__",
                "tests",
            ],
            bundling=BundlingOptions(
                image=lambda_.Runtime.PYTHON_3_12.bundling_image,
                command=["bash", "-c", "pip install --no-cache-dir . -t /asset-output"],
            ),
        )

        env = {
            **data_stack.table_environment(),
            "IMAGES_BUCKET": data_stack.images_bucket.bucket_name,
            "ADMIN_EMAIL": admin_email,
            "ADMIN_NAME": admin_name,
            "SESSION_TTL_HOURS": session_ttl_hours,
            "CORS_ALLOW_ORIGIN": cors_allow_origin,
            "LOG_LEVEL": log_level,
        }
        if admin_password:
            env["ADMIN_PASSWORD"] = admin_password

        app_api_handler = lambda_.Function(
            self,
            "AppApiHandler",
            runtime=lambda_.Runtime.PYTHON_3_12,
            code=lambda_code,
            handler="backend.runtime.lambda_handler",
            timeout=Duration.seconds(29),
            memory_size=256,
            environment=env,
        )

        data_stack.images_bucket.grant_read_write(app_api_handler)
        for table in data_stack.tables.values():
            table.grant_read_write_data(app_api_handler)

        allow_origins = (
            apigateway.Cors.ALL_ORIGINS if cors_allow_origin == "*" else [cors_allow_origin]
        )
        self.rest_api = apigateway.RestApi(
            self,
            "BackOfficeApi",
            rest_api_name="ddmrp-backoffice-api",
            deploy_options=apigateway.StageOptions(stage_name=stage_name),
            binary_media_types=["image/*"],
            default_cors_preflight_options=apigateway.CorsOptions(
                allow_origins=allow_origins,
                allow_methods=CORS_ALLOW_METHODS,
                allow_headers=CORS_ALLOW_HEADERS,
                allow_credentials=cors_allow_origin != "*",
            ),
        )
        for response_type, construct_name in (
            (apigateway.ResponseType.DEFAULT_4_XX, "Default4xxCors"),
            (apigateway.ResponseType.DEFAULT_5_XX, "Default5xxCors"),
        ):
            self.rest_api.add_gateway_response(
                construct_name,
                type=response_type,
                response_headers={
                    "Access-Control-Allow-Origin": f"'{cors_allow_origin}'",
                    "Access-Control-Allow-Headers": f"'{','.join(CORS_ALLOW_HEADERS)}'",
                    "Access-Control-Allow-Methods": f"'{','.join(CORS_ALLOW_METHODS)}'",
                },
            )

        app_integration = apigateway.LambdaIntegration(app_api_handler)
        for path, methods in ROUTES.items():
            resource = self.rest_api.root.resource_for_path(path)
            for method in methods:
                resource.add_method(method, app_integration)

        api_base_url = self.rest_api.url.rstrip("/")
        CfnOutput(
            self,
            "ApiBaseUrl",
            value=api_base_url,
            description="Base URL for the marketing site and admin dashboard",
        )
        CfnOutput(
            self,
            "HealthCheckUrl",
            value=f"{api_base_url}/health",
            description="Liveness and database connectivity probe",
        )
