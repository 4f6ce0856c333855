#!/usr/bin/env python3
"""CDK app entrypoint for the back office infrastructure."""

from __future__ import annotations

import os

import aws_cdk as cdk

from stacks.api_stack import ApiStack
from stacks.data_stack import DataStack

app = cdk.App()

env = cdk.Environment(
    account=os.getenv("CDK_DEFAULT_ACCOUNT"),
    region=os.getenv("CDK_DEFAULT_REGION"),
)

stage_name = app.node.try_get_context("stageName") or "dev"
admin_email = app.node.try_get_context("adminEmail") or "admin@ddmrp.com"
admin_name = app.node.try_get_context("adminName") or "Admin User"
session_ttl_hours = str(app.node.try_get_context("sessionTtlHours") or "24")
cors_allow_origin = os.getenv("CORS_ALLOW_ORIGIN", "").strip() or "*"
log_level = app.node.try_get_context("logLevel") or "INFO"
admin_password = os.getenv("ADMIN_PASSWORD", "")

data_stack = DataStack(app, "BackOfficeDataStack", env=env)

api_stack = ApiStack(
    app,
    "BackOfficeApiStack",
    env=env,
    data_stack=data_stack,
    stage_name=stage_name,
    admin_email=admin_email,
    admin_name=admin_name,
    admin_password=admin_password,
    session_ttl_hours=session_ttl_hours,
    cors_allow_origin=cors_allow_origin,
    log_level=log_level,
)
api_stack.add_dependency(data_stack)

app.synth()
