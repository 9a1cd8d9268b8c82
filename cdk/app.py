#!/usr/bin/env python3
import os
from pathlib import Path

import aws_cdk as cdk

from cdk.cdk_stack import CdkStack
from cdk.helpers import get_region, get_region_abbrev, load_env_file

load_env_file(Path(__file__).parent / ".env")

app = cdk.App()

# dev or prod, from `-c environment=...` or ENVIRONMENT
env_name = app.node.try_get_context("environment") or os.getenv("ENVIRONMENT", "dev")
region = get_region()
region_abbrev = get_region_abbrev(region)

CdkStack(
    app,
    f"MokojiStack-{region_abbrev}-{env_name}",
    stack_name=f"mokoji-{region_abbrev}-{env_name}",
    env_name=env_name,
    env=cdk.Environment(
        account=os.getenv("AWS_ACCOUNT_ID") or os.getenv("CDK_DEFAULT_ACCOUNT"),
        region=region,
    ),
    description=f"Mokoji crew platform backend ({region_abbrev}-{env_name})",
)

app.synth()
