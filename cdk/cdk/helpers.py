"""
Shared helper utilities for CDK stack construction.

Resource naming (rn) plus `.env` loading and CORS origin parsing.
"""

import os
from pathlib import Path
from typing import Callable, Optional

# Region abbreviation mapping for resource naming
# Pattern: {name}-{region_abbrev}-{env} e.g. mokoji-users-ane2-dev
REGION_ABBREVIATIONS: dict[str, str] = {
    "us-east-1": "ue1",
    "us-east-2": "ue2",
    "us-west-2": "uw2",
    "eu-central-1": "ec1",
    "ap-northeast-1": "ane1",  # Tokyo
    "ap-northeast-2": "ane2",  # Seoul
    "ap-northeast-3": "ane3",  # Osaka
    "ap-southeast-1": "ase1",  # Singapore
}

DEFAULT_REGION = "ap-northeast-2"


def get_region() -> str:
    """Get the AWS region from environment variables or default to Seoul."""
    return os.getenv("AWS_REGION") or os.getenv("CDK_DEFAULT_REGION") or DEFAULT_REGION


def get_region_abbrev(region: Optional[str] = None) -> str:
    """Get the region abbreviation for resource naming.

    Args:
        region: AWS region code. If None, reads from environment.

    Returns:
        Region abbreviation (e.g., 'ane2' for 'ap-northeast-2')
    """
    if region is None:
        region = get_region()
    return REGION_ABBREVIATIONS.get(region, region[:3])


def make_resource_namer(region_abbrev: str, env_name: str) -> Callable[[str], str]:
    """Create a resource naming function.

    Args:
        region_abbrev: Region abbreviation (e.g., 'ane2')
        env_name: Environment name (e.g., 'dev', 'prod')

    Returns:
        A function that takes a base name and returns a fully qualified name
    """

    def rn(name: str) -> str:
        """Generate resource name with region and environment suffix."""
        return f"{name}-{region_abbrev}-{env_name}"

    return rn


def parse_origins(raw: Optional[str]) -> list[str]:
    """Comma separated list of allowed browser origins; `*` when unset."""
    origins = [origin.strip() for origin in (raw or "").split(",") if origin.strip()]
    return origins or ["*"]


def load_env_file(path: Path) -> dict[str, str]:
    """Export `KEY=value` lines from a `.env` file into os.environ.

    Blank lines and `#` comments are skipped. Variables already set in the
    environment win over the file.

    Returns:
        The variables that were applied.
    """
    applied: dict[str, str] = {}
    if not path.exists():
        return applied

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if key and not os.getenv(key):
            os.environ[key] = value
            applied[key] = value
    return applied
