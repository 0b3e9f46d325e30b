"""
Resolver settings.

Knobs that shape the resolved plan without being part of a DeployIntent:
where the GitHub IP reference data lives, how long the origin secret is,
and the values of the reserved Lambda environment variables.

Dependencies: pydantic_settings
System role: Central configuration for the resolver
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field

from resolver.configs.base import BaseSettings
from resolver.configs.constants import MIN_SECRET_LENGTH


class ResolverSettings(BaseSettings):
    """Resolver configuration loaded from DEPLOY_RESOLVER_* variables."""

    github_ip_ranges_file: Path | None = Field(
        default=None,
        description="Override for the packaged GitHub IP range reference file",
    )
    secret_length: int = Field(
        default=MIN_SECRET_LENGTH,
        ge=MIN_SECRET_LENGTH,
        description="Length of the generated origin verification secret",
    )
    origin_verify_header: str = Field(
        default="X-Origin-Verify",
        description="Custom header CloudFront sends to the function URL",
    )
    exec_wrapper_path: str = Field(
        default="/opt/bootstrap",
        description="AWS_LAMBDA_EXEC_WRAPPER value for the Lambda Web Adapter",
    )
    app_port: int = Field(
        default=3000,
        gt=0,
        lt=65536,
        description="Port the dashboard listens on inside the container",
    )


@lru_cache
def get_settings() -> ResolverSettings:
    """
    Get resolver settings singleton.

    Environment variables are read once; call get_settings.cache_clear()
    to reload them.

    Returns:
        ResolverSettings: Resolver settings instance
    """
    return ResolverSettings()
