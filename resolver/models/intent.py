"""
Deploy intent model.

The immutable, user-declared deployment configuration. Cross-field rules
(IAM auth and WAF both need CloudFront, allowed retention values) are left
to the Option Validator so they are reported by constraint name in a fixed
order instead of as pydantic field errors.

Dependencies: pydantic
System role: Resolver input contract
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from resolver.configs.constants import (
    DEFAULT_RETENTION_DAYS,
    DEFAULT_UNTAGGED_IMAGE_KEEP_COUNT,
)
from resolver.core.reference_data import load_github_ip_ranges


class Architecture(str, Enum):
    """Lambda instruction set architecture."""
    X86_64 = "x86_64"
    ARM64 = "arm64"


def _default_github_ip_cidrs() -> tuple[str, ...]:
    return load_github_ip_ranges().cidrs


class DeployIntent(BaseModel):
    """Desired deployment configuration, prior to resolution."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Feature flags
    enable_cloudfront: bool = False
    enable_waf: bool = False
    use_iam_auth: bool = False

    # WAF allow list inputs
    allowed_ip_cidrs: frozenset[str] = Field(default_factory=frozenset)
    github_ip_cidrs: tuple[str, ...] = Field(default_factory=_default_github_ip_cidrs)

    # Retention
    retention_days: int = DEFAULT_RETENTION_DAYS
    untagged_image_keep_count: int = DEFAULT_UNTAGGED_IMAGE_KEEP_COUNT

    # Opaque passthrough to the function environment
    environment_variables: dict[str, str] = Field(default_factory=dict)

    # Deployment shape
    project_name: str = Field(default="metrics", min_length=1, pattern=r"^[a-z0-9][a-z0-9-]*$")
    environment: str = Field(default="prod", min_length=1, pattern=r"^[a-z0-9][a-z0-9-]*$")
    image_tag: str = Field(default="latest", min_length=1)
    memory_size: int = Field(default=1024, ge=128, le=10240)
    timeout: int = Field(default=30, ge=1, le=900)
    architecture: Architecture = Architecture.X86_64
    price_class: str = "PriceClass_100"
    github_repository: str | None = Field(
        default=None,
        pattern=r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$",
        description="owner/repo allowed to assume the deploy role over OIDC",
    )

    @property
    def base_name(self) -> str:
        """Prefix shared by every named resource."""
        return f"{self.project_name}-{self.environment}"

    @property
    def uses_origin_secret(self) -> bool:
        """True when CloudFront verifies itself to the origin with a shared header."""
        return self.enable_cloudfront and not self.use_iam_auth
