"""
Option validator.

Checks cross-flag constraints on a DeployIntent before any resource is
planned. Checks run in a fixed order and validate() reports the first
violation; the constraints are hard preconditions rather than independent
warnings.

Dependencies: None (pure domain layer)
System role: First stage of resolution
"""

import ipaddress
from collections.abc import Callable

from resolver.configs.constants import ALLOWED_RETENTION_DAYS
from resolver.core.exceptions import ConstraintViolation
from resolver.models.intent import DeployIntent
from resolver.observability.logger import get_logger

logger = get_logger(__name__)

IAM_AUTH_REQUIRES_CLOUDFRONT = "iam_auth_requires_cloudfront"
WAF_REQUIRES_CLOUDFRONT = "waf_requires_cloudfront"
INVALID_RETENTION_DAYS = "invalid_retention_days"
INVALID_UNTAGGED_IMAGE_KEEP_COUNT = "invalid_untagged_image_keep_count"
INVALID_IP_CIDR = "invalid_ip_cidr"


def _check_iam_auth(intent: DeployIntent) -> ConstraintViolation | None:
    if intent.use_iam_auth and not intent.enable_cloudfront:
        return ConstraintViolation(
            IAM_AUTH_REQUIRES_CLOUDFRONT,
            "use_iam_auth requires enable_cloudfront: the function URL can only be "
            "signed for by a CloudFront origin access control",
            field="use_iam_auth",
        )
    return None


def _check_waf(intent: DeployIntent) -> ConstraintViolation | None:
    if intent.enable_waf and not intent.enable_cloudfront:
        return ConstraintViolation(
            WAF_REQUIRES_CLOUDFRONT,
            "enable_waf requires enable_cloudfront: the web ACL is attached to the distribution",
            field="enable_waf",
        )
    return None


def _check_retention(intent: DeployIntent) -> ConstraintViolation | None:
    if intent.retention_days not in ALLOWED_RETENTION_DAYS:
        return ConstraintViolation(
            INVALID_RETENTION_DAYS,
            f"retention_days must be one of {sorted(ALLOWED_RETENTION_DAYS)}, "
            f"got {intent.retention_days}",
            field="retention_days",
        )
    return None


def _check_keep_count(intent: DeployIntent) -> ConstraintViolation | None:
    if intent.untagged_image_keep_count < 1:
        return ConstraintViolation(
            INVALID_UNTAGGED_IMAGE_KEEP_COUNT,
            f"untagged_image_keep_count must be positive, got {intent.untagged_image_keep_count}",
            field="untagged_image_keep_count",
        )
    return None


def _check_cidrs(intent: DeployIntent) -> ConstraintViolation | None:
    for cidr in sorted(intent.allowed_ip_cidrs):
        try:
            network = ipaddress.ip_network(cidr, strict=False)
        except ValueError:
            network = None
        if network is None or network.version != 4:
            return ConstraintViolation(
                INVALID_IP_CIDR,
                f"allowed_ip_cidrs entry is not an IPv4 CIDR block: {cidr!r}",
                field="allowed_ip_cidrs",
                details={"cidr": cidr},
            )
    return None


CHECKS: tuple[Callable[[DeployIntent], ConstraintViolation | None], ...] = (
    _check_iam_auth,
    _check_waf,
    _check_retention,
    _check_keep_count,
    _check_cidrs,
)


def collect_violations(intent: DeployIntent) -> list[ConstraintViolation]:
    """
    Run every check and return all violations in check order.

    Diagnostic helper; resolution itself stops at the first violation.
    """
    violations = []
    for check in CHECKS:
        violation = check(intent)
        if violation is not None:
            violations.append(violation)
    return violations


def find_violation(intent: DeployIntent) -> ConstraintViolation | None:
    """Return the first violated constraint, or None if the intent is valid."""
    for check in CHECKS:
        violation = check(intent)
        if violation is not None:
            return violation
    return None


def validate(intent: DeployIntent) -> None:
    """
    Validate a deploy intent.

    Args:
        intent: Intent to check

    Raises:
        ConstraintViolation: For the first violated constraint
    """
    violation = find_violation(intent)
    if violation is not None:
        logger.warning("Deploy intent rejected: %s", violation.constraint)
        raise violation
    logger.debug("Deploy intent passed validation")
