"""
Stack configuration loader.

Builds a DeployIntent from Pulumi stack config so the same resolver that
backs the CLI decides what this stack provisions.
"""

import pulumi

from resolver.core.reference_data import load_github_ip_ranges
from resolver.models.intent import DeployIntent


def get_intent(config: pulumi.Config | None = None) -> DeployIntent:
    """
    Load the deploy intent from Pulumi stack config.

    Returns:
        DeployIntent: Intent ready for resolution

    Raises:
        pydantic.ValidationError: If config values have the wrong shape
    """
    config = config or pulumi.Config()

    # Unset keys are left out so DeployIntent defaults apply; explicit
    # values, including 0, go through validation unchanged.
    values = {
        "enable_cloudfront": config.get_bool("enable_cloudfront"),
        "enable_waf": config.get_bool("enable_waf"),
        "use_iam_auth": config.get_bool("use_iam_auth"),
        "allowed_ip_cidrs": config.get_object("allowed_ip_cidrs"),
        "retention_days": config.get_int("retention_days"),
        "untagged_image_keep_count": config.get_int("untagged_image_keep_count"),
        "environment_variables": config.get_object("environment_variables"),
        "project_name": config.get("project_name"),
        "environment": config.get("environment"),
        "image_tag": config.get("image_tag"),
        "memory_size": config.get_int("memory_size"),
        "timeout": config.get_int("timeout"),
        "architecture": config.get("architecture"),
        "price_class": config.get("price_class"),
        "github_repository": config.get("github_repository"),
    }
    values = {key: value for key, value in values.items() if value is not None}
    values.setdefault("environment", pulumi.get_stack())

    ip_ranges_file = config.get("github_ip_ranges_file")
    if ip_ranges_file:
        values["github_ip_cidrs"] = load_github_ip_ranges(ip_ranges_file).cidrs

    return DeployIntent(**values)
