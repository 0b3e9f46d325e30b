"""
Tag factory for AWS resources.

Provides consistent tagging for cost allocation and for tracing a cloud
resource back to the plan descriptor that produced it.
"""

from IAC.configs.constants import DEFAULT_TAGS


def create_tags(
    environment: str,
    resource_name: str,
    descriptor_id: str | None = None,
    **extra_tags: str,
) -> dict[str, str]:
    """
    Create a standard tag set for an AWS resource.

    Args:
        environment: Deployment environment
        resource_name: Name of the resource
        descriptor_id: Plan descriptor the resource was created from
        **extra_tags: Additional tags to include

    Returns:
        Dictionary of tags
    """
    tags = {
        **DEFAULT_TAGS,
        "Environment": environment,
        "Name": resource_name,
    }
    if descriptor_id:
        tags["PlanResource"] = descriptor_id
    tags.update(extra_tags)
    return tags
