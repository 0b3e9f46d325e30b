"""
Infrastructure constants for the metrics dashboard deployment.

Contains default tags, regions and Pulumi-side defaults.
"""

from typing import Final

# WAF web ACLs and ACM certificates used by CloudFront must live here
CLOUDFRONT_REGION: Final[str] = "us-east-1"

# Default tags applied to all resources
DEFAULT_TAGS: Final[dict[str, str]] = {
    "Project": "metrics-dashboard",
    "ManagedBy": "pulumi",
}

# Pulumi component type tokens
COMPONENT_TYPES: Final[dict[str, str]] = {
    "ecr": "custom:storage:EcrRepository",
    "iam": "custom:security:IamRoles",
    "github": "custom:security:GithubDeployRole",
    "waf": "custom:security:Waf",
    "lambda": "custom:compute:LambdaFunction",
    "cloudfront": "custom:edge:CloudFront",
}
