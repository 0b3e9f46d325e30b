"""
Deployment configuration resolver for the metrics dashboard.

Turns a declarative DeployIntent (CloudFront / WAF / IAM-auth flags plus
deployment parameters) into a validated, ordered ResolvedPlan of resource
descriptors that the Pulumi program in IAC/ applies.
"""

from resolver.core.resolver import resolve
from resolver.models.intent import DeployIntent
from resolver.models.plan import ResolvedPlan, ResourceDescriptor, ResourceKind

__all__ = [
    "resolve",
    "DeployIntent",
    "ResolvedPlan",
    "ResourceDescriptor",
    "ResourceKind",
]
