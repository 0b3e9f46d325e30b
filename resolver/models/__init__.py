"""
Resolver domain models.

Dependencies: pydantic
System role: Input intent, resolved plan and lifecycle rule contracts
"""

from resolver.models.intent import Architecture, DeployIntent
from resolver.models.lifecycle import LifecycleRule, RetentionPolicy, TagSelector
from resolver.models.plan import ResolvedPlan, ResourceDescriptor, ResourceKind
from resolver.models.secret import SharedSecret

__all__ = [
    "Architecture",
    "DeployIntent",
    "LifecycleRule",
    "RetentionPolicy",
    "TagSelector",
    "ResolvedPlan",
    "ResourceDescriptor",
    "ResourceKind",
    "SharedSecret",
]
