"""
Resolver core: validation, secret generation, graph building,
lifecycle compilation and plan emission.
"""

from resolver.core.exceptions import (
    DeployResolverError,
    ValidationError,
    ConstraintViolation,
    InternalConsistencyError,
    ReferenceDataError,
)

__all__ = [
    "DeployResolverError",
    "ValidationError",
    "ConstraintViolation",
    "InternalConsistencyError",
    "ReferenceDataError",
]
