"""
Exception hierarchy for the deployment resolver.

Provides layered exception structure for resolver errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the resolver
"""

from typing import Any


class DeployResolverError(Exception):
    """Base exception for all resolver errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(DeployResolverError):
    """Raised when a deploy intent is rejected by user-input validation."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Intent field that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class ConstraintViolation(ValidationError):
    """Raised when an intent breaks a named constraint."""

    def __init__(
        self,
        constraint: str,
        message: str | None = None,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize constraint violation.

        Args:
            constraint: Stable constraint name (e.g. waf_requires_cloudfront)
            message: Human-readable explanation, defaults to the constraint name
            field: Intent field that failed validation
            details: Additional context
        """
        self.constraint = constraint
        details = details or {}
        details["constraint"] = constraint
        super().__init__(message or constraint, field, details)


class InternalConsistencyError(DeployResolverError):
    """Raised when the resolver breaks one of its own invariants."""

    pass


class ReferenceDataError(DeployResolverError):
    """Raised when packaged or overridden reference data cannot be loaded."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize reference data error.

        Args:
            message: Error message
            path: File that failed to load
            details: Additional context
        """
        details = details or {}
        if path:
            details["path"] = path
        super().__init__(message, details)
