"""
Observability module.

Logging configuration and helpers that never print secret material.
"""

from resolver.observability.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
