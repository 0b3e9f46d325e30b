"""
Configuration module for Pulumi infrastructure.

Loads the deploy intent from Pulumi stack config files.
"""

from IAC.configs.environment import get_intent
from IAC.configs.constants import (
    CLOUDFRONT_REGION,
    DEFAULT_TAGS,
)

__all__ = [
    "get_intent",
    "CLOUDFRONT_REGION",
    "DEFAULT_TAGS",
]
