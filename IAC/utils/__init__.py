"""
Utility functions for Pulumi infrastructure.

Provides naming conventions, tag factories and secret conversion.
"""

from IAC.utils.naming import ResourceNamer
from IAC.utils.tags import create_tags
from IAC.utils.secrets import to_pulumi_input

__all__ = [
    "ResourceNamer",
    "create_tags",
    "to_pulumi_input",
]
