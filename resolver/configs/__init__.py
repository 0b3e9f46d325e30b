"""
Configuration management module.

Provides type-safe resolver settings using Pydantic Settings and the
fixed constants the resolver relies on.
"""

from resolver.configs.settings import ResolverSettings, get_settings

__all__ = ["ResolverSettings", "get_settings"]
