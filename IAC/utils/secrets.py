"""
Bridge from resolver secrets to Pulumi secrets.

SecretStr values in descriptor properties become pulumi.Output.secret so
they stay encrypted in stack state and masked in preview output.
"""

from typing import Any

import pulumi
from pydantic import SecretStr


def to_pulumi_input(value: Any) -> Any:
    """Convert a descriptor property value, marking secrets for Pulumi."""
    if isinstance(value, SecretStr):
        return pulumi.Output.secret(value.get_secret_value())
    if isinstance(value, dict):
        return {key: to_pulumi_input(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_pulumi_input(item) for item in value]
    return value
