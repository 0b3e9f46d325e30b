"""
Plan emitter.

Serializes a ResolvedPlan for the provisioning executor. The machine
document carries secret values in cleartext because the executor has to
apply them; every human-readable form replaces them with a fixed mask.

Dependencies: pydantic
System role: Final stage of resolution
"""

import json
from dataclasses import dataclass, field
from typing import Any

from pydantic import SecretStr

from resolver.configs.constants import REDACTED
from resolver.models.plan import ResolvedPlan

FORMAT_VERSION = 1


def _convert(value: Any, reveal: bool) -> Any:
    if isinstance(value, SecretStr):
        return value.get_secret_value() if reveal else REDACTED
    if isinstance(value, dict):
        return {key: _convert(val, reveal) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert(item, reveal) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted(_convert(item, reveal) for item in value)
    return value


def _sensitive_paths(value: Any, prefix: str) -> list[str]:
    if isinstance(value, SecretStr):
        return [prefix]
    paths: list[str] = []
    if isinstance(value, dict):
        for key, val in value.items():
            paths += _sensitive_paths(val, f"{prefix}.{key}")
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            paths += _sensitive_paths(item, f"{prefix}[{index}]")
    return paths


def _document(plan: ResolvedPlan, reveal: bool) -> dict[str, Any]:
    return {
        "format_version": FORMAT_VERSION,
        "resources": [
            {
                "id": descriptor.id,
                "kind": descriptor.kind.value,
                "depends_on": list(descriptor.references),
                "properties": _convert(descriptor.properties, reveal),
            }
            for descriptor in plan.descriptors
        ],
        "sensitive": [
            path
            for descriptor in plan.descriptors
            for path in _sensitive_paths(descriptor.properties, descriptor.id)
        ],
    }


@dataclass(frozen=True)
class SerializedPlan:
    """Machine and redacted renderings of a plan."""

    document: dict[str, Any] = field(repr=False)
    redacted: dict[str, Any]

    @property
    def sensitive_paths(self) -> list[str]:
        return list(self.redacted["sensitive"])

    def to_json(self, indent: int | None = 2) -> str:
        """Machine-applied output, secrets included."""
        return json.dumps(self.document, indent=indent, sort_keys=True)

    def to_redacted_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.redacted, indent=indent, sort_keys=True)

    def render(self) -> str:
        """Human-readable summary with secrets masked."""
        lines = []
        for resource in self.redacted["resources"]:
            deps = ", ".join(resource["depends_on"]) or "-"
            lines.append(f"{resource['kind']:<24} {resource['id']:<28} depends on: {deps}")
            for key, value in sorted(resource["properties"].items()):
                lines.append(f"    {key} = {json.dumps(value, sort_keys=True)}")
        lines.append(f"{len(self.redacted['resources'])} resources")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()


def emit(plan: ResolvedPlan) -> SerializedPlan:
    """
    Serialize a resolved plan.

    Args:
        plan: Plan to serialize

    Returns:
        SerializedPlan: Machine document plus redacted rendering
    """
    return SerializedPlan(
        document=_document(plan, reveal=True),
        redacted=_document(plan, reveal=False),
    )
