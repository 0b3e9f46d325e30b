"""
Resolved plan models.

A ResolvedPlan is an ordered DAG of ResourceDescriptors. Each descriptor
names the descriptors it depends on by id, and assembly guarantees that
every reference points at an earlier descriptor in the sequence.

Dependencies: pydantic
System role: Resolver output contract consumed by the plan emitter and the Pulumi applier
"""

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from resolver.core.exceptions import InternalConsistencyError
from resolver.models.secret import SharedSecret


class ResourceKind(str, Enum):
    """Kinds of infrastructure resources the resolver can plan."""
    CONTAINER_REGISTRY = "ContainerRegistry"
    REGISTRY_LIFECYCLE_POLICY = "RegistryLifecyclePolicy"
    COMPUTE_FUNCTION = "ComputeFunction"
    FUNCTION_ENDPOINT = "FunctionEndpoint"
    CDN = "Cdn"
    CDN_ORIGIN_ACCESS_CONTROL = "CdnOriginAccessControl"
    WEB_ACL = "WebAcl"
    IP_ALLOW_LIST = "IpAllowList"
    INVOKE_PERMISSION = "InvokePermission"
    TRUST_ROLE = "TrustRole"
    ROLE_POLICY = "RolePolicy"
    LOG_SINK = "LogSink"


class ResourceDescriptor(BaseModel):
    """A typed, named node in the resolved plan."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    kind: ResourceKind
    properties: dict[str, Any] = Field(default_factory=dict)
    references: tuple[str, ...] = ()


def _order(descriptors: list[ResourceDescriptor]) -> list[ResourceDescriptor]:
    """
    Stable topological sort.

    Descriptors keep their insertion order unless a dependency has to be
    pulled forward, so an already-ordered list comes back unchanged.
    """
    by_id = {d.id: d for d in descriptors}
    ordered: list[ResourceDescriptor] = []
    done: set[str] = set()
    visiting: list[str] = []

    def visit(node_id: str) -> None:
        if node_id in done:
            return
        if node_id in visiting:
            cycle = visiting[visiting.index(node_id):] + [node_id]
            raise InternalConsistencyError(
                "Resource graph contains a cycle", {"cycle": cycle}
            )
        visiting.append(node_id)
        for ref in by_id[node_id].references:
            visit(ref)
        visiting.pop()
        done.add(node_id)
        ordered.append(by_id[node_id])

    for descriptor in descriptors:
        visit(descriptor.id)
    return ordered


class ResolvedPlan(BaseModel):
    """Validated, fully-resolved set of resource descriptors."""

    model_config = ConfigDict(frozen=True)

    descriptors: tuple[ResourceDescriptor, ...]
    shared_secret: SharedSecret | None = None

    @classmethod
    def assemble(
        cls,
        descriptors: Iterable[ResourceDescriptor],
        shared_secret: SharedSecret | None = None,
    ) -> "ResolvedPlan":
        """
        Build a plan from unordered descriptors.

        Args:
            descriptors: Descriptors in the order the builder produced them
            shared_secret: Origin secret, if one was generated

        Returns:
            ResolvedPlan: Plan with dependencies ordered before dependents

        Raises:
            InternalConsistencyError: On duplicate ids, dangling references or cycles
        """
        items = list(descriptors)
        seen: set[str] = set()
        for descriptor in items:
            if descriptor.id in seen:
                raise InternalConsistencyError(
                    f"Duplicate descriptor id: {descriptor.id}", {"id": descriptor.id}
                )
            seen.add(descriptor.id)

        for descriptor in items:
            dangling = [ref for ref in descriptor.references if ref not in seen]
            if dangling:
                raise InternalConsistencyError(
                    f"Descriptor {descriptor.id} references unknown ids",
                    {"id": descriptor.id, "dangling": dangling},
                )
            if descriptor.id in descriptor.references:
                raise InternalConsistencyError(
                    f"Descriptor {descriptor.id} references itself", {"id": descriptor.id}
                )

        return cls(descriptors=tuple(_order(items)), shared_secret=shared_secret)

    def __iter__(self) -> Iterator[ResourceDescriptor]:  # type: ignore[override]
        return iter(self.descriptors)

    def __len__(self) -> int:
        return len(self.descriptors)

    @property
    def ids(self) -> list[str]:
        return [d.id for d in self.descriptors]

    def get(self, descriptor_id: str) -> ResourceDescriptor:
        """Return the descriptor with the given id."""
        for descriptor in self.descriptors:
            if descriptor.id == descriptor_id:
                return descriptor
        raise KeyError(descriptor_id)

    def find(self, descriptor_id: str) -> ResourceDescriptor | None:
        for descriptor in self.descriptors:
            if descriptor.id == descriptor_id:
                return descriptor
        return None

    def of_kind(self, kind: ResourceKind) -> list[ResourceDescriptor]:
        return [d for d in self.descriptors if d.kind is kind]

    def has_kind(self, kind: ResourceKind) -> bool:
        return any(d.kind is kind for d in self.descriptors)
