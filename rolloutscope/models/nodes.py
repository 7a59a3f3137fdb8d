"""Resource tree node types.

Argo CD hands extensions its application resource tree as a flat list of
nodes. Each node names its owners through ``parentRefs`` back-references and
carries a free-form ``info`` list of name/value pairs. Nothing is nested, so
ownership has to be reconstructed by the graph index.

Parsing is deliberately forgiving: missing or mistyped fields become empty
values rather than errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class NodeKind(StrEnum):
    """Closed set of node kinds the resolvers understand."""

    ROLLOUT = "Rollout"
    REPLICA_SET = "ReplicaSet"
    POD = "Pod"
    ANALYSIS_RUN = "AnalysisRun"
    WORKLOAD = "Workload"
    UNKNOWN = "Unknown"


# Kinds a Rollout may point at through spec.workloadRef
WORKLOAD_KINDS: frozenset[str] = frozenset({"Deployment", "PodTemplate"})

_DIRECT_KINDS: dict[str, NodeKind] = {
    "Rollout": NodeKind.ROLLOUT,
    "ReplicaSet": NodeKind.REPLICA_SET,
    "Pod": NodeKind.POD,
    "AnalysisRun": NodeKind.ANALYSIS_RUN,
}


def classify_kind(kind: str) -> NodeKind:
    """Map a raw Kubernetes kind string onto a NodeKind tag."""
    if kind in _DIRECT_KINDS:
        return _DIRECT_KINDS[kind]
    if kind in WORKLOAD_KINDS:
        return NodeKind.WORKLOAD
    return NodeKind.UNKNOWN


@dataclass(frozen=True)
class ParentRef:
    """Weak back-reference from a node to one of its owners."""

    kind: str
    name: str


@dataclass(frozen=True)
class InfoItem:
    """One free-form ``{name, value}`` pair attached to a node."""

    name: str
    value: str


@dataclass(frozen=True)
class ContainerInfo:
    """Container name and image, as shown by the rollout widget."""

    name: str
    image: str


@dataclass(frozen=True)
class ResourceNode:
    """Read-only view of one resource tree node."""

    kind: str
    name: str
    namespace: str = ""
    uid: str = ""
    created_at: str | None = None
    version: str = ""
    parent_refs: tuple[ParentRef, ...] = ()
    info: tuple[InfoItem, ...] = ()
    health: str | None = None
    containers: tuple[ContainerInfo, ...] = ()

    @property
    def node_kind(self) -> NodeKind:
        return classify_kind(self.kind)

    def has_parent(self, kind: str, name: str) -> bool:
        """Return True when a parent ref matches both kind and name."""
        return any(ref.kind == kind and ref.name == name for ref in self.parent_refs)

    def has_parent_named(self, name: str) -> bool:
        """Return True when any parent ref, of any kind, carries *name*."""
        return any(ref.name == name for ref in self.parent_refs)

    def info_value(self, name: str) -> str | None:
        """Return the value of the first info item called *name*."""
        for item in self.info:
            if item.name == name:
                return item.value
        return None


def _str(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def parse_containers(pod_spec: object) -> tuple[ContainerInfo, ...]:
    """Extract ``(name, image)`` pairs from a pod spec's container list."""
    if not isinstance(pod_spec, dict):
        return ()
    containers = pod_spec.get("containers")
    if not isinstance(containers, list):
        return ()
    return tuple(
        ContainerInfo(name=_str(c.get("name")), image=_str(c.get("image"))) for c in containers if isinstance(c, dict)
    )


def template_containers(spec: object) -> tuple[ContainerInfo, ...] | None:
    """Containers of ``spec.template.spec``, or None when there is no template."""
    if not isinstance(spec, dict):
        return None
    template = spec.get("template")
    if not isinstance(template, dict):
        return None
    return parse_containers(template.get("spec"))


def parse_node(raw: dict[str, object]) -> ResourceNode:
    """Build a ResourceNode from one entry of the tree's ``nodes`` list."""
    parent_refs: list[ParentRef] = []
    refs = raw.get("parentRefs")
    if isinstance(refs, list):
        for ref in refs:
            if isinstance(ref, dict):
                parent_refs.append(ParentRef(kind=_str(ref.get("kind")), name=_str(ref.get("name"))))

    info: list[InfoItem] = []
    items = raw.get("info")
    if isinstance(items, list):
        for item in items:
            if isinstance(item, dict):
                info.append(InfoItem(name=_str(item.get("name")), value=_str(item.get("value"))))

    health_block = raw.get("health")
    health: str | None = None
    if isinstance(health_block, dict) and health_block.get("status") is not None:
        health = str(health_block["status"])

    created_at = raw.get("createdAt")

    # Workload targets resolved through workloadRef may carry their manifest spec
    containers = template_containers(raw.get("spec")) or ()

    return ResourceNode(
        kind=_str(raw.get("kind")),
        name=_str(raw.get("name")),
        namespace=_str(raw.get("namespace")),
        uid=_str(raw.get("uid")),
        created_at=None if created_at is None else str(created_at),
        version=_str(raw.get("version") or raw.get("resourceVersion")),
        parent_refs=tuple(parent_refs),
        info=tuple(info),
        health=health,
        containers=containers,
    )


def parse_tree(raw: object) -> tuple[ResourceNode, ...]:
    """Parse a resource tree payload into nodes.

    Accepts the Argo CD shape ``{"nodes": [...]}`` or a bare list of nodes.
    Entries that are not objects are skipped.
    """
    if isinstance(raw, dict):
        entries = raw.get("nodes")
    else:
        entries = raw
    if not isinstance(entries, list):
        return ()
    return tuple(parse_node(entry) for entry in entries if isinstance(entry, dict))
