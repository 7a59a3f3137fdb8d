"""Parent-reference index over a flat resource tree.

The tree is an arena of nodes; ownership is expressed only through each
node's ``parentRefs``. The index walks the arena once and keeps side maps
from parent name to child positions so that "children of X" is a dict
lookup. Positions preserve first-seen order.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from rolloutscope.models.nodes import NodeKind, ResourceNode


class GraphIndex:
    """Read-only index over one resource tree snapshot.

    Children are grouped by the parent kind that makes them relevant:
        ReplicaSets by their ``Rollout`` parent refs
        Pods by their ``ReplicaSet`` parent refs
        AnalysisRuns by parent name, whatever the parent kind
    """

    def __init__(self, nodes: Iterable[ResourceNode]) -> None:
        self._nodes: tuple[ResourceNode, ...] = tuple(nodes)
        self._replica_sets: list[int] = []
        self._pods: list[int] = []
        self._analysis_runs: list[int] = []
        self._rs_by_rollout: dict[str, list[int]] = defaultdict(list)
        self._pods_by_rs: dict[str, list[int]] = defaultdict(list)
        self._runs_by_parent: dict[str, list[int]] = defaultdict(list)
        self._by_kind_name: dict[tuple[str, str], int] = {}

        for pos, node in enumerate(self._nodes):
            # First match wins for (kind, name) lookups
            self._by_kind_name.setdefault((node.kind, node.name), pos)

            tag = node.node_kind
            if tag is NodeKind.REPLICA_SET:
                self._replica_sets.append(pos)
                self._link(self._rs_by_rollout, pos, node, parent_kind=NodeKind.ROLLOUT.value)
            elif tag is NodeKind.POD:
                self._pods.append(pos)
                self._link(self._pods_by_rs, pos, node, parent_kind=NodeKind.REPLICA_SET.value)
            elif tag is NodeKind.ANALYSIS_RUN:
                self._analysis_runs.append(pos)
                self._link(self._runs_by_parent, pos, node, parent_kind=None)

    @classmethod
    def build(cls, nodes: Iterable[ResourceNode]) -> GraphIndex:
        return cls(nodes)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def nodes(self) -> tuple[ResourceNode, ...]:
        return self._nodes

    @property
    def replica_sets(self) -> list[ResourceNode]:
        return [self._nodes[pos] for pos in self._replica_sets]

    @property
    def pods(self) -> list[ResourceNode]:
        return [self._nodes[pos] for pos in self._pods]

    @property
    def analysis_runs(self) -> list[ResourceNode]:
        return [self._nodes[pos] for pos in self._analysis_runs]

    def replica_sets_of(self, rollout_name: str) -> list[ResourceNode]:
        """ReplicaSets with a ``Rollout`` parent ref named *rollout_name*."""
        return [self._nodes[pos] for pos in self._rs_by_rollout.get(rollout_name, [])]

    def pods_of(self, replica_set_name: str) -> list[ResourceNode]:
        """Pods with a ``ReplicaSet`` parent ref named *replica_set_name*."""
        return [self._nodes[pos] for pos in self._pods_by_rs.get(replica_set_name, [])]

    def analysis_runs_of(self, parent_name: str) -> list[ResourceNode]:
        """AnalysisRuns with any parent ref named *parent_name*."""
        return [self._nodes[pos] for pos in self._runs_by_parent.get(parent_name, [])]

    def find(self, kind: str, name: str) -> ResourceNode | None:
        """Return the first node with this kind and name, or None."""
        pos = self._by_kind_name.get((kind, name))
        return None if pos is None else self._nodes[pos]

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _link(
        index: dict[str, list[int]],
        pos: int,
        node: ResourceNode,
        parent_kind: str | None,
    ) -> None:
        """Register *pos* under every distinct matching parent name."""
        seen: set[str] = set()
        for ref in node.parent_refs:
            if parent_kind is not None and ref.kind != parent_kind:
                continue
            if ref.name in seen:
                continue
            seen.add(ref.name)
            index[ref.name].append(pos)
