"""Container list resolution, inline or through ``spec.workloadRef``."""

from __future__ import annotations

from rolloutscope.graph.index import GraphIndex
from rolloutscope.models.nodes import ContainerInfo, ResourceNode
from rolloutscope.models.rollout import Rollout
from rolloutscope.observability.hooks import NullObserver, Observer


def resolve_workload(index: GraphIndex, rollout: Rollout) -> ResourceNode | None:
    """First node matching the rollout's workloadRef kind and name.

    Several nodes sharing kind and name are not disambiguated.
    """
    ref = rollout.spec.workload_ref
    if ref is None:
        return None
    return index.find(ref.kind, ref.name)


def resolve_containers(
    index: GraphIndex,
    rollout: Rollout,
    observer: Observer | None = None,
) -> tuple[ContainerInfo, ...]:
    """Containers from the inline template, else from the referenced workload."""
    observer = observer or NullObserver()

    if rollout.spec.template_containers is not None:
        observer.emit("containers_from_template", rollout=rollout.name)
        return rollout.spec.template_containers

    ref = rollout.spec.workload_ref
    if ref is None:
        return ()

    workload = resolve_workload(index, rollout)
    if workload is None:
        observer.emit("workload_ref_unresolved", rollout=rollout.name, kind=ref.kind, name=ref.name)
        return ()

    observer.emit(
        "containers_from_workload_ref",
        rollout=rollout.name,
        kind=ref.kind,
        name=ref.name,
        containers=len(workload.containers),
    )
    return workload.containers
