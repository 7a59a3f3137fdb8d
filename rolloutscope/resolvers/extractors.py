"""Field extractors for the free-form ``info`` list of tree nodes."""

from __future__ import annotations

from rolloutscope.models.nodes import ResourceNode

# Argo CD renders revisions as "Rev:<n>"
REVISION_ITEM = "Revision"
STATUS_REASON_ITEM = "Status Reason"
_DEFAULT_REVISION = "0"


def extract_revision(node: ResourceNode) -> str:
    """Return the revision number from the node's ``Revision`` info item.

    The value must split on ``:`` into exactly two segments; anything else,
    including a missing item, yields ``"0"``.
    """
    value = node.info_value(REVISION_ITEM)
    if value is None:
        return _DEFAULT_REVISION
    parts = value.split(":")
    return parts[1] if len(parts) == 2 else _DEFAULT_REVISION


def extract_pod_status_reason(pod: ResourceNode) -> str | None:
    """Return the pod's ``Status Reason`` info value, if any."""
    return pod.info_value(STATUS_REASON_ITEM)
