"""Filtering resource documents down to workloads: the resources that own pods."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Tuple

from konjure.nodes import get_meta, lookup
from konjure.resourcemeta import ResourceMetaFilter

Identifier = Tuple[str, str, str, str]

_CONTAINER_PATHS = (
    ("spec", "template", "spec", "containers"),
    ("spec", "jobTemplate", "spec", "template", "spec", "containers"),
    ("spec", "containers"),
    ("template", "spec", "containers"),
)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _reference_identifier(reference: Dict[str, Any]) -> Identifier:
    return (
        _text(reference.get("apiVersion")),
        _text(reference.get("kind")),
        _text(reference.get("namespace")),
        _text(reference.get("name")),
    )


def _controller(node: Any) -> Optional[Identifier]:
    references = lookup(node, "metadata", "ownerReferences")
    if references is None:
        return None
    if not isinstance(references, list):
        raise ValueError("ownerReferences must be a list")
    owner = None
    for reference in references:
        if isinstance(reference, dict) and reference.get("controller") is True:
            owner = _reference_identifier(reference)
    return owner


def _has_pod_template(node: Any) -> bool:
    return any(lookup(node, *path) is not None for path in _CONTAINER_PATHS)


@dataclass
class WorkloadFilter:
    """Keeps only resources that directly or indirectly own pods.

    All intermediate owners must be present with controller owner references.
    """

    enabled: bool = False
    non_workload_filter: Optional[ResourceMetaFilter] = None

    def filter(self, nodes: List[Any]) -> List[Any]:
        """Return the workload documents, followed by any extras the secondary filter keeps."""
        if not self.enabled:
            return nodes

        metas = [get_meta(node) for node in nodes]
        owners: Dict[Identifier, Identifier] = {}
        pods = []
        unscoped: Set[Identifier] = set()
        for node, meta in zip(nodes, metas):
            identifier = meta.identifier
            if meta.api_version == "v1" and meta.kind == "Pod":
                pods.append(meta)
            if not meta.namespace:
                unscoped.add(identifier)
            owner = _controller(node)
            if owner is not None:
                owners[identifier] = owner

        workloads: Set[Identifier] = set()
        for pod in pods:
            workload = pod.identifier
            seen = {workload}
            while (owner := owners.get(workload)) is not None:
                if owner not in unscoped:
                    owner = (owner[0], owner[1], pod.namespace, owner[3])
                workload = owner
                if workload in seen:
                    break
                seen.add(workload)
            workloads.add(workload)

        if not pods:
            for node, meta in zip(nodes, metas):
                if _has_pod_template(node) and meta.identifier not in owners:
                    workloads.add(meta.identifier)

        result = [node for node, meta in zip(nodes, metas) if meta.identifier in workloads]
        if self.non_workload_filter is not None:
            result.extend(self.non_workload_filter.filter(nodes))
        return result