"""Sorting of resource documents by kind for installation and removal."""

from __future__ import annotations

from typing import Any, Callable, List, Sequence

_INSTALL_KINDS = (
    "Namespace",
    "NetworkPolicy",
    "ResourceQuota",
    "LimitRange",
    "PodSecurityPolicy",
    "PodDisruptionBudget",
    "ServiceAccount",
    "Secret",
    "SecretList",
    "ConfigMap",
    "StorageClass",
    "PersistentVolume",
    "PersistentVolumeClaim",
    "CustomResourceDefinition",
    "ClusterRole",
    "ClusterRoleList",
    "ClusterRoleBinding",
    "ClusterRoleBindingList",
    "Role",
    "RoleList",
    "RoleBinding",
    "RoleBindingList",
    "Service",
    "DaemonSet",
    "Pod",
    "ReplicationController",
    "ReplicaSet",
    "Deployment",
    "HorizontalPodAutoscaler",
    "StatefulSet",
    "Job",
    "CronJob",
    "IngressClass",
    "Ingress",
    "APIService",
)

_UNINSTALL_KINDS = (
    "APIService",
    "Ingress",
    "IngressClass",
    "Service",
    "CronJob",
    "Job",
    "StatefulSet",
    "HorizontalPodAutoscaler",
    "Deployment",
    "ReplicaSet",
    "ReplicationController",
    "Pod",
    "DaemonSet",
    "RoleBindingList",
    "RoleBinding",
    "RoleList",
    "Role",
    "ClusterRoleBindingList",
    "ClusterRoleBinding",
    "ClusterRoleList",
    "ClusterRole",
    "CustomResourceDefinition",
    "PersistentVolumeClaim",
    "PersistentVolume",
    "StorageClass",
    "ConfigMap",
    "SecretList",
    "Secret",
    "ServiceAccount",
    "PodDisruptionBudget",
    "PodSecurityPolicy",
    "LimitRange",
    "ResourceQuota",
    "NetworkPolicy",
    "Namespace",
)


def _kind(node: Any) -> str:
    if isinstance(node, dict):
        kind = node.get("kind")
        return "" if kind is None else str(kind)
    return ""


def sort_by_kind(priority: Sequence[str]) -> Callable[[List[Any]], List[Any]]:
    """Return a list filter ordering documents by the kinds listed in ``priority``.

    Listed kinds come first in list order; the rest follow sorted by kind name.
    """
    order = {kind: len(priority) - i for i, kind in enumerate(priority)}

    def _filter(nodes: List[Any]) -> List[Any]:
        return sorted(nodes, key=lambda n: (-order.get(_kind(n), 0), _kind(n)))

    return _filter


def install_order() -> Callable[[List[Any]], List[Any]]:
    """Sort documents in the order they should be created in a cluster."""
    return sort_by_kind(_INSTALL_KINDS)


def uninstall_order() -> Callable[[List[Any]], List[Any]]:
    """Sort documents in the order they should be deleted from a cluster."""
    return sort_by_kind(_UNINSTALL_KINDS)