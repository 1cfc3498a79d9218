"""Filtering resource documents by metadata using regular expressions and selectors."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Pattern

from konjure.nodes import ResourceMeta, get_meta, lookup

# Built-in types that are known to be cluster scoped, keyed by (group, kind).
_CLUSTER_SCOPED = frozenset(
    {
        ("", "Namespace"),
        ("", "Node"),
        ("", "PersistentVolume"),
        ("", "ComponentStatus"),
        ("rbac.authorization.k8s.io", "ClusterRole"),
        ("rbac.authorization.k8s.io", "ClusterRoleBinding"),
        ("apiextensions.k8s.io", "CustomResourceDefinition"),
        ("apiregistration.k8s.io", "APIService"),
        ("storage.k8s.io", "StorageClass"),
        ("storage.k8s.io", "CSIDriver"),
        ("storage.k8s.io", "CSINode"),
        ("storage.k8s.io", "VolumeAttachment"),
        ("scheduling.k8s.io", "PriorityClass"),
        ("node.k8s.io", "RuntimeClass"),
        ("networking.k8s.io", "IngressClass"),
        ("policy", "PodSecurityPolicy"),
        ("admissionregistration.k8s.io", "MutatingWebhookConfiguration"),
        ("admissionregistration.k8s.io", "ValidatingWebhookConfiguration"),
        ("certificates.k8s.io", "CertificateSigningRequest"),
        ("authentication.k8s.io", "TokenReview"),
        ("authorization.k8s.io", "SelfSubjectAccessReview"),
        ("authorization.k8s.io", "SelfSubjectRulesReview"),
        ("authorization.k8s.io", "SubjectAccessReview"),
        ("flowcontrol.apiserver.k8s.io", "FlowSchema"),
        ("flowcontrol.apiserver.k8s.io", "PriorityLevelConfiguration"),
    }
)

_IN_TERM = re.compile(r"([^\s!=<>(),]+)\s+(in|notin)\s+\((.*)\)", re.S)
_OP_TERM = re.compile(r"([^\s!=<>(),]+)\s*(==|!=|=|<|>)\s*([^\s!=<>(),]*)")
_KEY = re.compile(r"[^\s!=<>(),]+")
_INT = re.compile(r"[+-]?[0-9]+")


def _split_group_version(api_version: str):
    group, sep, version = api_version.partition("/")
    if not sep:
        return "", api_version
    return group, version


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _metadata_map(document: Any, name: str) -> Dict[str, str]:
    values = lookup(document, "metadata", name)
    if not isinstance(values, dict):
        return {}
    return {str(k): _text(v) for k, v in values.items()}


def _split_terms(selector: str) -> List[str]:
    terms: List[str] = []
    current: List[str] = []
    depth = 0
    for char in selector:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            terms.append("".join(current))
            current = []
        else:
            current.append(char)
    terms.append("".join(current))
    return terms


def _matches_term(values: Dict[str, str], term: str) -> bool:
    match = _IN_TERM.fullmatch(term)
    if match:
        key, operator, listed = match.groups()
        options = {v.strip() for v in listed.split(",")}
        if operator == "in":
            return key in values and values[key] in options
        return key not in values or values[key] not in options

    if term.startswith("!"):
        key = term[1:].strip()
        if not _KEY.fullmatch(key):
            raise ValueError(f"invalid selector requirement: {term!r}")
        return key not in values

    match = _OP_TERM.fullmatch(term)
    if match:
        key, operator, value = match.groups()
        if operator in ("=", "=="):
            return key in values and values[key] == value
        if operator == "!=":
            return key not in values or values[key] != value
        if not _INT.fullmatch(value):
            raise ValueError(f"invalid selector requirement: {term!r}: value must be an integer")
        actual = values.get(key)
        if actual is None or not _INT.fullmatch(actual):
            return False
        if operator == ">":
            return int(actual) > int(value)
        return int(actual) < int(value)

    if _KEY.fullmatch(term):
        return term in values

    raise ValueError(f"invalid selector requirement: {term!r}")


def matches_selector(values: Dict[str, str], selector: str) -> bool:
    """Evaluate a Kubernetes label selector against a mapping of labels.

    An empty selector matches everything. Raises ValueError for an invalid selector.
    """
    if not selector.strip():
        return True
    results = []
    for term in _split_terms(selector):
        term = term.strip()
        if not term:
            raise ValueError(f"invalid selector: {selector!r}")
        results.append(_matches_term(values, term))
    return all(results)


def _compile_anchored(pattern: str) -> Optional[Pattern[str]]:
    if not pattern:
        return None
    try:
        return re.compile("^(?:" + pattern + ")$")
    except re.error as exc:
        raise ValueError(f"invalid pattern {pattern!r}: {exc}") from exc


@dataclass
class ResourceMetaFilter:
    """Keeps documents whose metadata matches every configured pattern and selector."""

    group: str = ""
    version: str = ""
    kind: str = ""
    namespace: str = ""
    name: str = ""
    label_selector: str = ""
    annotation_selector: str = ""
    invert_match: bool = False

    def _patterns(self) -> Dict[str, Pattern[str]]:
        candidates = {
            "namespace": self.namespace,
            "name": self.name,
            "group": self.group,
            "version": self.version,
            "kind": self.kind,
        }
        patterns = {}
        for field_name, pattern in candidates.items():
            compiled = _compile_anchored(pattern)
            if compiled is not None:
                patterns[field_name] = compiled
        return patterns

    @staticmethod
    def _matches_meta(meta: ResourceMeta, patterns: Dict[str, Pattern[str]]) -> bool:
        group, version = _split_group_version(meta.api_version)
        actual = {
            "namespace": meta.namespace,
            "name": meta.name,
            "group": group,
            "version": version,
            "kind": meta.kind,
        }
        return all(p.match(actual[f]) for f, p in patterns.items())

    def filter(self, nodes: List[Any]) -> List[Any]:
        """Return the matching documents (or the non-matching ones when inverted)."""
        patterns = self._patterns()
        if not patterns and not self.label_selector and not self.annotation_selector:
            return nodes

        result = []
        for node in nodes:
            if patterns and self._matches_meta(get_meta(node), patterns) == self.invert_match:
                continue
            if self.label_selector and matches_selector(
                _metadata_map(node, "labels"), self.label_selector
            ) == self.invert_match:
                continue
            if self.annotation_selector and matches_selector(
                _metadata_map(node, "annotations"), self.annotation_selector
            ) == self.invert_match:
                continue
            result.append(node)
        return result


def _is_cluster_scoped(api_version: str, kind: str) -> bool:
    group, _ = _split_group_version(api_version)
    return (group, kind) in _CLUSTER_SCOPED


def set_namespace(namespace: str) -> Callable[[Any], Any]:
    """Return a node filter setting the namespace, skipping cluster scoped resources."""

    def _filter(node: Any) -> Any:
        meta = get_meta(node)
        if _is_cluster_scoped(meta.api_version, meta.kind):
            return node
        metadata = node.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
            node["metadata"] = metadata
        metadata["namespace"] = namespace
        return node

    return _filter