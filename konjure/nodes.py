"""Helpers for working with resource documents held as plain YAML data."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

_ASSOCIATIVE_KEYS = (
    "mountPath",
    "devicePath",
    "ip",
    "type",
    "topologyKey",
    "name",
    "containerPort",
)


@dataclass
class ResourceMeta:
    """The type and object metadata of a resource document."""

    api_version: str = ""
    kind: str = ""
    name: str = ""
    namespace: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)

    @property
    def identifier(self) -> Tuple[str, str, str, str]:
        """A hashable identity: (apiVersion, kind, namespace, name)."""
        return (self.api_version, self.kind, self.namespace, self.name)


def _scalar_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _string_map(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): _scalar_text(v) for k, v in value.items()}


def read_documents(text: str) -> List[Any]:
    """Parse a YAML document stream, skipping empty documents."""
    return [doc for doc in yaml.safe_load_all(text) if doc is not None]


def dump_documents(documents: Iterable[Any]) -> str:
    """Render documents as a YAML stream separated by document start markers."""
    return "---\n".join(
        yaml.safe_dump(doc, sort_keys=False, default_flow_style=False, allow_unicode=True)
        for doc in documents
    )


def get_meta(document: Any) -> ResourceMeta:
    """Return the resource metadata of a document.

    Raises ValueError if the document is not a resource.
    """
    if not isinstance(document, dict) or not any(
        key in document for key in ("apiVersion", "kind", "metadata")
    ):
        raise ValueError("missing Resource metadata")
    metadata = document.get("metadata") or {}
    if not isinstance(metadata, dict):
        raise ValueError("invalid Resource metadata")
    return ResourceMeta(
        api_version=_scalar_text(document.get("apiVersion")),
        kind=_scalar_text(document.get("kind")),
        name=_scalar_text(metadata.get("name")),
        namespace=_scalar_text(metadata.get("namespace")),
        labels=_string_map(metadata.get("labels")),
        annotations=_string_map(metadata.get("annotations")),
    )


def _is_list_index(segment: str) -> bool:
    return segment.startswith("[") and segment.endswith("]")


def _lookup_in_list(items: List[Any], segment: str) -> Any:
    if _is_list_index(segment):
        name, sep, value = segment[1:-1].partition("=")
        if not sep:
            return None
        for item in items:
            if name:
                if isinstance(item, dict) and name in item and _scalar_text(item[name]) == value:
                    return item
            elif not isinstance(item, (dict, list)) and _scalar_text(item) == value:
                return item
        return None
    if segment.isdigit():
        index = int(segment)
        return items[index] if index < len(items) else None
    return None


def lookup(document: Any, *path: str) -> Any:
    """Walk a path of field names, ``[name=value]`` matches and list indexes.

    Returns None when any part of the path is missing.
    """
    current = document
    for segment in path:
        if current is None:
            return None
        if isinstance(current, dict):
            if _is_list_index(segment):
                return None
            current = current.get(segment)
        elif isinstance(current, list):
            current = _lookup_in_list(current, segment)
        else:
            return None
    return current


def _associative_key(*lists: List[Any]) -> Optional[str]:
    items = [item for items in lists for item in items]
    if not items:
        return None
    for key in _ASSOCIATIVE_KEYS:
        if all(isinstance(item, dict) and key in item for item in items):
            return key
    return None


def _merge_value(source: Any, destination: Any) -> Any:
    if isinstance(source, dict) and isinstance(destination, dict):
        result = copy.deepcopy(destination)
        for key, value in source.items():
            if value is None:
                result.pop(key, None)
            elif key in result:
                result[key] = _merge_value(value, result[key])
            else:
                result[key] = copy.deepcopy(value)
        return result
    if isinstance(source, list) and isinstance(destination, list):
        key = _associative_key(source, destination)
        if key is None:
            return copy.deepcopy(source)
        result = copy.deepcopy(destination)
        for item in source:
            position = next(
                (i for i, existing in enumerate(result) if existing[key] == item[key]),
                None,
            )
            if position is None:
                result.append(copy.deepcopy(item))
            else:
                result[position] = _merge_value(item, result[position])
        return result
    return copy.deepcopy(source)


def merge(source: Any, destination: Any) -> Any:
    """Merge ``source`` over ``destination`` and return the result.

    Mappings merge recursively, a null source value removes the field, lists of
    mappings sharing a well known key merge element-wise and other values are
    replaced. A None source leaves the destination unchanged.
    """
    if source is None:
        return copy.deepcopy(destination)
    return _merge_value(source, destination)


def clear_annotation(document: Any, name: str) -> Any:
    """Remove an annotation, returning its previous value (or None)."""
    annotations = lookup(document, "metadata", "annotations")
    if not isinstance(annotations, dict):
        return None
    return annotations.pop(name, None)


def clear_empty_annotations(document: Any) -> Any:
    """Remove an empty ``metadata.annotations`` field; returns the document."""
    metadata = lookup(document, "metadata")
    if isinstance(metadata, dict) and "annotations" in metadata and not metadata["annotations"]:
        del metadata["annotations"]
    return document