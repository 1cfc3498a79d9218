"""Applying merge patches and JSON patches to resource documents."""

from __future__ import annotations

import copy
import json
import re
from dataclasses import dataclass
from typing import Any, List, Union

import yaml

from konjure.nodes import merge

_MERGE_TYPES = frozenset(
    {
        "application/strategic-merge-patch+json",
        "strategic",
        "application/merge-patch+json",
        "merge",
        "",
    }
)
_JSON_TYPES = frozenset({"application/json-patch+json", "json"})
_INDEX = re.compile(r"0|[1-9][0-9]*")


class UnsupportedPatchError(ValueError):
    """Raised when a patch type is not recognised."""

    def __init__(self, patch_type: str) -> None:
        self.patch_type = patch_type
        super().__init__(f"unsupported patch type: {json.dumps(patch_type, ensure_ascii=False)}")


def _parse_pointer(pointer: Any) -> List[str]:
    if not isinstance(pointer, str):
        raise ValueError(f"invalid JSON pointer: {pointer!r}")
    if pointer == "":
        return []
    if not pointer.startswith("/"):
        raise ValueError(f"invalid JSON pointer: {pointer!r}")
    return [t.replace("~1", "/").replace("~0", "~") for t in pointer[1:].split("/")]


def _index(token: str, size: int, allow_end: bool) -> int:
    if allow_end and token == "-":
        return size
    if not _INDEX.fullmatch(token):
        raise ValueError(f"invalid array index: {token!r}")
    index = int(token)
    if index > (size if allow_end else size - 1):
        raise ValueError(f"array index out of range: {index}")
    return index


def _resolve(document: Any, tokens: List[str]) -> Any:
    current = document
    for token in tokens:
        if isinstance(current, dict):
            if token not in current:
                raise ValueError(f"path not found: {token!r}")
            current = current[token]
        elif isinstance(current, list):
            current = current[_index(token, len(current), False)]
        else:
            raise ValueError(f"cannot traverse into a scalar at {token!r}")
    return current


def _add(document: Any, tokens: List[str], value: Any) -> Any:
    if not tokens:
        return value
    parent = _resolve(document, tokens[:-1])
    key = tokens[-1]
    if isinstance(parent, dict):
        parent[key] = value
    elif isinstance(parent, list):
        parent.insert(_index(key, len(parent), True), value)
    else:
        raise ValueError(f"cannot add to a scalar at {key!r}")
    return document


def _remove(document: Any, tokens: List[str]) -> Any:
    if not tokens:
        raise ValueError("cannot remove the document root")
    parent = _resolve(document, tokens[:-1])
    key = tokens[-1]
    if isinstance(parent, dict):
        if key not in parent:
            raise ValueError(f"path not found: {key!r}")
        return parent.pop(key)
    if isinstance(parent, list):
        return parent.pop(_index(key, len(parent), False))
    raise ValueError(f"cannot remove from a scalar at {key!r}")


def _replace(document: Any, tokens: List[str], value: Any) -> Any:
    if not tokens:
        return value
    parent = _resolve(document, tokens[:-1])
    key = tokens[-1]
    if isinstance(parent, dict):
        if key not in parent:
            raise ValueError(f"path not found: {key!r}")
        parent[key] = value
    elif isinstance(parent, list):
        parent[_index(key, len(parent), False)] = value
    else:
        raise ValueError(f"cannot replace in a scalar at {key!r}")
    return document


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


def _value(operation: dict, name: str) -> Any:
    if "value" not in operation:
        raise ValueError(f"missing value for {name} operation")
    return copy.deepcopy(operation["value"])


def apply_json_patch(document: Any, operations: Any) -> Any:
    """Apply RFC 6902 operations to a copy of ``document`` and return it.

    Raises ValueError for a malformed patch or an operation that cannot apply.
    """
    if not isinstance(operations, list):
        raise ValueError("a JSON patch must be a list of operations")
    result = copy.deepcopy(document)
    for operation in operations:
        if not isinstance(operation, dict):
            raise ValueError(f"invalid JSON patch operation: {operation!r}")
        name = operation.get("op")
        path = _parse_pointer(operation.get("path"))
        if name == "add":
            result = _add(result, path, _value(operation, name))
        elif name == "remove":
            _remove(result, path)
        elif name == "replace":
            result = _replace(result, path, _value(operation, name))
        elif name == "move":
            source = _parse_pointer(operation.get("from"))
            if path[: len(source)] == source and len(path) > len(source):
                raise ValueError("cannot move a value into one of its children")
            if path != source:
                value = _remove(result, source)
                result = _add(result, path, value)
        elif name == "copy":
            source = _parse_pointer(operation.get("from"))
            value = copy.deepcopy(_resolve(result, source))
            result = _add(result, path, value)
        elif name == "test":
            expected = _value(operation, name)
            if _canonical(_resolve(result, path)) != _canonical(expected):
                raise ValueError(f"test operation failed at {operation.get('path')!r}")
        else:
            raise ValueError(f"unsupported JSON patch operation: {name!r}")
    return result


@dataclass
class PatchFilter:
    """A node filter applying a patch of the given media type."""

    patch_type: str = ""
    patch_data: Union[bytes, str] = b""

    def _text(self) -> str:
        if isinstance(self.patch_data, bytes):
            return self.patch_data.decode("utf-8")
        return self.patch_data

    def filter(self, node: Any) -> Any:
        """Return the patched document."""
        text = self._text()
        if self.patch_type in _MERGE_TYPES:
            try:
                documents = list(yaml.safe_load_all(text))
            except yaml.YAMLError as exc:
                raise ValueError(f"invalid patch: {exc}") from exc
            if not documents:
                raise ValueError("empty patch")
            return merge(documents[0], node)

        if self.patch_type in _JSON_TYPES:
            try:
                operations = json.loads(text) if text.startswith("[") else yaml.safe_load(text)
            except yaml.YAMLError as exc:
                raise ValueError(f"invalid patch: {exc}") from exc
            return apply_json_patch(node, operations)

        raise UnsupportedPatchError(self.patch_type)