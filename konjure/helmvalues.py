"""Helm style values: values files and ``--set`` expressions as documents."""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import yaml

from konjure import strvals
from konjure.nodes import merge


def _mask(node: Any, values: Any, keep: bool) -> Any:
    if isinstance(values, dict):
        if not isinstance(node, dict):
            raise ValueError(f"wrong node kind: expected a mapping, got {type(node).__name__}")
        masked: Dict[Any, Any] = {}
        for key, value in node.items():
            if key in values:
                result = _mask(value, values[key], keep)
                if result is not None:
                    masked[key] = result
            elif not keep:
                masked[key] = copy.deepcopy(value)
        return masked or None
    if keep and values is not None:
        return copy.deepcopy(node)
    return None


@dataclass
class HelmValues:
    """User supplied Helm values: files (``-f``), ``--set``, ``--set-string`` and ``--set-file``.

    ``fs`` is an optional base directory used to resolve file names.
    """

    value_files: List[str] = field(default_factory=list)
    values: List[str] = field(default_factory=list)
    string_values: List[str] = field(default_factory=list)
    file_values: List[str] = field(default_factory=list)
    fs: Optional[Union[str, os.PathLike]] = None

    def empty(self) -> bool:
        """True if no values of any kind are configured."""
        return not (self.value_files or self.values or self.string_values or self.file_values)

    def _read_file(self, spec: str) -> str:
        path = Path(self.fs) / spec if self.fs is not None else Path(spec)
        return path.read_text(encoding="utf-8")

    def as_map(self) -> Optional[Dict[str, Any]]:
        """Combine all configured values into one mapping; None if nothing results."""
        base: Dict[str, Any] = {}

        for file_path in self.value_files:
            current = yaml.safe_load(self._read_file(file_path))
            if current is None:
                current = {}
            if not isinstance(current, dict):
                raise ValueError(f"values file {file_path!r} does not hold a mapping")
            base = self.merge_maps(base, current)

        for value in self.values:
            strvals.parse_into(value, base)

        for value in self.string_values:
            strvals.parse_into_string(value, base)

        for value in self.file_values:
            strvals.parse_into_file(value, base, lambda rs: self._read_file("".join(rs)))

        return base or None

    def read(self) -> List[Any]:
        """Return the combined values as a single document, or no documents at all."""
        base = self.as_map()
        if not base:
            return []
        return [base]

    def apply(self) -> Callable[[Any], Any]:
        """Return a node filter merging these values over each document."""

        def _filter(node: Any) -> Any:
            if self.empty():
                return node
            result = node
            for values in self.read():
                result = merge(values, result)
            return result

        return _filter

    def merge_maps(self, a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
        """Merge ``b`` over ``a`` recursively, returning a new mapping."""
        out = dict(a)
        for key, value in b.items():
            existing = out.get(key)
            if isinstance(value, dict) and isinstance(existing, dict):
                out[key] = self.merge_maps(existing, value)
            else:
                out[key] = value
        return out

    def flatten(self) -> Callable[[List[Any]], List[Any]]:
        """Return a list filter merging every mapping document into one."""

        def _filter(nodes: List[Any]) -> List[Any]:
            out: Dict[str, Any] = {}
            for node in nodes:
                if node is None:
                    continue
                if not isinstance(node, dict):
                    raise ValueError(f"cannot flatten a {type(node).__name__} document")
                out = self.merge_maps(out, node)
            return [out]

        return _filter

    def mask(self, keep: bool) -> Callable[[List[Any]], List[Any]]:
        """Return a list filter keeping (or stripping) the data these values touch."""

        def _filter(nodes: List[Any]) -> List[Any]:
            values = self.as_map()
            result = []
            for node in nodes:
                masked = _mask(node, values, keep)
                if masked is not None:
                    result.append(masked)
            return result

        return _filter