"""Composable filters over resource documents and a simple read/filter/write pipeline.

A node filter is a callable (or an object with ``filter``) taking one document
and returning a document or None. A list filter does the same for a list of
documents. Readers expose ``read()`` (or are callables) and writers ``write()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from konjure.nodes import clear_empty_annotations, merge


def _call_filter(f: Any, value: Any) -> Any:
    method = getattr(f, "filter", None)
    return method(value) if method is not None else f(value)


def _read(reader: Any) -> List[Any]:
    method = getattr(reader, "read", None)
    return list((method if method is not None else reader)() or [])


def _write(writer: Any, nodes: List[Any]) -> None:
    method = getattr(writer, "write", None)
    (method if method is not None else writer)(nodes)


def _pipe(node: Any, functions) -> Any:
    for f in functions:
        node = _call_filter(f, node)
        if node is None:
            return None
    return node


def filter_one(list_filter: Any) -> Callable[[Any], Any]:
    """Adapt a list filter to a node filter; yields None unless exactly one node results."""

    def _filter(node: Any) -> Any:
        nodes = _call_filter(list_filter, [node])
        if nodes is not None and len(nodes) == 1:
            return nodes[0]
        return None

    return _filter


def filter_all(node_filter: Any) -> Callable[[List[Any]], List[Any]]:
    """Adapt a node filter to a list filter, keeping only the non-None results."""

    def _filter(nodes: List[Any]) -> List[Any]:
        result = []
        for node in nodes:
            filtered = _call_filter(node_filter, node)
            if filtered is not None:
                result.append(filtered)
        return result

    return _filter


def has(*functions: Any) -> Callable[[Any], Any]:
    """Return the node itself only if piping it through ``functions`` yields a result."""

    def _filter(node: Any) -> Any:
        return None if _pipe(node, functions) is None else node

    return _filter


def when(condition: bool, node_filter: Any) -> Any:
    """Return ``node_filter`` if the condition holds, otherwise an identity filter."""
    if condition:
        return node_filter
    return lambda node: node


def flatten() -> Callable[[List[Any]], List[Any]]:
    """Return a list filter merging every node into the first; later nodes win."""

    def _filter(nodes: List[Any]) -> List[Any]:
        nodes = list(nodes)
        while len(nodes) > 1:
            source = nodes.pop()
            nodes[-1] = merge(source, nodes[-1])
        return nodes

    return _filter


def pipe_one(reader: Any, *functions: Any) -> Optional[Any]:
    """Read a single document and pipe it through the filters.

    Returns None if nothing was read; raises ValueError for more than one document.
    """
    nodes = _read(reader)
    if not nodes:
        return None
    if len(nodes) == 1:
        return _pipe(nodes[0], functions)
    raise ValueError(f"expected a single document, got {len(nodes)}")


@dataclass
class Pipeline:
    """Reads inputs, applies list filters, then optionally writes the result."""

    inputs: List[Any] = field(default_factory=list)
    filters: List[Any] = field(default_factory=list)
    outputs: List[Any] = field(default_factory=list)
    continue_on_empty_result: bool = False

    def read(self) -> List[Any]:
        """Evaluate the inputs and filters, ignoring the outputs."""
        result: List[Any] = []
        for reader in self.inputs:
            result.extend(_read(reader))

        for list_filter in self.filters:
            result = list(_call_filter(list_filter, result) or [])
            if not result and not self.continue_on_empty_result:
                break

        for node in result:
            clear_empty_annotations(node)
        return result

    def execute(self) -> None:
        """Read and filter the documents, then send them to every output."""
        nodes = self.read()
        if not nodes and not self.continue_on_empty_result:
            return
        for writer in self.outputs:
            _write(writer, nodes)