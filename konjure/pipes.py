"""Small readers: failures, single values, encoded values and templates."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Union

import jinja2
import yaml

from konjure.nodes import read_documents


def _plain(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@dataclass
class ErrorReader:
    """A reader that raises the wrapped exception, or reads nothing without one."""

    err: Optional[BaseException] = None

    def read(self) -> List[Any]:
        """Raise the wrapped exception; with none wrapped, return no documents."""
        if self.err is None:
            return []
        raise self.err


def read_one(function: Callable[[], Optional[Any]]) -> Callable[[], List[Any]]:
    """Adapt a function returning one document (or None) to a reader."""

    def _read() -> List[Any]:
        node = function()
        return [] if node is None else [node]

    return _read


def encode(*values: Any) -> Callable[[], List[Any]]:
    """Return a reader over the YAML encoding of each value."""

    def _read() -> List[Any]:
        return [yaml.safe_load(yaml.safe_dump(_plain(value))) for value in values]

    return _read


def encode_json(*values: Any) -> Callable[[], List[Any]]:
    """Return a reader over the JSON encoding of each value."""

    def _read() -> List[Any]:
        return [json.loads(json.dumps(value, default=_json_default)) for value in values]

    return _read


@dataclass
class TemplateReader:
    """Reads a YAML document stream produced by rendering a template.

    A mapping ``data`` becomes the template context; anything else is
    available as ``data``.
    """

    template: Union[jinja2.Template, str]
    data: Any = None

    def read(self) -> List[Any]:
        """Render the template and parse the output."""
        template = self.template
        if isinstance(template, str):
            template = jinja2.Template(template)
        if isinstance(self.data, dict):
            text = template.render(self.data)
        else:
            text = template.render(data=self.data)
        return read_documents(text)