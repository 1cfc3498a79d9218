"""Field paths: template evaluation, splitting and path based value setting."""

from __future__ import annotations

import copy
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from konjure.nodes import lookup

_ACTION = re.compile(r"\{(.*?)\}", re.S)
_FIELD = re.compile(r"\s*\.([A-Za-z_][A-Za-z0-9_]*)\s*")
_INT = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _path_split(path: str, delimiter: str) -> List[str]:
    parts = path.split(delimiter)
    result = [parts[0]]
    for part in parts[1:]:
        if result[-1].endswith("\\"):
            result[-1] = result[-1][:-1] + delimiter + part
        else:
            result.append(part)
    return result


def smarter_path_split(path: str, delimiter: str) -> List[str]:
    """Split a path on a delimiter, keeping ``[name=value]`` segments and escapes intact."""
    result: List[str] = []
    parts = iter(_path_split(path, delimiter))
    for part in parts:
        if part.startswith("[") and not part.endswith("]"):
            bracketed = [part]
            for following in parts:
                bracketed.append(following)
                if following.endswith("]"):
                    break
            result.append(delimiter.join(bracketed))
        else:
            result.append(part)
    return result


def _clean_path(path: List[str]) -> Optional[List[str]]:
    result = [p.strip() for p in path if p.strip()]
    return result or None


def _render(template: str, data: Optional[Dict[str, str]]) -> str:
    data = data or {}
    out: List[str] = []
    pos = 0
    for match in _ACTION.finditer(template):
        out.append(template[pos : match.start()])
        inner = match.group(1)
        field = _FIELD.fullmatch(inner)
        if field is None:
            raise ValueError(f"unsupported template action: {{{inner}}}")
        out.append(str(data.get(field.group(1), "")))
        pos = match.end()
    rest = template[pos:]
    if "{" in rest:
        raise ValueError("unclosed action in path template")
    out.append(rest)
    return "".join(out)


def field_path(p: str, data: Optional[Dict[str, str]]) -> Optional[List[str]]:
    """Evaluate ``{.key}`` placeholders from ``data`` and split the path on "/".

    Missing keys evaluate to empty strings; empty segments are dropped. Returns
    None for an empty path.
    """
    return _clean_path(smarter_path_split(_render(p, data), "/"))


def _descend(current: Any, segment: str, next_segment: str) -> Any:
    child = lookup(current, segment)
    if child is not None:
        return child
    fresh: Any = [] if next_segment.startswith("[") and next_segment.endswith("]") else {}
    if segment.startswith("[") and segment.endswith("]"):
        name, sep, value = segment[1:-1].partition("=")
        if not isinstance(current, list) or not sep or not name:
            raise ValueError(f"cannot create path segment {segment!r}")
        element = {name: value}
        current.append(element)
        return element
    if not isinstance(current, dict):
        raise ValueError(f"cannot create field {segment!r} in a non-mapping value")
    current[segment] = fresh
    return fresh


def _assign(container: Any, segment: str, value: Any) -> None:
    if isinstance(container, list):
        if segment.startswith("[") and segment.endswith("]"):
            match = lookup(container, segment)
            position = next((i for i, item in enumerate(container) if item is match), None)
            if position is None:
                container.append(value)
            else:
                container[position] = value
            return
        if segment.isdigit() and int(segment) < len(container):
            container[int(segment)] = value
            return
    elif isinstance(container, dict):
        container[segment] = value
        return
    raise ValueError(f"cannot set path segment {segment!r}")


def _clear(container: Any, name: str, if_empty: bool) -> None:
    if not isinstance(container, dict):
        raise ValueError(f"cannot clear field {name!r} in a non-mapping value")
    if name not in container:
        return
    value = container[name]
    if if_empty and isinstance(value, (dict, list)) and value:
        return
    del container[name]


def set_path(p: str, value: Any) -> Callable[[Any], Any]:
    """Return a node filter setting ``value`` at a "."-separated path.

    A None value removes the field instead of creating it. The filter returns
    the updated document.
    """
    path = _clean_path(smarter_path_split(p, "."))
    if path is None:
        raise ValueError(f"empty path: {p!r}")

    def _filter(document: Any) -> Any:
        if value is None:
            if len(path) == 1:
                _clear(document, path[0], False)
            else:
                parent = lookup(document, *path[:-1])
                if parent is not None:
                    _clear(parent, path[-1], True)
            return document
        current = document
        for segment, next_segment in zip(path, path[1:]):
            current = _descend(current, segment, next_segment)
        _assign(current, path[-1], copy.deepcopy(value))
        return document

    return _filter


def set_values(name_value: List[str], force_string: bool) -> Callable[[Any], Any]:
    """Return a node filter applying each "path=value" specification in turn."""
    setters = [set_path(*split_path_value(spec, force_string)) for spec in name_value]

    def _filter(document: Any) -> Any:
        for setter in setters:
            document = setter(document)
        return document

    return _filter


def _typed(value: str) -> Any:
    folded = value.lower()
    if folded == "true":
        return True
    if folded == "false":
        return False
    if folded == "null":
        return None
    if value == "0":
        return 0
    if _INT.fullmatch(value) and value[0] != "0":
        number = int(value)
        if _INT64_MIN <= number <= _INT64_MAX:
            return number
    return value


def split_path_value(spec: str, force_string: bool) -> Tuple[str, Any]:
    """Split "path=value" into the path and a value.

    Unless ``force_string`` is set, booleans, null and integers are converted.
    Without an "=" the whole spec is the path and the value is None.
    """
    parts = smarter_path_split(spec, ".")
    for i in range(len(parts) - 1, -1, -1):
        before, sep, after = parts[i].partition("=")
        if not sep:
            continue
        path = ".".join(parts[:i] + [before])
        value = ".".join([after] + parts[i + 1 :])
        if force_string:
            return path, value
        return path, _typed(value)
    return spec, None