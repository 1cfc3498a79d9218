"""Parser for Helm style ``--set`` value strings such as ``name1=value1,name2=value2``."""

from __future__ import annotations

import json
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

import yaml

#: The maximum list index that may be assigned.
MAX_INDEX = 65536

#: The maximum nesting level of a dotted value name.
MAX_NESTED_NAME_LEVEL = 30

RunesValueReader = Callable[[str], Any]

_KEY_STOP = frozenset("=[,.")
_INDEX_STOP = frozenset("[.=")
_LIST_STOP = frozenset(",}")
_VALUE_STOP = frozenset(",")
_BRACKET_STOP = frozenset("]")

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_DECODER = json.JSONDecoder()


class StrvalsError(ValueError):
    """Raised when a value string cannot be parsed."""


class _EndOfInput(Exception):
    """Internal signal: the input has been consumed."""


class _NotList(Exception):
    """Internal signal: the value is not a ``{a,b}`` list."""


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


class _Scanner:
    """A character cursor over a string that supports a single step back."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def read(self) -> Optional[str]:
        if self._pos >= len(self._text):
            return None
        char = self._text[self._pos]
        self._pos += 1
        return char

    def unread(self) -> None:
        self._pos -= 1

    def remaining(self) -> str:
        return self._text[self._pos :]

    def skip(self, count: int) -> None:
        self._pos += count


def _runes_until(scanner: _Scanner, stop: frozenset) -> Tuple[str, Optional[str], bool]:
    """Read up to a stop character, honouring backslash escapes.

    Returns the text read, the stop character (or None) and whether the end
    of input was reached.
    """
    chars: List[str] = []
    while True:
        char = scanner.read()
        if char is None:
            return "".join(chars), None, True
        if char in stop:
            return "".join(chars), char, False
        if char == "\\":
            escaped = scanner.read()
            if escaped is None:
                return "".join(chars), None, True
            chars.append(escaped)
        else:
            chars.append(char)


def _typed_val(value: str, force_string: bool) -> Any:
    if force_string:
        return value
    folded = value.casefold()
    if folded == "true":
        return True
    if folded == "false":
        return False
    if folded == "null":
        return None
    if value == "0":
        return 0
    if value and value[0] != "0" and _INT_RE.fullmatch(value):
        number = int(value)
        if _INT64_MIN <= number <= _INT64_MAX:
            return number
    return value


def _set(data: Dict[str, Any], key: str, value: Any) -> None:
    if key:
        data[key] = value


def _set_index(items: List[Any], index: int, value: Any) -> List[Any]:
    if index < 0:
        raise StrvalsError(f"negative {index} index not allowed")
    if index > MAX_INDEX:
        raise StrvalsError(
            f"index of {index} is greater than maximum supported index of {MAX_INDEX}"
        )
    if len(items) <= index:
        items.extend([None] * (index + 1 - len(items)))
    items[index] = value
    return items


class _Parser:
    def __init__(
        self,
        text: str,
        data: Dict[str, Any],
        reader: Optional[RunesValueReader] = None,
        json_values: bool = False,
    ) -> None:
        self._scanner = _Scanner(text)
        self._data = data
        self._reader = reader
        self._json_values = json_values

    def parse(self) -> None:
        while True:
            try:
                self._key(self._data, 0)
            except _EndOfInput:
                return

    def _key(self, data: Dict[str, Any], level: int) -> None:
        key, last, eof = _runes_until(self._scanner, _KEY_STOP)
        if eof:
            if not key:
                raise _EndOfInput
            raise StrvalsError(f"key {_quote(key)} has no value")

        if last == "[":
            index = self._key_index()
            items: List[Any] = []
            if key in data:
                existing = data[key]
                if not isinstance(existing, list):
                    raise StrvalsError(f"unable to parse key: {_quote(key)} is not a list")
                items = existing
            try:
                items = self._list_item(items, index, level)
            finally:
                _set(data, key, items)
            return

        if last == "=":
            if self._json_values:
                if self._empty_val():
                    _set(data, key, None)
                    return
                _set(data, key, self._json_value())
                self._empty_val()
                return
            try:
                values = self._val_list()
            except _EndOfInput:
                _set(data, key, "")
                raise
            except _NotList:
                _set(data, key, self._reader(self._val()))
                return
            _set(data, key, values)
            return

        if last == ",":
            _set(data, key, "")
            raise StrvalsError(f"key {_quote(key)} has no value (cannot end with ,)")

        # last == "."
        level += 1
        if level > MAX_NESTED_NAME_LEVEL:
            raise StrvalsError(
                "value name nested level is greater than maximum supported nested "
                f"level of {MAX_NESTED_NAME_LEVEL}"
            )
        inner: Dict[str, Any] = {}
        if key in data:
            existing = data[key]
            if not isinstance(existing, dict):
                raise StrvalsError(f"unable to parse key: {_quote(key)} is not a map")
            inner = existing
        try:
            self._key(inner, level)
        except Exception:
            if inner:
                _set(data, key, inner)
            raise
        if not inner:
            raise StrvalsError(f"key map {_quote(key)} has no value")
        _set(data, key, inner)

    def _key_index(self) -> int:
        text, _, eof = _runes_until(self._scanner, _BRACKET_STOP)
        if eof:
            raise StrvalsError("error parsing index: unexpected end of input")
        if not _INT_RE.fullmatch(text):
            raise StrvalsError(f"error parsing index: invalid index {_quote(text)}")
        return int(text)

    def _list_item(self, items: List[Any], index: int, level: int) -> List[Any]:
        if index < 0:
            raise StrvalsError(f"negative {index} index not allowed")
        text, last, eof = _runes_until(self._scanner, _INDEX_STOP)
        if text:
            raise StrvalsError(f"unexpected data at end of array index: {_quote(text)}")
        if eof:
            raise _EndOfInput

        if last == "=":
            if self._json_values:
                if self._empty_val():
                    return _set_index(items, index, None)
                items = _set_index(items, index, self._json_value())
                self._empty_val()
                return items
            try:
                values = self._val_list()
            except _EndOfInput:
                return _set_index(items, index, "")
            except _NotList:
                return _set_index(items, index, self._reader(self._val()))
            return _set_index(items, index, values)

        if last == "[":
            next_index = self._key_index()
            current: List[Any] = []
            if len(items) > index and items[index] is not None:
                if not isinstance(items[index], list):
                    raise StrvalsError(f"unable to parse key: index {index} is not a list")
                current = items[index]
            nested = self._list_item(current, next_index, level)
            return _set_index(items, index, nested)

        # last == "."
        inner: Dict[str, Any] = {}
        if len(items) > index:
            if not isinstance(items[index], dict):
                items[index] = {}
            inner = items[index]
        self._key(inner, level)
        return _set_index(items, index, inner)

    def _empty_val(self) -> bool:
        """Consume blanks up to a comma or the end; report whether the value is empty."""
        while True:
            char = self._scanner.read()
            if char is None or char == ",":
                return True
            if not char.isspace():
                self._scanner.unread()
                return False

    def _json_value(self) -> Any:
        try:
            value, end = _DECODER.raw_decode(self._scanner.remaining())
        except json.JSONDecodeError as exc:
            raise StrvalsError(str(exc)) from exc
        self._scanner.skip(end)
        return value

    def _val(self) -> str:
        text, _, _ = _runes_until(self._scanner, _VALUE_STOP)
        return text

    def _val_list(self) -> List[Any]:
        char = self._scanner.read()
        if char is None:
            raise _EndOfInput
        if char != "{":
            self._scanner.unread()
            raise _NotList

        values: List[Any] = []
        while True:
            text, last, eof = _runes_until(self._scanner, _LIST_STOP)
            if eof:
                raise StrvalsError("list must terminate with '}'")
            if last == "}":
                following = self._scanner.read()
                if following is not None and following != ",":
                    self._scanner.unread()
                values.append(self._reader(text))
                return values
            values.append(self._reader(text))


def _typed_reader(force_string: bool) -> RunesValueReader:
    return lambda text: _typed_val(text, force_string)


def to_yaml(s: str) -> str:
    """Parse a set line and render it as a YAML document without the final newline."""
    values = parse(s)
    text = yaml.safe_dump(values, default_flow_style=False, allow_unicode=True)
    return text[:-1] if text.endswith("\n") else text


def parse(s: str) -> Dict[str, Any]:
    """Parse a set line of the form ``name1=value1,name2=value2``."""
    values: Dict[str, Any] = {}
    _Parser(s, values, _typed_reader(False)).parse()
    return values


def parse_string(s: str) -> Dict[str, Any]:
    """Parse a set line, keeping every value as a string."""
    values: Dict[str, Any] = {}
    _Parser(s, values, _typed_reader(True)).parse()
    return values


def parse_into(s: str, dest: Dict[str, Any]) -> None:
    """Parse a set line and merge the result into ``dest``, overwriting existing keys."""
    _Parser(s, dest, _typed_reader(False)).parse()


def parse_into_string(s: str, dest: Dict[str, Any]) -> None:
    """Parse a set line into ``dest``, keeping every value as a string."""
    _Parser(s, dest, _typed_reader(True)).parse()


def parse_file(s: str, reader: RunesValueReader) -> Dict[str, Any]:
    """Parse a set line whose values are resolved by ``reader`` (e.g. file paths to contents)."""
    values: Dict[str, Any] = {}
    _Parser(s, values, reader).parse()
    return values


def parse_into_file(s: str, dest: Dict[str, Any], reader: RunesValueReader) -> None:
    """Parse a set line into ``dest``, resolving each value through ``reader``."""
    _Parser(s, dest, reader).parse()


def parse_json(s: str, dest: Dict[str, Any]) -> None:
    """Parse ``key1=jsonval1,key2=jsonval2`` into ``dest``; an empty value is null."""
    _Parser(s, dest, json_values=True).parse()