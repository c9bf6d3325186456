"""
JSON text <-> generic value tree.

Provides `parse` as a thin wrapper around the stdlib `json` module that maps
decoder failures onto PayloadSyntaxError, plus `dumps` for re-emitting
entities and `json_dumps_canonical` for deterministic output. This module is
zero-IO.

Notes:
    - Input is strict JSON: ``NaN``/``Infinity`` are rejected, and so is
      array/object nesting beyond `max_nesting` (checked before decoding, so
      hostile input never reaches the recursive decoder).
    - Output is strict JSON as well (``allow_nan=False``).
    - Use `json_dumps_canonical` for deterministic JSON strings (comparisons,
      caching keys, fixtures).
    - No datetime parsing or custom hooks here; entity schemas do that.
"""

from __future__ import annotations

import json
import re
from typing import Any, Final

from .constants import DEFAULT_MAX_NESTING
from .errors import PayloadSyntaxError
from .typing import JsonValue
from .values import to_wire

__all__ = [
    "parse",
    "dumps",
    "json_dumps_canonical",
]

# Strings (skipped whole), structural brackets and the non-JSON constants json.loads accepts.
_STRUCTURE: Final = re.compile(r'"[^"\\]*(?:\\.[^"\\]*)*"|[\[\]{}]|-?Infinity|NaN')


def _syntax_error(text: str, pos: int, message: str) -> PayloadSyntaxError:
    lineno = text.count("\n", 0, pos) + 1
    colno = pos - text.rfind("\n", 0, pos)
    return PayloadSyntaxError(message, pos, lineno, colno)


def _check_structure(text: str, max_nesting: int) -> None:
    depth = 0
    for match in _STRUCTURE.finditer(text):
        token = match.group()
        if token == "[" or token == "{":
            depth += 1
            if depth > max_nesting:
                raise _syntax_error(text, match.start(), f"nesting deeper than {max_nesting}")
        elif token == "]" or token == "}":
            depth -= 1
        elif not token.startswith('"'):
            raise _syntax_error(text, match.start(), f"invalid constant {token}")


def parse(text: str | bytes, max_nesting: int = DEFAULT_MAX_NESTING) -> JsonValue:
    """
    Parse JSON text into a generic value tree.

    Args:
        text (str | bytes): JSON document; bytes are decoded as UTF-8.
        max_nesting (int): Deepest accepted array/object nesting.

    Returns:
        JsonValue: Decoded value (dict, list, str, int, float, bool, or None).

    Raises:
        PayloadSyntaxError: If `text` is not well-formed JSON, uses ``NaN`` or
            ``Infinity``, nests deeper than `max_nesting`, or if bytes are not
            valid UTF-8 (offset is then the failing byte offset).

    Examples:
        >>> from fedimodel.serde import parse
        >>> parse('{"type": "Note"}')
        {'type': 'Note'}
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError as exc:
            head = bytes(exc.object[: exc.start])
            lineno = head.count(b"\n") + 1
            colno = exc.start - (head.rfind(b"\n") + 1) + 1
            raise PayloadSyntaxError(f"invalid UTF-8: {exc.reason}", exc.start, lineno, colno) from exc
    _check_structure(text, max_nesting)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise PayloadSyntaxError(exc.msg, exc.pos, exc.lineno, exc.colno) from exc
    except RecursionError as exc:
        raise PayloadSyntaxError("nesting too deep", 0) from exc


def json_dumps_canonical(obj: Any) -> str:
    """
    Serialize a JSON value to a canonical string.

    Canonical means sort_keys=True, compact separators and ensure_ascii=False.
    The input must already be JSON-serializable; no coercion is performed.
    Non-finite floats raise ValueError.
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def dumps(value: Any, canonical: bool = False, indent: int | None = None) -> str:
    """
    Re-emit an entity (or any JSON-convertible value) as JSON text.

    Args:
        value (Any): Entity, EntityKindSet, wrapper value or plain JSON value.
        canonical (bool): Use `json_dumps_canonical` (ignores `indent`).
        indent (int | None): Indentation for pretty output.

    Returns:
        str: JSON text. Key order follows the entity's declaration order
        unless `canonical` is set.

    Raises:
        ValueError: If the value holds a non-finite float.
    """
    payload = to_wire(value)
    if canonical:
        return json_dumps_canonical(payload)
    return json.dumps(payload, ensure_ascii=False, indent=indent, allow_nan=False)
