"""
Lightweight typing aliases for the generic JSON value tree.

Every entity field is extracted from a `JsonValue`: the recursive variant of
scalars, ordered sequences and string-keyed mappings produced by
`fedimodel.serde.parse`. This module contains no runtime logic and is zero-IO.

Examples:
    >>> from fedimodel.typing import JsonDict, JsonValue
    >>> def keys(payload: JsonDict) -> list[str]:
    ...     return sorted(payload)
    >>> keys({"type": "Note", "id": "https://example.org/notes/1"})
    ['id', 'type']
"""

from __future__ import annotations

from typing import Any, TypeAlias, Union

__all__ = [
    "JsonValue",
    "JsonDict",
]

# Recursive JSON value as produced by json.loads.
JsonValue: TypeAlias = Union[None, bool, int, float, str, list["JsonValue"], dict[str, "JsonValue"]]

# Convenient JSON-like mapping alias. Kept intentionally broad for serde boundaries.
JsonDict = dict[str, Any]
