"""
Exception types raised (or recorded as diagnostics) while parsing payloads.

Provides typed exceptions for every failure the core can report:
- PayloadSyntaxError when the input text is not well-formed JSON.
- DispatchError / NotAnObject when the top-level value cannot be an entity.
- ExtractError (MissingFieldError, FieldTypeError) when a field cannot be read.
- UnrecognizedKind for kind tags outside the modeled vocabulary.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Optional-field problems are never raised out of an extraction: the same
      FieldTypeError instance is recorded as a diagnostic instead.
    - UnrecognizedKind is only ever a diagnostic.

Examples:
    >>> from fedimodel.errors import FieldTypeError
    >>> err = FieldTypeError("published", "string")
    >>> str(err)
    "field 'published': expected string"
    >>> err.field, err.expected
    ('published', 'string')
"""

from __future__ import annotations

__all__ = [
    "FediModelError",
    "PayloadSyntaxError",
    "DispatchError",
    "NotAnObject",
    "ExtractError",
    "MissingFieldError",
    "FieldTypeError",
    "UnrecognizedKind",
]


class FediModelError(Exception):
    """Base class for all fedimodel errors and diagnostics."""


class PayloadSyntaxError(FediModelError, ValueError):
    """
    Input text is not well-formed JSON.

    Attributes:
        offset (int): Character offset (or byte offset for undecodable bytes).
        lineno (int): 1-based line of the failure.
        colno (int): 1-based column of the failure.
    """

    def __init__(self, message: str, offset: int, lineno: int = 1, colno: int = 1) -> None:
        super().__init__(f"{message} (line {lineno}, column {colno}, offset {offset})")
        self.offset = offset
        self.lineno = lineno
        self.colno = colno


class DispatchError(FediModelError):
    """The payload as a whole cannot be dispatched to any entity kind."""


class NotAnObject(DispatchError):
    """The top-level value is not a JSON object (mapping)."""

    def __init__(self, actual: str) -> None:
        super().__init__(f"top-level value must be a JSON object, got {actual}")
        self.actual = actual


class ExtractError(FediModelError, ValueError):
    """
    A field could not be extracted.

    Attributes:
        field (str): Dotted/indexed path of the field (e.g. ``attributedTo[1].id``).
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"field {field!r}: {message}")
        self.field = field


class MissingFieldError(ExtractError):
    """A strictly-required field is absent."""

    def __init__(self, field: str) -> None:
        super().__init__(field, "required field is missing")


class FieldTypeError(ExtractError):
    """
    A field holds a value of the wrong shape.

    Attributes:
        expected (str): Human-readable description of the accepted shape.
    """

    def __init__(self, field: str, expected: str) -> None:
        super().__init__(field, f"expected {expected}")
        self.expected = expected


class UnrecognizedKind(FediModelError):
    """
    A kind tag outside the modeled vocabulary (diagnostic only).

    Attributes:
        tag (str | None): The unknown tag, or None when the payload carried no usable tag.
        field (str): Path of the payload the tag was read from ("" for the root).
    """

    def __init__(self, tag: str | None, field: str = "") -> None:
        where = f" at {field!r}" if field else ""
        if tag is None:
            super().__init__(f"no recognized kind tag{where}")
        else:
            super().__init__(f"unrecognized kind tag {tag!r}{where}")
        self.tag = tag
        self.field = field
