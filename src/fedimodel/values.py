"""
Value normalization layer: shape adapters shared by every entity schema.

Producers are free to send a property as one value or as a list of values, and
as a full nested object or as a bare identifier string. This module absorbs
that variability once, so entity schemas stay declarative.

Responsibilities
- `UNSET`: explicit "absent in the source" marker (distinct from JSON null).
- `FrozenDict` / `FrozenList`: immutable, hashable JSON containers used for
  every raw JSON value an entity keeps (extra_fields, language maps, context).
- `SingleOrMany`: ordered items plus the shape that was observed.
- `EmbeddedOrReference` with its two variants `Embedded` and `Reference`.
- Leaf readers with strict JSON shape checks (`read_str`, `read_datetime`, ...).
- `as_single_or_many` / `as_embedded_or_reference` adapters.
- `ExtractionContext`: path-aware diagnostics sink for one extraction call.
- `to_wire`: inverse conversion used by re-serialization.

Notes
- Zero-IO. Readers raise FieldTypeError; deciding whether that is fatal is
  the schema layer's job.
- Wrapper types plug into pydantic through `__get_pydantic_core_schema__` as
  plain instance checks; their type parameters are documentation only.

Examples
--------
>>> from fedimodel.values import ExtractionContext, as_single_or_many, read_str, UNSET
>>> ctx = ExtractionContext()
>>> as_single_or_many("https://example.org/a", read_str, ctx).was_singular
True
>>> len(as_single_or_many(["a", "b"], read_str, ctx))
2
>>> as_single_or_many(UNSET, read_str, ctx) is UNSET
True
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Final, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import core_schema

from .config import ParseSettings
from .errors import ExtractError, FediModelError, FieldTypeError

__all__ = [
    "Unset",
    "UNSET",
    "FrozenDict",
    "FrozenList",
    "freeze_json",
    "thaw_json",
    "SingleOrMany",
    "EmbeddedOrReference",
    "Embedded",
    "Reference",
    "Reader",
    "ExtractionContext",
    "as_single_or_many",
    "as_embedded_or_reference",
    "embedded_or_reference",
    "read_str",
    "read_bool",
    "read_int",
    "read_datetime",
    "read_language_map",
    "read_context_item",
    "to_wire",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


class Unset(Enum):
    """Marker type for fields absent in the source payload."""

    UNSET = "unset"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = Unset.UNSET


class FrozenList(Sequence[Any]):
    """Immutable JSON array; equal to any list or tuple holding equal items."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Any] = ()) -> None:
        self._items = tuple(items)

    def __getitem__(self, index: Any) -> Any:
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FrozenList):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            return len(self._items) == len(other) and all(a == b for a, b in zip(self._items, other))
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"FrozenList({list(self._items)!r})"


class FrozenDict(Mapping[str, Any]):
    """
    Immutable JSON object; equal to any mapping with equal items.

    Examples:
        >>> frozen = freeze_json({"x": [1, 2]})
        >>> frozen == {"x": [1, 2]}, hash(frozen) == hash(freeze_json({"x": [1, 2]}))
        (True, True)
    """

    __slots__ = ("_data", "_hash")

    def __init__(self, data: Mapping[str, Any] | Iterable[tuple[str, Any]] = ()) -> None:
        self._data: dict[str, Any] = dict(data)
        self._hash: int | None = None

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self._data.items()))
        return self._hash

    def __repr__(self) -> str:
        return f"FrozenDict({self._data!r})"

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            _validate_frozen_dict,
            serialization=core_schema.plain_serializer_function_ser_schema(thaw_json),
        )


def _validate_frozen_dict(value: Any) -> FrozenDict:
    if isinstance(value, FrozenDict):
        return value
    if isinstance(value, Mapping):
        return freeze_json(value)
    raise ValueError("expected a JSON object")


def _is_container(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple, FrozenList))


def _entries(value: Any) -> Iterator[tuple[Any, Any]]:
    return iter(value.items()) if isinstance(value, Mapping) else enumerate(value)


def _rebuild(
    value: Any,
    make_map: Callable[[list[tuple[Any, Any]]], Any],
    make_list: Callable[[list[Any]], Any],
) -> Any:
    # Explicit stack: payload depth is bounded by the producer, not by the interpreter.
    if not _is_container(value):
        return value
    stack: list[tuple[Iterator[tuple[Any, Any]], list[Any], bool, Any]] = [
        (_entries(value), [], isinstance(value, Mapping), None)
    ]
    while True:
        entries, out, is_map, slot = stack[-1]
        for key, item in entries:
            if _is_container(item):
                stack.append((_entries(item), [], isinstance(item, Mapping), key))
                break
            out.append((key, item) if is_map else item)
        else:
            stack.pop()
            built = make_map(out) if is_map else make_list(out)
            if not stack:
                return built
            parent_out, parent_is_map = stack[-1][1], stack[-1][2]
            parent_out.append((slot, built) if parent_is_map else built)


def freeze_json(value: Any) -> Any:
    """Immutable copy of a JSON value tree: objects become FrozenDict, arrays FrozenList."""
    return _rebuild(value, FrozenDict, FrozenList)


def thaw_json(value: Any) -> Any:
    """Plain dict/list copy of a JSON value tree (inverse of `freeze_json`)."""
    return _rebuild(value, dict, list)


class SingleOrMany(Generic[T]):
    """
    Ordered, immutable items plus the shape observed on the wire.

    Attributes:
        items (tuple[T, ...]): Items in source order.
        plural (bool): True if the source held a JSON array (possibly of one
            or zero elements), False if it held one bare value.

    Examples:
        >>> SingleOrMany.one("a").to_wire(str)
        'a'
        >>> SingleOrMany.many(["a"]).to_wire(str)
        ['a']
    """

    __slots__ = ("_items", "_plural")

    def __init__(self, items: Iterable[T], plural: bool = True) -> None:
        items = tuple(items)
        if not plural and len(items) != 1:
            raise ValueError(f"a singular SingleOrMany holds exactly one item, got {len(items)}")
        self._items = items
        self._plural = plural

    @classmethod
    def one(cls, item: T) -> SingleOrMany[T]:
        return cls((item,), plural=False)

    @classmethod
    def many(cls, items: Iterable[T]) -> SingleOrMany[T]:
        return cls(items, plural=True)

    @property
    def items(self) -> tuple[T, ...]:
        return self._items

    @property
    def plural(self) -> bool:
        return self._plural

    @property
    def was_singular(self) -> bool:
        return not self._plural

    def first(self) -> T | None:
        return self._items[0] if self._items else None

    def map(self, fn: Callable[[T], U]) -> SingleOrMany[U]:
        """Apply `fn` to every item, keeping the observed shape."""
        return SingleOrMany((fn(item) for item in self._items), plural=self._plural)

    def to_wire(self, fn: Callable[[T], Any]) -> Any:
        """Re-emit in the observed shape: bare value when singular, list otherwise."""
        if not self._plural:
            return fn(self._items[0])
        return [fn(item) for item in self._items]

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SingleOrMany):
            return NotImplemented
        return self._plural == other._plural and self._items == other._items

    def __hash__(self) -> int:
        return hash((self._plural, self._items))

    def __repr__(self) -> str:
        if not self._plural:
            return f"SingleOrMany.one({self._items[0]!r})"
        return f"SingleOrMany.many({list(self._items)!r})"

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.is_instance_schema(SingleOrMany)


class EmbeddedOrReference(Generic[T]):
    """
    Either a fully inlined value (`Embedded`) or a bare identifier (`Reference`).

    Callers must handle both variants; resolving a Reference is out of scope.
    """

    __slots__ = ()

    @property
    def is_embedded(self) -> bool:
        return isinstance(self, Embedded)

    @property
    def is_reference(self) -> bool:
        return isinstance(self, Reference)

    @property
    def identifier(self) -> str | None:
        raise NotImplementedError

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.is_instance_schema(EmbeddedOrReference)


@dataclass(frozen=True, slots=True)
class Embedded(EmbeddedOrReference[T]):
    """Inlined value."""

    value: T

    @property
    def identifier(self) -> str | None:
        ident = getattr(self.value, "identifier", None)
        return ident if isinstance(ident, str) else None


@dataclass(frozen=True, slots=True)
class Reference(EmbeddedOrReference[T]):
    """Identifier string naming a value held elsewhere."""

    id: str

    @property
    def identifier(self) -> str:
        return self.id


class ExtractionContext:
    """
    Per-call extraction state: field path, nesting depth and diagnostics.

    One context is created per public extract/dispatch call and never shared,
    so extraction stays free of global state.

    Sibling interpretations of one payload (an Actor and an Activity for
    ``["Person", "Create"]``) read the same embedded values. `cached` keeps
    each embedded extraction, keyed by extractor, value and location, so every
    embedded mapping is extracted once per call however many kinds its
    ancestors claim.

    Attributes:
        settings (ParseSettings): Policy knobs for this call.
        diagnostics (list[FediModelError]): Non-fatal problems, in discovery order.
        depth (int): Current embedded-entity nesting depth.
    """

    def __init__(self, settings: ParseSettings | None = None) -> None:
        self.settings = settings or ParseSettings()
        self.diagnostics: list[FediModelError] = []
        self.depth = 0
        self._path: list[str] = []
        self._memo: dict[tuple[Any, int, str], tuple[Any, Any, ExtractError | None, tuple[FediModelError, ...]]] = {}

    @property
    def location(self) -> str:
        """Current field path, e.g. ``attributedTo[0].icon`` ("" at the payload root)."""
        out = ""
        for part in self._path:
            if part.startswith("[") or not out:
                out += part
            else:
                out += "." + part
        return out

    @contextmanager
    def field(self, key: str) -> Iterator[None]:
        self._path.append(key)
        try:
            yield
        finally:
            self._path.pop()

    @contextmanager
    def index(self, i: int) -> Iterator[None]:
        self._path.append(f"[{i}]")
        try:
            yield
        finally:
            self._path.pop()

    @contextmanager
    def nested(self) -> Iterator[None]:
        """Enter an embedded entity; refuses to go deeper than settings.max_depth."""
        if self.depth >= self.settings.max_depth:
            raise FieldTypeError(
                self.location, f"embedded object nested at most {self.settings.max_depth} deep"
            )
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def note(self, diagnostic: FediModelError) -> None:
        """Record a non-fatal diagnostic."""
        logger.debug("diagnostic: %s", diagnostic)
        self.diagnostics.append(diagnostic)

    def checkpoint(self) -> int:
        return len(self.diagnostics)

    def rollback(self, mark: int) -> None:
        """Drop diagnostics recorded since `mark` (used when the enclosing attempt is abandoned)."""
        del self.diagnostics[mark:]

    def cached(self, extractor: Callable[..., T], value: Any) -> T:
        """
        Run ``extractor(value, self)`` once per (extractor, value, location).

        A repeated call replays the diagnostics of the first run and returns
        its result, or raises its ExtractError again.
        """
        key = (extractor, id(value), self.location)
        hit = self._memo.get(key)
        if hit is not None and hit[0] is value:
            _, result, error, diagnostics = hit
            self.diagnostics.extend(diagnostics)
            if error is not None:
                raise error
            return result
        mark = self.checkpoint()
        try:
            result = extractor(value, self)
        except ExtractError as exc:
            self._memo[key] = (value, None, exc, tuple(self.diagnostics[mark:]))
            raise
        self._memo[key] = (value, result, None, tuple(self.diagnostics[mark:]))
        return result


# A reader turns one JSON value into T or raises FieldTypeError/ExtractError.
Reader = Callable[[Any, ExtractionContext], T]


def read_str(value: Any, ctx: ExtractionContext) -> str:
    if isinstance(value, str):
        return value
    raise FieldTypeError(ctx.location, "string")


def read_bool(value: Any, ctx: ExtractionContext) -> bool:
    if isinstance(value, bool):
        return value
    raise FieldTypeError(ctx.location, "boolean")


def read_int(value: Any, ctx: ExtractionContext) -> int:
    # bool is an int subclass in Python but never an integer on the wire.
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise FieldTypeError(ctx.location, "integer")


_DATETIME: Final = TypeAdapter(datetime)

# pydantic reads digit-only strings as epoch seconds; a timestamp must start with a calendar date.
_ISO_DATE_PREFIX: Final = re.compile(r"\d{4}-\d{2}-\d{2}")


def read_datetime(value: Any, ctx: ExtractionContext) -> datetime:
    """
    Read an ISO 8601 timestamp string.

    Numbers, and strings holding only a number, are rejected rather than
    treated as epoch seconds: a numeric ``published`` is a producer mistake,
    not a timestamp.
    """
    if isinstance(value, str) and _ISO_DATE_PREFIX.match(value):
        try:
            return _DATETIME.validate_python(value)
        except ValidationError as exc:
            raise FieldTypeError(ctx.location, "ISO 8601 timestamp string") from exc
    raise FieldTypeError(ctx.location, "ISO 8601 timestamp string")


def read_language_map(value: Any, ctx: ExtractionContext) -> FrozenDict:
    """Read a natural-language map such as ``contentMap`` (language tag -> text)."""
    if isinstance(value, Mapping) and all(isinstance(v, str) for v in value.values()):
        return FrozenDict(value)
    raise FieldTypeError(ctx.location, "mapping of language tag to string")


def read_context_item(value: Any, ctx: ExtractionContext) -> str | FrozenDict:
    """Read one ``@context`` entry: a URL string or a term-definition mapping."""
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return freeze_json(value)
    raise FieldTypeError(ctx.location, "context URL or term mapping")


def as_single_or_many(value: Any, reader: Reader[T], ctx: ExtractionContext) -> SingleOrMany[T] | Unset:
    """
    Normalize a single-or-many field.

    Args:
        value (Any): Raw JSON value, or UNSET when the key is absent.
        reader (Reader[T]): Reader applied to every element.
        ctx (ExtractionContext): Current extraction context.

    Returns:
        SingleOrMany[T] | Unset: UNSET for an absent field (never an error);
        a plural SingleOrMany for a JSON array; a singular one otherwise.

    Raises:
        FieldTypeError: If any element cannot be read as T.
    """
    if value is UNSET:
        return UNSET
    if isinstance(value, list):
        items: list[T] = []
        for i, element in enumerate(value):
            with ctx.index(i):
                items.append(reader(element, ctx))
        return SingleOrMany(items, plural=True)
    return SingleOrMany.one(reader(value, ctx))


def as_embedded_or_reference(
    value: Any, extractor: Reader[T], ctx: ExtractionContext
) -> EmbeddedOrReference[T]:
    """
    Normalize an embedded-or-reference field.

    Args:
        value (Any): Raw JSON value.
        extractor (Reader[T]): Full extraction routine for the embedded shape.
        ctx (ExtractionContext): Current extraction context.

    Returns:
        EmbeddedOrReference[T]: Reference for a bare string; Embedded for a mapping.

    Raises:
        FieldTypeError: For numbers, booleans, null, arrays, or nesting beyond max_depth.
        ExtractError: Propagated from a failing embedded extraction.
    """
    if isinstance(value, str):
        return Reference(value)
    if isinstance(value, Mapping):
        with ctx.nested():
            return Embedded(ctx.cached(extractor, value))
    raise FieldTypeError(ctx.location, "identifier string or embedded object")


def embedded_or_reference(extractor: Reader[T]) -> Reader[EmbeddedOrReference[T]]:
    """Lift an extractor into a reader usable by `as_single_or_many`."""

    def read(value: Any, ctx: ExtractionContext) -> EmbeddedOrReference[T]:
        return as_embedded_or_reference(value, extractor, ctx)

    return read


def _format_datetime(value: datetime) -> str:
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def to_wire(value: Any) -> Any:
    """
    Convert a normalized value back into a JSON value.

    Entities (anything with ``to_payload``) re-emit themselves; wrappers
    re-emit the shape they observed; datetimes become ISO 8601 (``Z`` for UTC).
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, SingleOrMany):
        return value.to_wire(to_wire)
    if isinstance(value, Reference):
        return value.id
    if isinstance(value, Embedded):
        return to_wire(value.value)
    if isinstance(value, datetime):
        return _format_datetime(value)
    if isinstance(value, (FrozenDict, FrozenList)):
        return thaw_json(value)
    to_payload = getattr(value, "to_payload", None)
    if callable(to_payload):
        return to_payload()
    if isinstance(value, Mapping):
        return {str(k): to_wire(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    raise TypeError(f"cannot convert {type(value).__name__} to a JSON value")
