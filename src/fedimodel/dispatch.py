"""
Kind dispatch: turn one JSON payload into every typed interpretation it claims.

Responsibilities
- Read the ``type`` discriminator (one tag or a list of tags, in order).
- Map every recognized tag to its family schema (Activity, Actor, Collection,
  CollectionPage, Link, Object) and attempt each distinct schema exactly once.
- Return all successful interpretations in tag order; a failing kind only
  contributes its ExtractError as a diagnostic.
- Fall back to GenericObject when nothing was extracted.

Failure semantics
- Only a non-mapping top-level value is fatal (NotAnObject). Everything else
  is reported through DispatchResult.diagnostics.

Examples
--------
>>> from fedimodel.dispatch import dispatch
>>> from fedimodel.schema import Actor
>>> result = dispatch({"type": ["Person", "Activity-ish-unknown-tag"], "id": "https://example.org/alice"})
>>> [type(e).__name__ for e in result.entities]
['Actor']
>>> [type(d).__name__ for d in result.diagnostics]
['UnrecognizedKind']
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Final, TypeVar

from .config import ParseSettings
from .errors import ExtractError, FediModelError, FieldTypeError, MissingFieldError, NotAnObject, UnrecognizedKind
from .schema import (
    Activity,
    Actor,
    Collection,
    CollectionPage,
    Entity,
    EntityKindSet,
    Extraction,
    GenericObject,
    Link,
    Object,
    WireModel,
)
from .serde import dumps, parse
from .typing import JsonDict
from .values import ExtractionContext, SingleOrMany, as_single_or_many, read_str
from .vocabulary import KindFamily, kind_family

__all__ = [
    "EntityKindSet",
    "DispatchResult",
    "schema_for_family",
    "interpret",
    "dispatch",
    "load",
    "extract",
    "serialize",
    "serialize_text",
]

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=WireModel)
E = TypeVar("E", bound=Entity)

_FAMILY_SCHEMAS: Final[dict[KindFamily, type[Entity]]] = {
    KindFamily.ACTIVITY: Activity,
    KindFamily.ACTOR: Actor,
    KindFamily.COLLECTION: Collection,
    KindFamily.COLLECTION_PAGE: CollectionPage,
    KindFamily.LINK: Link,
    KindFamily.OBJECT: Object,
}


def schema_for_family(family: KindFamily) -> type[Entity]:
    """Entity schema used for a kind family."""
    return _FAMILY_SCHEMAS[family]


def _read_tags(payload: Mapping[str, Any], ctx: ExtractionContext) -> tuple[str, ...]:
    with ctx.field("type"):
        if "type" not in payload:
            ctx.note(MissingFieldError(ctx.location))
            return ()
        mark = ctx.checkpoint()
        try:
            tags = as_single_or_many(payload["type"], read_str, ctx)
        except FieldTypeError as exc:
            ctx.rollback(mark)
            ctx.note(exc)
            return ()
    return tags.items if isinstance(tags, SingleOrMany) else ()


def interpret(payload: Any, ctx: ExtractionContext) -> EntityKindSet:
    """
    Dispatch one mapping under an existing extraction context.

    Used for the top-level payload and for every polymorphic nested field
    (``Activity.object``, ``Collection.items``, ...), so nested diagnostics
    carry the field path.

    Args:
        payload (Any): Candidate entity mapping.
        ctx (ExtractionContext): Context of the running extraction.

    Returns:
        EntityKindSet: At least one interpretation (GenericObject as fallback).

    Raises:
        FieldTypeError: If `payload` is not a mapping.
    """
    if not isinstance(payload, Mapping):
        raise FieldTypeError(ctx.location or "<payload>", "JSON object")

    tags = _read_tags(payload, ctx)
    entities: list[Entity] = []
    attempted: set[type[Entity]] = set()

    for tag in tags:
        family = kind_family(tag)
        if family is None:
            logger.debug("unrecognized kind tag %r at %r", tag, ctx.location)
            ctx.note(UnrecognizedKind(tag, ctx.location))
            continue
        schema = _FAMILY_SCHEMAS[family]
        if schema in attempted:
            continue
        attempted.add(schema)
        mark = ctx.checkpoint()
        try:
            entities.append(schema._extract(payload, ctx))
        except ExtractError as exc:
            ctx.rollback(mark)
            logger.debug("kind %r failed as %s: %s", tag, schema.__name__, exc)
            ctx.note(exc)

    if not entities:
        if not tags:
            ctx.note(UnrecognizedKind(None, ctx.location))
        entities.append(GenericObject._extract(payload, ctx))

    return EntityKindSet(tuple(entities))


def _unique(diagnostics: list[FediModelError]) -> tuple[FediModelError, ...]:
    # Sibling interpretations read the same fields and may report the same problem.
    seen: set[tuple[type, str]] = set()
    out: list[FediModelError] = []
    for diag in diagnostics:
        key = (type(diag), str(diag))
        if key in seen:
            continue
        seen.add(key)
        out.append(diag)
    return tuple(out)


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """
    Outcome of `dispatch`.

    Attributes:
        interpretations (EntityKindSet): Successful typed interpretations, in tag order.
        diagnostics (tuple[FediModelError, ...]): Non-fatal problems, in discovery order,
            without duplicates.
    """

    interpretations: EntityKindSet
    diagnostics: tuple[FediModelError, ...] = ()

    @property
    def entities(self) -> tuple[Entity, ...]:
        return self.interpretations.entities

    def get(self, schema: type[E]) -> E | None:
        return self.interpretations.get(schema)

    @property
    def unrecognized_tags(self) -> tuple[str, ...]:
        return tuple(
            d.tag for d in self.diagnostics if isinstance(d, UnrecognizedKind) and d.tag is not None and not d.field
        )

    @property
    def is_generic(self) -> bool:
        """True when the payload only yielded the GenericObject fallback."""
        return all(isinstance(e, GenericObject) for e in self.entities)


def dispatch(value: Any, settings: ParseSettings | None = None) -> DispatchResult:
    """
    Dispatch a parsed JSON value to its entity kinds.

    Args:
        value (Any): Generic JSON value (e.g. from `fedimodel.serde.parse`).
        settings (ParseSettings | None): Extraction policy (defaults when None).

    Returns:
        DispatchResult: Interpretations and diagnostics.

    Raises:
        NotAnObject: If `value` is not a mapping.
    """
    if not isinstance(value, Mapping):
        raise NotAnObject(type(value).__name__ if value is not None else "null")
    ctx = ExtractionContext(settings)
    interpretations = interpret(value, ctx)
    return DispatchResult(interpretations, _unique(ctx.diagnostics))


def load(text: str | bytes, settings: ParseSettings | None = None) -> DispatchResult:
    """
    Parse JSON text and dispatch it.

    Raises:
        PayloadSyntaxError: If `text` is not well-formed JSON or nests deeper
            than `settings.max_nesting`.
        NotAnObject: If the top-level value is not an object.
    """
    max_nesting = (settings or ParseSettings()).max_nesting
    return dispatch(parse(text, max_nesting), settings)


def extract(schema: type[M], value: Any, settings: ParseSettings | None = None) -> Extraction[M]:
    """Extract one specific schema, bypassing kind dispatch."""
    return schema.extract(value, settings)


def serialize(entity: WireModel | EntityKindSet) -> JsonDict:
    """Re-emit an entity (or interpretation set) as a JSON mapping."""
    return entity.to_payload()


def serialize_text(entity: WireModel | EntityKindSet, indent: int | None = None) -> str:
    """Re-emit an entity as JSON text."""
    return dumps(entity, indent=indent)
