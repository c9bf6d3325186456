"""
Pydantic v2 models for ActivityPub entities, with tolerant extraction from
generic JSON values and lossless-as-possible re-emission.

Responsibilities
- Define the canonical immutable models: Link, Object (and GenericObject),
  Actor, Activity, Collection, CollectionPage, plus the auxiliary value models
  Image, Tag, Attachment, PublicKey and Endpoints.
- Declare, per model, how every field is read from the wire (`__wire__` tables
  of `Wire` entries) so extraction and re-serialization stay declarative.
- Enforce the tolerant extraction policy:
    * required field missing -> MissingFieldError (fatal for this schema only)
    * required field malformed -> FieldTypeError (fatal for this schema only)
    * optional field missing -> UNSET; JSON null -> None
    * optional field malformed -> UNSET plus a FieldTypeError diagnostic; the
      raw value is kept in extra_fields (ParseSettings.preserve_malformed)
    * unknown keys -> extra_fields, verbatim
- Hold EntityKindSet, the ordered set of interpretations of one payload.

Style
- Zero-IO (stdlib + pydantic only).
- Models are frozen; consumers copy-and-modify (``model_copy(update=...)``).
- Polymorphic nested fields (Activity.object, Collection.items, ...) are
  dispatched with fedimodel.dispatch.interpret.

References
- values: src/fedimodel/values.py (shape adapters and readers)
- dispatch: src/fedimodel/dispatch.py (kind tags -> schemas)
- tests: tests/test_schema_*.py
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime
from functools import cmp_to_key
from typing import Any, ClassVar, Generic, Self, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .config import ParseSettings
from .constants import SECURITY_CONTEXT
from .context import context_has_definition, context_matches_url
from .errors import ExtractError, FediModelError, FieldTypeError, MissingFieldError
from .typing import JsonDict
from .values import (
    UNSET,
    Embedded,
    EmbeddedOrReference,
    ExtractionContext,
    FrozenDict,
    Reader,
    Reference,
    SingleOrMany,
    Unset,
    as_single_or_many,
    embedded_or_reference,
    freeze_json,
    read_bool,
    read_context_item,
    read_datetime,
    read_int,
    read_language_map,
    read_str,
    thaw_json,
    to_wire,
)
from .vocabulary import EntityKind, entity_kind_from_value

__all__ = [
    "Wire",
    "Extraction",
    "WireModel",
    "Entity",
    "Link",
    "Image",
    "Tag",
    "Attachment",
    "PublicKey",
    "Endpoints",
    "Object",
    "GenericObject",
    "Actor",
    "Activity",
    "Collection",
    "CollectionPage",
    "EntityKindSet",
]

logger = logging.getLogger(__name__)

M = TypeVar("M", bound="WireModel")
E = TypeVar("E", bound="Entity")


@dataclass(frozen=True, slots=True)
class Wire:
    """
    How one model field is read from, and written to, the wire.

    Attributes:
        key (str): JSON property name (e.g. ``"attributedTo"``).
        reader (Reader): Reader for one value (one element when `many`).
        many (bool): Route the value through `as_single_or_many`.
        required (bool): Missing or malformed is fatal for the schema.
    """

    key: str
    reader: Reader[Any]
    many: bool = False
    required: bool = False

    def read(self, value: Any, ctx: ExtractionContext) -> Any:
        if self.many:
            return as_single_or_many(value, self.reader, ctx)
        return self.reader(value, ctx)


@dataclass(frozen=True, slots=True)
class Extraction(Generic[M]):
    """
    Result of one extraction call.

    Attributes:
        entity (M): The extracted, immutable model.
        diagnostics (tuple): Non-fatal problems (FieldTypeError, MissingFieldError
            inside nested values, UnrecognizedKind), in discovery order.
    """

    entity: M
    diagnostics: tuple[FediModelError, ...] = ()


# ============================================================================
# Base models
# ============================================================================


class WireModel(BaseModel):
    """
    Base for every model extracted from a JSON mapping.

    Attributes:
        extra_fields (FrozenDict): Keys this schema does not model (and,
            by default, the raw values of malformed optional fields), kept
            verbatim for re-emission.

    Notes:
        Raw JSON held by a model (extra_fields, language maps, ``@context``
        terms) is frozen, so models are deeply immutable and hashable.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    __wire__: ClassVar[dict[str, Wire]] = {}

    extra_fields: FrozenDict = Field(default_factory=FrozenDict)

    @classmethod
    def wire_fields(cls) -> dict[str, Wire]:
        """Wire table of this model, parents first; subclasses may override entries."""
        merged: dict[str, Wire] = {}
        for klass in reversed(cls.__mro__):
            merged.update(vars(klass).get("__wire__", {}))
        return merged

    @classmethod
    def extract(cls, payload: Any, settings: ParseSettings | None = None) -> Extraction[Self]:
        """
        Extract this schema from a generic JSON value.

        Args:
            payload (Any): Parsed JSON value; must be a mapping.
            settings (ParseSettings | None): Extraction policy (defaults when None).

        Returns:
            Extraction[Self]: The entity and the non-fatal diagnostics.

        Raises:
            MissingFieldError: If a required field is absent.
            FieldTypeError: If a required field is malformed or `payload` is not a mapping.
        """
        ctx = ExtractionContext(settings)
        entity = cls._extract(payload, ctx)
        return Extraction(entity, tuple(ctx.diagnostics))

    @classmethod
    def from_payload(cls, payload: Any, settings: ParseSettings | None = None) -> Self:
        """Like `extract`, returning only the entity."""
        return cls.extract(payload, settings).entity

    @classmethod
    def _extract(cls, payload: Any, ctx: ExtractionContext) -> Self:
        if not isinstance(payload, Mapping):
            raise FieldTypeError(ctx.location or "<payload>", "JSON object")

        wires = cls.wire_fields()
        known = {wire.key for wire in wires.values()}
        malformed: set[str] = set()
        values: dict[str, Any] = {}

        for attr, wire in wires.items():
            raw = payload.get(wire.key, UNSET)
            with ctx.field(wire.key):
                if raw is UNSET:
                    if wire.required:
                        raise MissingFieldError(ctx.location)
                    continue
                if raw is None and not wire.required:
                    values[attr] = None
                    continue
                mark = ctx.checkpoint()
                try:
                    values[attr] = wire.read(raw, ctx)
                except ExtractError as exc:
                    if wire.required:
                        raise
                    ctx.rollback(mark)
                    ctx.note(exc)
                    if ctx.settings.preserve_malformed:
                        malformed.add(wire.key)

        values["extra_fields"] = FrozenDict(
            (key, freeze_json(raw))
            for key, raw in payload.items()
            if key not in known or key in malformed
        )
        return cls(**values)

    def to_payload(self) -> JsonDict:
        """
        Re-emit as a JSON mapping (inverse of extraction).

        Known fields come first in declaration order (UNSET skipped, null kept,
        single/many shape as observed), followed by extra_fields.
        """
        out: JsonDict = {}
        for attr, wire in self.wire_fields().items():
            value = getattr(self, attr)
            if value is UNSET:
                continue
            out[wire.key] = to_wire(value)
        for key, raw in self.extra_fields.items():
            out.setdefault(key, thaw_json(raw))
        return out

    @property
    def kind_tags(self) -> tuple[str, ...]:
        """Kind tags in source order (empty when ``type`` is absent, null or malformed)."""
        kinds = getattr(self, "kinds", UNSET)
        return kinds.items if isinstance(kinds, SingleOrMany) else ()

    @property
    def recognized_kinds(self) -> tuple[EntityKind, ...]:
        """Kind tags that belong to the modeled vocabulary."""
        found = (entity_kind_from_value(tag) for tag in self.kind_tags)
        return tuple(kind for kind in found if kind is not None)

    @property
    def identifier(self) -> str | None:
        return None


def _read_any(value: Any, ctx: ExtractionContext) -> EntityKindSet:
    from .dispatch import interpret  # dispatch imports this module

    return interpret(value, ctx)


def _read_link(value: Any, ctx: ExtractionContext) -> Link:
    return Link._extract(value, ctx)


def _read_actor(value: Any, ctx: ExtractionContext) -> Actor:
    return Actor._extract(value, ctx)


def _read_image(value: Any, ctx: ExtractionContext) -> Image:
    return Image._extract(value, ctx)


def _read_tag(value: Any, ctx: ExtractionContext) -> Tag:
    return Tag._extract(value, ctx)


def _read_attachment(value: Any, ctx: ExtractionContext) -> Attachment:
    return Attachment._extract(value, ctx)


def _read_public_key(value: Any, ctx: ExtractionContext) -> PublicKey:
    return PublicKey._extract(value, ctx)


def _read_endpoints(value: Any, ctx: ExtractionContext) -> Endpoints:
    with ctx.nested():
        return Endpoints._extract(value, ctx)


def _read_nested_public_key(value: Any, ctx: ExtractionContext) -> PublicKey:
    with ctx.nested():
        return _read_public_key(value, ctx)


_any_ref = embedded_or_reference(_read_any)
_link_ref = embedded_or_reference(_read_link)
_actor_ref = embedded_or_reference(_read_actor)
_image_ref = embedded_or_reference(_read_image)


class Entity(WireModel):
    """
    Base for the dispatchable entity kinds (Link and the Object family).

    Attributes:
        kinds (SingleOrMany[str] | Unset): The ``type`` discriminator, as sent.
    """

    kinds: SingleOrMany[str] | Unset = UNSET


# ============================================================================
# Link and auxiliary values
# ============================================================================


class Link(Entity):
    """
    Qualified reference to a resource (``Link``, ``Mention``, ``Hashtag``).

    Attributes:
        href (str): Target identifier (required).
        media_type (str | None | Unset): ``mediaType``.
        name (str | None | Unset): Display text.
        name_map (FrozenDict | None | Unset): ``nameMap``.
        rel (SingleOrMany[str] | None | Unset): Relation types.
        hreflang (str | None | Unset): Language of the target.
        width (int | None | Unset): Width hint in pixels.
        height (int | None | Unset): Height hint in pixels.

    Examples:
        >>> from fedimodel.schema import Link
        >>> link = Link.from_payload({"type": "Mention", "href": "https://example.org/users/bob", "name": "@bob"})
        >>> link.identifier
        'https://example.org/users/bob'
    """

    __wire__: ClassVar[dict[str, Wire]] = {
        "kinds": Wire("type", read_str, many=True, required=True),
        "href": Wire("href", read_str, required=True),
        "media_type": Wire("mediaType", read_str),
        "name": Wire("name", read_str),
        "name_map": Wire("nameMap", read_language_map),
        "rel": Wire("rel", read_str, many=True),
        "hreflang": Wire("hreflang", read_str),
        "width": Wire("width", read_int),
        "height": Wire("height", read_int),
    }

    href: str
    media_type: str | None | Unset = UNSET
    name: str | None | Unset = UNSET
    name_map: FrozenDict | None | Unset = UNSET
    rel: SingleOrMany[str] | None | Unset = UNSET
    hreflang: str | None | Unset = UNSET
    width: int | None | Unset = UNSET
    height: int | None | Unset = UNSET

    @property
    def identifier(self) -> str:
        return self.href


def _compare_size(a: Image, b: Image) -> int:
    # Larger first; width wins over height when both images declare it.
    if isinstance(a.width, int) and isinstance(b.width, int):
        return b.width - a.width
    if isinstance(a.height, int) and isinstance(b.height, int):
        return b.height - a.height
    return 0


class Image(WireModel):
    """
    Image description used by ``icon``/``image`` properties.

    Not a dispatch target: producers often omit ``type`` here, so it is optional.

    Attributes:
        kinds (SingleOrMany[str] | None | Unset): ``type`` when present.
        url (SingleOrMany[EmbeddedOrReference[Link]] | None | Unset): Image location(s).
        name (str | None | Unset): Short description.
        summary (str | None | Unset): Longer description.
        media_type (str | None | Unset): ``mediaType``, e.g. ``image/png``.
        sensitive (bool | None | Unset): Sensitive-content flag.
        width (int | None | Unset): Width in pixels.
        height (int | None | Unset): Height in pixels.
    """

    __wire__: ClassVar[dict[str, Wire]] = {
        "kinds": Wire("type", read_str, many=True),
        "url": Wire("url", _link_ref, many=True),
        "name": Wire("name", read_str),
        "summary": Wire("summary", read_str),
        "media_type": Wire("mediaType", read_str),
        "sensitive": Wire("sensitive", read_bool),
        "width": Wire("width", read_int),
        "height": Wire("height", read_int),
    }

    kinds: SingleOrMany[str] | None | Unset = UNSET
    url: SingleOrMany[EmbeddedOrReference[Link]] | None | Unset = UNSET
    name: str | None | Unset = UNSET
    summary: str | None | Unset = UNSET
    media_type: str | None | Unset = UNSET
    sensitive: bool | None | Unset = UNSET
    width: int | None | Unset = UNSET
    height: int | None | Unset = UNSET

    @property
    def image_url(self) -> str | None:
        if not isinstance(self.url, SingleOrMany):
            return None
        for ref in self.url:
            if ref.identifier:
                return ref.identifier
        return None

    @property
    def identifier(self) -> str | None:
        return self.image_url

    @staticmethod
    def largest(images: Iterable[EmbeddedOrReference[Image]] | Unset | None) -> Image | None:
        """
        Pick the largest image among `images`.

        Bare URL references count as images without size. Images are ranked
        by width when both sides declare one, otherwise by height; ties keep
        source order.

        Returns:
            Image | None: The largest image, or None if there is none.
        """
        if images is None or images is UNSET:
            return None
        candidates: list[Image] = []
        for ref in images:  # type: ignore[union-attr]
            if isinstance(ref, Embedded):
                candidates.append(ref.value)
            elif isinstance(ref, Reference):
                candidates.append(Image(url=SingleOrMany.one(Reference(ref.id))))
        if not candidates:
            return None
        return sorted(candidates, key=cmp_to_key(_compare_size))[0]


class Tag(WireModel):
    """
    Entry of an object's ``tag`` property: hashtags, mentions, custom emoji.

    Attributes:
        kinds (SingleOrMany[str] | None | Unset): ``type`` (Hashtag, Mention, Emoji, ...).
        id (str | None | Unset): Identifier (Emoji).
        href (str | None | Unset): Link target (Hashtag, Mention).
        name (str | None | Unset): Display name, e.g. ``#python`` or ``:blobcat:``.
        icon (SingleOrMany[EmbeddedOrReference[Image]] | None | Unset): Emoji image.
    """

    __wire__: ClassVar[dict[str, Wire]] = {
        "kinds": Wire("type", read_str, many=True),
        "id": Wire("id", read_str),
        "href": Wire("href", read_str),
        "name": Wire("name", read_str),
        "icon": Wire("icon", _image_ref, many=True),
    }

    kinds: SingleOrMany[str] | None | Unset = UNSET
    id: str | None | Unset = UNSET
    href: str | None | Unset = UNSET
    name: str | None | Unset = UNSET
    icon: SingleOrMany[EmbeddedOrReference[Image]] | None | Unset = UNSET

    @property
    def identifier(self) -> str | None:
        if isinstance(self.id, str):
            return self.id
        return self.href if isinstance(self.href, str) else None


class Attachment(WireModel):
    """
    Entry of an ``attachment`` property: media documents or profile ``PropertyValue`` pairs.

    Producers use ``content`` or ``value`` for the text and ``url`` or ``href``
    for the target; both spellings are kept as sent.
    """

    __wire__: ClassVar[dict[str, Wire]] = {
        "kinds": Wire("type", read_str, many=True),
        "name": Wire("name", read_str),
        "content": Wire("content", read_str),
        "value": Wire("value", read_str),
        "url": Wire("url", _link_ref, many=True),
        "href": Wire("href", read_str),
        "media_type": Wire("mediaType", read_str),
    }

    kinds: SingleOrMany[str] | None | Unset = UNSET
    name: str | None | Unset = UNSET
    content: str | None | Unset = UNSET
    value: str | None | Unset = UNSET
    url: SingleOrMany[EmbeddedOrReference[Link]] | None | Unset = UNSET
    href: str | None | Unset = UNSET
    media_type: str | None | Unset = UNSET

    @property
    def text(self) -> str | None:
        if isinstance(self.content, str):
            return self.content
        return self.value if isinstance(self.value, str) else None

    @property
    def link(self) -> str | None:
        if isinstance(self.url, SingleOrMany):
            for ref in self.url:
                if ref.identifier:
                    return ref.identifier
        return self.href if isinstance(self.href, str) else None

    @property
    def identifier(self) -> str | None:
        return self.link

    def is_property_value(self) -> bool:
        return EntityKind.PROPERTY_VALUE.value in self.kind_tags


class PublicKey(WireModel):
    """Actor signing key; ``publicKeyPem`` is required."""

    __wire__: ClassVar[dict[str, Wire]] = {
        "id": Wire("id", read_str),
        "owner": Wire("owner", read_str),
        "public_key_pem": Wire("publicKeyPem", read_str, required=True),
    }

    id: str | None | Unset = UNSET
    owner: str | None | Unset = UNSET
    public_key_pem: str

    @property
    def identifier(self) -> str | None:
        return self.id if isinstance(self.id, str) else None


class Endpoints(WireModel):
    """Actor ``endpoints`` map; only ``sharedInbox`` is modeled."""

    __wire__: ClassVar[dict[str, Wire]] = {
        "shared_inbox": Wire("sharedInbox", read_str),
    }

    shared_inbox: str | None | Unset = UNSET


# ============================================================================
# Object family
# ============================================================================

_PERSON_LIKE: frozenset[str] = frozenset({EntityKind.PERSON.value, EntityKind.SERVICE.value})


def _reference_ids(refs: Any) -> tuple[str, ...]:
    if not isinstance(refs, SingleOrMany):
        return ()
    return tuple(ref.identifier for ref in refs if ref.identifier)


def _primary_actor_id(refs: Any) -> str | None:
    # Some producers (PeerTube) attribute to both a Person and its Group; prefer the Person.
    if not isinstance(refs, SingleOrMany) or not refs:
        return None
    for ref in refs:
        if isinstance(ref, Embedded) and _PERSON_LIKE.intersection(ref.value.kind_tags):
            if ref.identifier:
                return ref.identifier
    return refs[0].identifier


def _unchanged(text: str) -> str:
    return text


class Object(Entity):
    """
    ActivityStreams Object: the base of content, actors, activities and collections.

    Attributes:
        context (SingleOrMany[str | FrozenDict] | None | Unset): ``@context`` entries.
        id (str | None | Unset): Identifier; anonymous embedded objects have none.
        kinds (SingleOrMany[str]): ``type`` (required for extraction).
        name, summary, content (str | None | Unset): Natural-language values.
        name_map, summary_map, content_map (FrozenDict | None | Unset):
            Language-tagged variants (``nameMap``, ``summaryMap``, ``contentMap``).
        media_type (str | None | Unset): ``mediaType``.
        published, updated (datetime | None | Unset): Timestamps.
        attributed_to (SingleOrMany[EmbeddedOrReference[Actor]] | None | Unset): Authors.
        in_reply_to (EmbeddedOrReference[EntityKindSet] | None | Unset): Parent object.
        to, cc, bto, bcc, audience (SingleOrMany[EmbeddedOrReference[EntityKindSet]] | None | Unset):
            Addressing.
        url (SingleOrMany[EmbeddedOrReference[Link]] | None | Unset): Human-facing location(s).
        tag (SingleOrMany[EmbeddedOrReference[Tag]] | None | Unset): Hashtags, mentions, emoji.
        attachment (SingleOrMany[EmbeddedOrReference[Attachment]] | None | Unset): Attachments.
        icon, image (SingleOrMany[EmbeddedOrReference[Image]] | None | Unset): Images.
        sensitive (bool | None | Unset): Sensitive-content flag.
        indexable, discoverable (bool | None | Unset): Indexing consent flags.
        searchable_by (SingleOrMany[str] | None | Unset): ``searchableBy`` scope.

    Notes:
        Absent fields are UNSET, explicit nulls are None; an absent content is
        not an empty content.

    Examples:
        >>> from fedimodel.schema import Object
        >>> from fedimodel.values import UNSET
        >>> result = Object.extract({"type": "Note", "content": 42})
        >>> result.entity.content is UNSET, len(result.diagnostics)
        (True, 1)
    """

    __wire__: ClassVar[dict[str, Wire]] = {
        "context": Wire("@context", read_context_item, many=True),
        "id": Wire("id", read_str),
        "kinds": Wire("type", read_str, many=True, required=True),
        "name": Wire("name", read_str),
        "name_map": Wire("nameMap", read_language_map),
        "summary": Wire("summary", read_str),
        "summary_map": Wire("summaryMap", read_language_map),
        "content": Wire("content", read_str),
        "content_map": Wire("contentMap", read_language_map),
        "media_type": Wire("mediaType", read_str),
        "published": Wire("published", read_datetime),
        "updated": Wire("updated", read_datetime),
        "attributed_to": Wire("attributedTo", _actor_ref, many=True),
        "in_reply_to": Wire("inReplyTo", _any_ref),
        "to": Wire("to", _any_ref, many=True),
        "cc": Wire("cc", _any_ref, many=True),
        "bto": Wire("bto", _any_ref, many=True),
        "bcc": Wire("bcc", _any_ref, many=True),
        "audience": Wire("audience", _any_ref, many=True),
        "url": Wire("url", _link_ref, many=True),
        "tag": Wire("tag", embedded_or_reference(_read_tag), many=True),
        "attachment": Wire("attachment", embedded_or_reference(_read_attachment), many=True),
        "icon": Wire("icon", _image_ref, many=True),
        "image": Wire("image", _image_ref, many=True),
        "sensitive": Wire("sensitive", read_bool),
        "indexable": Wire("indexable", read_bool),
        "discoverable": Wire("discoverable", read_bool),
        "searchable_by": Wire("searchableBy", read_str, many=True),
    }

    context: SingleOrMany[str | FrozenDict] | None | Unset = UNSET
    id: str | None | Unset = UNSET
    name: str | None | Unset = UNSET
    name_map: FrozenDict | None | Unset = UNSET
    summary: str | None | Unset = UNSET
    summary_map: FrozenDict | None | Unset = UNSET
    content: str | None | Unset = UNSET
    content_map: FrozenDict | None | Unset = UNSET
    media_type: str | None | Unset = UNSET
    published: datetime | None | Unset = UNSET
    updated: datetime | None | Unset = UNSET
    attributed_to: SingleOrMany[EmbeddedOrReference[Actor]] | None | Unset = UNSET
    in_reply_to: EmbeddedOrReference[EntityKindSet] | None | Unset = UNSET
    to: SingleOrMany[EmbeddedOrReference[EntityKindSet]] | None | Unset = UNSET
    cc: SingleOrMany[EmbeddedOrReference[EntityKindSet]] | None | Unset = UNSET
    bto: SingleOrMany[EmbeddedOrReference[EntityKindSet]] | None | Unset = UNSET
    bcc: SingleOrMany[EmbeddedOrReference[EntityKindSet]] | None | Unset = UNSET
    audience: SingleOrMany[EmbeddedOrReference[EntityKindSet]] | None | Unset = UNSET
    url: SingleOrMany[EmbeddedOrReference[Link]] | None | Unset = UNSET
    tag: SingleOrMany[EmbeddedOrReference[Tag]] | None | Unset = UNSET
    attachment: SingleOrMany[EmbeddedOrReference[Attachment]] | None | Unset = UNSET
    icon: SingleOrMany[EmbeddedOrReference[Image]] | None | Unset = UNSET
    image: SingleOrMany[EmbeddedOrReference[Image]] | None | Unset = UNSET
    sensitive: bool | None | Unset = UNSET
    indexable: bool | None | Unset = UNSET
    discoverable: bool | None | Unset = UNSET
    searchable_by: SingleOrMany[str] | None | Unset = UNSET

    @property
    def identifier(self) -> str | None:
        return self.id if isinstance(self.id, str) else None

    def object_url(self) -> str | None:
        """First URL of the ``url`` property (bare or from an embedded Link)."""
        return next(iter(_reference_ids(self.url)), None)

    def attributed_actor_ids(self) -> tuple[str, ...]:
        return _reference_ids(self.attributed_to)

    def attributed_actor_id(self) -> str | None:
        """Author id: the first Person/Service-like embedded actor, else the first entry."""
        return _primary_actor_id(self.attributed_to)

    def uses_context(self, url: str) -> bool:
        return context_matches_url(self.context, url)

    def defines_in_context(self, name: str) -> bool:
        return context_has_definition(self.context, name)

    def content_by_language(self, cleaner: Callable[[str], str] | None = None) -> dict[str, str] | None:
        """
        Language -> text mapping for indexing or display.

        ``contentMap`` wins when non-empty; otherwise ``content`` (or ``name``)
        is returned under the ``"default"`` key. A ``summary`` is prepended as
        ``<p>summary</p>\\n`` to every text.

        Args:
            cleaner (Callable[[str], str] | None): Applied to every returned text
                (e.g. HTML sanitizing).

        Returns:
            dict[str, str] | None: None when the object carries no text at all.
        """
        clean = cleaner or _unchanged
        summary = self.summary if isinstance(self.summary, str) else None

        if isinstance(self.content_map, Mapping) and self.content_map:
            return {
                lang: clean(text if summary is None else f"<p>{summary}</p>\n{text}")
                for lang, text in self.content_map.items()
            }

        if isinstance(self.content, str):
            content: str | None = self.content
        elif isinstance(self.name, str):
            content = self.name
        else:
            content = None

        if content is not None and summary is not None:
            return {"default": clean(f"<p>{summary}</p>\n{content}")}
        if summary is not None:
            return {"default": clean(summary)}
        if content is not None:
            return {"default": clean(content)}
        return None


class GenericObject(Object):
    """
    Fallback interpretation for payloads with no recognized kind tag.

    Same fields as Object, but ``type`` is optional so that any JSON object
    can be represented.
    """

    __wire__: ClassVar[dict[str, Wire]] = {
        "kinds": Wire("type", read_str, many=True),
    }


class Actor(Object):
    """
    Actor (Person, Service, Group, Organization, Application).

    Attributes:
        inbox, outbox (str | None | Unset): Endpoint identifiers.
        followers, following, liked (EmbeddedOrReference[EntityKindSet] | None | Unset):
            Collection references.
        preferred_username (str | None | Unset): ``preferredUsername``.
        endpoints (Endpoints | None | Unset): Additional endpoints (``sharedInbox``).
        public_key (SingleOrMany[PublicKey] | None | Unset): ``publicKey``.
        manually_approves_followers (bool | None | Unset): Locked account flag.
    """

    __wire__: ClassVar[dict[str, Wire]] = {
        "inbox": Wire("inbox", read_str),
        "outbox": Wire("outbox", read_str),
        "followers": Wire("followers", _any_ref),
        "following": Wire("following", _any_ref),
        "liked": Wire("liked", _any_ref),
        "preferred_username": Wire("preferredUsername", read_str),
        "endpoints": Wire("endpoints", _read_endpoints),
        "public_key": Wire("publicKey", _read_nested_public_key, many=True),
        "manually_approves_followers": Wire("manuallyApprovesFollowers", read_bool),
    }

    inbox: str | None | Unset = UNSET
    outbox: str | None | Unset = UNSET
    followers: EmbeddedOrReference[EntityKindSet] | None | Unset = UNSET
    following: EmbeddedOrReference[EntityKindSet] | None | Unset = UNSET
    liked: EmbeddedOrReference[EntityKindSet] | None | Unset = UNSET
    preferred_username: str | None | Unset = UNSET
    endpoints: Endpoints | None | Unset = UNSET
    public_key: SingleOrMany[PublicKey] | None | Unset = UNSET
    manually_approves_followers: bool | None | Unset = UNSET

    def is_person(self) -> bool:
        return EntityKind.PERSON.value in self.kind_tags

    @property
    def shared_inbox(self) -> str | None:
        if isinstance(self.endpoints, Endpoints) and isinstance(self.endpoints.shared_inbox, str):
            return self.endpoints.shared_inbox
        return None

    @property
    def public_keys(self) -> tuple[PublicKey, ...]:
        return self.public_key.items if isinstance(self.public_key, SingleOrMany) else ()

    def has_valid_security_context(self) -> bool:
        """
        False when the actor declares the security vocabulary but publishes no key.

        Actors without the security context are accepted as-is.
        """
        if not self.uses_context(SECURITY_CONTEXT):
            return True
        if not self.public_keys:
            logger.warning(
                "%s uses context %s but defines no publicKey", self.identifier, SECURITY_CONTEXT
            )
            return False
        return True


class Activity(Object):
    """
    Activity (Create, Follow, Announce, Undo, ...).

    Attributes:
        actor (SingleOrMany[EmbeddedOrReference[Actor]] | None | Unset): Performer(s).
        object (EmbeddedOrReference[EntityKindSet] | None | Unset): The thing acted
            upon, dispatched polymorphically; absent for intransitive activities.
        target, origin, result, instrument (EmbeddedOrReference[EntityKindSet] | None | Unset).
    """

    __wire__: ClassVar[dict[str, Wire]] = {
        "actor": Wire("actor", _actor_ref, many=True),
        "object": Wire("object", _any_ref),
        "target": Wire("target", _any_ref),
        "origin": Wire("origin", _any_ref),
        "result": Wire("result", _any_ref),
        "instrument": Wire("instrument", _any_ref),
    }

    actor: SingleOrMany[EmbeddedOrReference[Actor]] | None | Unset = UNSET
    object: EmbeddedOrReference[EntityKindSet] | None | Unset = UNSET
    target: EmbeddedOrReference[EntityKindSet] | None | Unset = UNSET
    origin: EmbeddedOrReference[EntityKindSet] | None | Unset = UNSET
    result: EmbeddedOrReference[EntityKindSet] | None | Unset = UNSET
    instrument: EmbeddedOrReference[EntityKindSet] | None | Unset = UNSET

    def actor_id(self) -> str | None:
        return _primary_actor_id(self.actor)

    def actor_ids(self) -> tuple[str, ...]:
        return _reference_ids(self.actor)

    def inner_object_kind(self) -> EntityKind | None:
        """First recognized kind of an embedded ``object``; None for references or unknown kinds."""
        if isinstance(self.object, Embedded):
            for tag in self.object.value.kind_tags:
                kind = entity_kind_from_value(tag)
                if kind is not None:
                    return kind
        return None

    def inner_object_id(self) -> str | None:
        if isinstance(self.object, EmbeddedOrReference):
            return self.object.identifier
        return None


class Collection(Object):
    """
    Collection / OrderedCollection.

    Attributes:
        total_items (int | None | Unset): ``totalItems``.
        items, ordered_items (SingleOrMany[EmbeddedOrReference[EntityKindSet]] | None | Unset):
            ``items`` / ``orderedItems``, kept apart so re-emission uses the sender's key.
        first, last, current (EmbeddedOrReference[EntityKindSet] | None | Unset): Pages.
    """

    __wire__: ClassVar[dict[str, Wire]] = {
        "total_items": Wire("totalItems", read_int),
        "items": Wire("items", _any_ref, many=True),
        "ordered_items": Wire("orderedItems", _any_ref, many=True),
        "first": Wire("first", _any_ref),
        "last": Wire("last", _any_ref),
        "current": Wire("current", _any_ref),
    }

    total_items: int | None | Unset = UNSET
    items: SingleOrMany[EmbeddedOrReference[EntityKindSet]] | None | Unset = UNSET
    ordered_items: SingleOrMany[EmbeddedOrReference[EntityKindSet]] | None | Unset = UNSET
    first: EmbeddedOrReference[EntityKindSet] | None | Unset = UNSET
    last: EmbeddedOrReference[EntityKindSet] | None | Unset = UNSET
    current: EmbeddedOrReference[EntityKindSet] | None | Unset = UNSET

    @property
    def all_items(self) -> tuple[EmbeddedOrReference[EntityKindSet], ...]:
        """``items`` followed by ``orderedItems`` (producers send one or the other)."""
        out: list[EmbeddedOrReference[EntityKindSet]] = []
        for part in (self.items, self.ordered_items):
            if isinstance(part, SingleOrMany):
                out.extend(part)
        return tuple(out)


class CollectionPage(Collection):
    """CollectionPage / OrderedCollectionPage: adds ``next``, ``prev``, ``partOf``, ``startIndex``."""

    __wire__: ClassVar[dict[str, Wire]] = {
        "next": Wire("next", _any_ref),
        "prev": Wire("prev", _any_ref),
        "part_of": Wire("partOf", _any_ref),
        "start_index": Wire("startIndex", read_int),
    }

    next: EmbeddedOrReference[EntityKindSet] | None | Unset = UNSET
    prev: EmbeddedOrReference[EntityKindSet] | None | Unset = UNSET
    part_of: EmbeddedOrReference[EntityKindSet] | None | Unset = UNSET
    start_index: int | None | Unset = UNSET


# ============================================================================
# Interpretation sets
# ============================================================================


@dataclass(frozen=True, slots=True)
class EntityKindSet:
    """
    Every successful typed interpretation of one payload, in kind-tag order.

    A payload tagged ``["Person", "Create"]`` yields both an Actor and an
    Activity; callers select by capability (`get(Actor)`) instead of the
    library picking a winner. Every interpretation re-emits the whole payload,
    so re-serialization uses the first one.

    Examples:
        >>> from fedimodel.dispatch import dispatch
        >>> from fedimodel.schema import Actor
        >>> kinds = dispatch({"type": "Person", "id": "https://example.org/alice"}).interpretations
        >>> kinds.get(Actor).identifier
        'https://example.org/alice'
    """

    entities: tuple[Entity, ...]

    def __post_init__(self) -> None:
        if not self.entities:
            raise ValueError("EntityKindSet requires at least one interpretation")

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.entities)

    def __len__(self) -> int:
        return len(self.entities)

    @property
    def first(self) -> Entity:
        return self.entities[0]

    def get(self, schema: type[E]) -> E | None:
        """First interpretation that is an instance of `schema` (subclasses included)."""
        for entity in self.entities:
            if isinstance(entity, schema):
                return entity
        return None

    def get_all(self, schema: type[E]) -> tuple[E, ...]:
        return tuple(entity for entity in self.entities if isinstance(entity, schema))

    def has(self, schema: type[Entity]) -> bool:
        return self.get(schema) is not None

    @property
    def kind_tags(self) -> tuple[str, ...]:
        return self.first.kind_tags

    @property
    def identifier(self) -> str | None:
        return self.first.identifier

    def to_payload(self) -> JsonDict:
        return self.first.to_payload()


for _model in (
    Link,
    Image,
    Tag,
    Attachment,
    PublicKey,
    Endpoints,
    Object,
    GenericObject,
    Actor,
    Activity,
    Collection,
    CollectionPage,
):
    _model.model_rebuild()
del _model
