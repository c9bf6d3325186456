"""
Search-indexing consent for actors and content.

Producers express consent in several overlapping ways: the ``indexable`` flag,
the older ``discoverable`` flag, a ``searchableBy`` audience, or an explicit
``fedineko:index`` PropertyValue on the actor profile. This module folds them
into one Discoverability verdict with the reason that decided it.

Precedence (actor)
1) ``fedineko:index`` PropertyValue attachment (``allow`` allows, anything else denies)
2) ``searchableBy`` listing a public address
3) no ``@context`` at all -> denied (DEFAULT)
4) ``indexable`` declared in the context -> its value (unset -> denied)
5) ``discoverable`` declared in the context -> its value (unset -> denied)
6) otherwise allowed (ASSUMED)

Precedence (content)
1) ``searchableBy`` listing a public address
2) ``indexable`` value
3) ``discoverable`` value
4) the caller's default

Examples
--------
>>> from fedimodel.discovery import content_opt_in_discoverability
>>> from fedimodel.schema import Object
>>> note = Object.from_payload({"type": "Note", "indexable": True})
>>> content_opt_in_discoverability(note).allowed
True
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .constants import FEDINEKO_INDEX_PROPERTY, FEDINEKO_PUBLIC_COLLECTION, PUBLIC_COLLECTION
from .schema import Actor, Attachment, Object
from .values import Embedded, SingleOrMany

__all__ = [
    "AllowReason",
    "DenyReason",
    "Discoverability",
    "is_public_searchable_by",
    "actor_discoverability",
    "content_discoverability",
    "content_opt_in_discoverability",
    "content_opt_out_discoverability",
]

logger = logging.getLogger(__name__)

_PUBLIC_ADDRESSES: frozenset[str] = frozenset({PUBLIC_COLLECTION, FEDINEKO_PUBLIC_COLLECTION})


class AllowReason(Enum):
    DISCOVERABLE = "discoverable"
    INDEXABLE = "indexable"
    FEDINEKO_PROPERTY = "fedineko_property"
    SEARCHABLE_BY = "searchable_by"
    ASSUMED = "assumed"


class DenyReason(Enum):
    DISCOVERABLE = "discoverable"
    INDEXABLE = "indexable"
    FEDINEKO_PROPERTY = "fedineko_property"
    OPTED_OUT = "opted_out"
    BAN = "ban"
    DEFAULT = "default"


@dataclass(frozen=True)
class Discoverability:
    """
    Indexing verdict.

    Attributes:
        allowed (bool): Whether indexing is allowed.
        reason (AllowReason | DenyReason): What decided the verdict.
        detail (str | None): Extra context, e.g. the matching ``searchableBy`` address.
    """

    allowed: bool
    reason: AllowReason | DenyReason
    detail: str | None = None

    @classmethod
    def allow(cls, reason: AllowReason, detail: str | None = None) -> Discoverability:
        return cls(True, reason, detail)

    @classmethod
    def deny(cls, reason: DenyReason, detail: str | None = None) -> Discoverability:
        return cls(False, reason, detail)


def is_public_searchable_by(addresses: Iterable[str] | SingleOrMany[str] | None) -> Discoverability | None:
    """
    Allowed(SEARCHABLE_BY) when a public address is listed, else None.

    Both the ActivityStreams public collection and the Fedineko indexing
    address count as public.
    """
    if not isinstance(addresses, (SingleOrMany, list, tuple, set, frozenset)):
        return None
    for address in addresses:
        if address in _PUBLIC_ADDRESSES:
            return Discoverability.allow(AllowReason.SEARCHABLE_BY, address)
    return None


def _index_property(actor: Actor) -> Discoverability | None:
    if not isinstance(actor.attachment, SingleOrMany):
        return None
    for ref in actor.attachment:
        if not isinstance(ref, Embedded):
            continue
        att: Attachment = ref.value
        if not att.is_property_value() or att.name != FEDINEKO_INDEX_PROPERTY:
            continue
        value = att.text
        if value is None:
            continue
        if value == "allow":
            return Discoverability.allow(AllowReason.FEDINEKO_PROPERTY)
        return Discoverability.deny(DenyReason.FEDINEKO_PROPERTY, value)
    return None


def actor_discoverability(actor: Actor) -> Discoverability:
    """
    Whether content from `actor` may be indexed.

    Args:
        actor (Actor): Extracted actor profile.

    Returns:
        Discoverability: Verdict following the actor precedence in the module docs.
    """
    explicit = _index_property(actor)
    if explicit is not None:
        return explicit

    searchable = is_public_searchable_by(actor.searchable_by)
    if searchable is not None:
        return searchable

    if not isinstance(actor.context, SingleOrMany):
        logger.warning("%s is not discoverable by default because it lacks @context", actor.identifier)
        return Discoverability.deny(DenyReason.DEFAULT)

    if actor.defines_in_context("indexable"):
        if isinstance(actor.indexable, bool):
            if actor.indexable:
                return Discoverability.allow(AllowReason.INDEXABLE)
            return Discoverability.deny(DenyReason.INDEXABLE)
        logger.warning("%s is not discoverable because 'indexable' is declared but not set", actor.identifier)
        return Discoverability.deny(DenyReason.INDEXABLE)

    if actor.defines_in_context("discoverable"):
        if isinstance(actor.discoverable, bool):
            if actor.discoverable:
                return Discoverability.allow(AllowReason.DISCOVERABLE)
            return Discoverability.deny(DenyReason.DISCOVERABLE)
        logger.warning("%s is not discoverable because 'discoverable' is declared but not set", actor.identifier)
        return Discoverability.deny(DenyReason.DISCOVERABLE)

    logger.warning("%s is assumed to be discoverable", actor.identifier)
    return Discoverability.allow(AllowReason.ASSUMED)


def content_discoverability(obj: Object, default: Discoverability) -> Discoverability:
    """Whether `obj` may be indexed; `default` applies when the object says nothing."""
    searchable = is_public_searchable_by(obj.searchable_by)
    if searchable is not None:
        return searchable
    if isinstance(obj.indexable, bool):
        if obj.indexable:
            return Discoverability.allow(AllowReason.INDEXABLE)
        return Discoverability.deny(DenyReason.INDEXABLE)
    if isinstance(obj.discoverable, bool):
        if obj.discoverable:
            return Discoverability.allow(AllowReason.DISCOVERABLE)
        return Discoverability.deny(DenyReason.DISCOVERABLE)
    return default


def content_opt_in_discoverability(obj: Object) -> Discoverability:
    """Opt-in policy: silence means denied(DEFAULT)."""
    return content_discoverability(obj, Discoverability.deny(DenyReason.DEFAULT))


def content_opt_out_discoverability(obj: Object) -> Discoverability:
    """Opt-out policy: silence means allowed(ASSUMED)."""
    return content_discoverability(obj, Discoverability.allow(AllowReason.ASSUMED))
