"""
Kind vocabulary: the closed set of entity kind tags the model recognizes.

Defines `EntityKind` (serialized values are the PascalCase wire tags) and the
kind families that Kind Dispatch maps onto entity schemas.

Responsibilities
- Enumerate the pragmatic subset of ActivityStreams/ActivityPub kind tags.
- Group tags into families (activity, actor, collection, collection page, link, object).
- Provide lookup helpers that never raise for unknown tags.

Design principles
-----------------
1) Closed vocabulary: unknown tags are not errors, they map to None and the
   caller decides (dispatch records an UnrecognizedKind diagnostic).
2) Family membership drives schema choice; a tag belongs to exactly one family.
3) `Question` is treated as content (polls), not as an intransitive activity,
   because that is how real producers use it.

Examples
--------
>>> from fedimodel.vocabulary import EntityKind, entity_kind_from_value, kind_family, KindFamily
>>> entity_kind_from_value("Person") == EntityKind.PERSON
True
>>> entity_kind_from_value("Activity-ish-unknown-tag") is None
True
>>> kind_family("OrderedCollectionPage") == KindFamily.COLLECTION_PAGE
True
"""

from __future__ import annotations

from enum import Enum
from typing import Final

__all__ = [
    "EntityKind",
    "KindFamily",
    "ACTIVITY_KINDS",
    "ACTOR_KINDS",
    "COLLECTION_KINDS",
    "COLLECTION_PAGE_KINDS",
    "LINK_KINDS",
    "OBJECT_KINDS",
    "SUPPORTED_CONTENT_KINDS",
    "entity_kind_from_value",
    "kind_family",
    "is_actor_kind",
    "is_supported_content_kind",
]


class EntityKind(Enum):
    """
    All kind tags the model recognizes.

    Serialized values appear in the ``type`` property of payloads.
    """

    # Activities
    ACTIVITY = "Activity"
    INTRANSITIVE_ACTIVITY = "IntransitiveActivity"
    ACCEPT = "Accept"
    ADD = "Add"
    ANNOUNCE = "Announce"
    BLOCK = "Block"
    CREATE = "Create"
    DELETE = "Delete"
    DISLIKE = "Dislike"
    FLAG = "Flag"
    FOLLOW = "Follow"
    LIKE = "Like"
    MOVE = "Move"
    REJECT = "Reject"
    REMOVE = "Remove"
    UNDO = "Undo"
    UPDATE = "Update"

    # Actors
    ACTOR = "Actor"
    APPLICATION = "Application"
    GROUP = "Group"
    ORGANIZATION = "Organization"
    PERSON = "Person"
    SERVICE = "Service"

    # Collections
    COLLECTION = "Collection"
    ORDERED_COLLECTION = "OrderedCollection"
    COLLECTION_PAGE = "CollectionPage"
    ORDERED_COLLECTION_PAGE = "OrderedCollectionPage"

    # Links
    LINK = "Link"
    MENTION = "Mention"
    HASHTAG = "Hashtag"

    # Content and other objects
    OBJECT = "Object"
    ARTICLE = "Article"
    AUDIO = "Audio"
    DOCUMENT = "Document"
    EVENT = "Event"
    IMAGE = "Image"
    MOVIE = "Movie"
    NOTE = "Note"
    PAGE = "Page"
    PLACE = "Place"
    POLL = "Poll"
    PROFILE = "Profile"
    QUESTION = "Question"
    TOMBSTONE = "Tombstone"
    VIDEO = "Video"

    # Tag-like objects
    EMOJI = "Emoji"
    TAG = "Tag"
    PROPERTY_VALUE = "PropertyValue"


class KindFamily(Enum):
    """Entity schema families a kind tag can dispatch to."""

    ACTIVITY = "activity"
    ACTOR = "actor"
    COLLECTION = "collection"
    COLLECTION_PAGE = "collection_page"
    LINK = "link"
    OBJECT = "object"


ACTIVITY_KINDS: Final[frozenset[EntityKind]] = frozenset(
    {
        EntityKind.ACTIVITY,
        EntityKind.INTRANSITIVE_ACTIVITY,
        EntityKind.ACCEPT,
        EntityKind.ADD,
        EntityKind.ANNOUNCE,
        EntityKind.BLOCK,
        EntityKind.CREATE,
        EntityKind.DELETE,
        EntityKind.DISLIKE,
        EntityKind.FLAG,
        EntityKind.FOLLOW,
        EntityKind.LIKE,
        EntityKind.MOVE,
        EntityKind.REJECT,
        EntityKind.REMOVE,
        EntityKind.UNDO,
        EntityKind.UPDATE,
    }
)

ACTOR_KINDS: Final[frozenset[EntityKind]] = frozenset(
    {
        EntityKind.ACTOR,
        EntityKind.APPLICATION,
        EntityKind.GROUP,
        EntityKind.ORGANIZATION,
        EntityKind.PERSON,
        EntityKind.SERVICE,
    }
)

COLLECTION_KINDS: Final[frozenset[EntityKind]] = frozenset(
    {EntityKind.COLLECTION, EntityKind.ORDERED_COLLECTION}
)

COLLECTION_PAGE_KINDS: Final[frozenset[EntityKind]] = frozenset(
    {EntityKind.COLLECTION_PAGE, EntityKind.ORDERED_COLLECTION_PAGE}
)

LINK_KINDS: Final[frozenset[EntityKind]] = frozenset(
    {EntityKind.LINK, EntityKind.MENTION, EntityKind.HASHTAG}
)

OBJECT_KINDS: Final[frozenset[EntityKind]] = frozenset(
    set(EntityKind)
    - ACTIVITY_KINDS
    - ACTOR_KINDS
    - COLLECTION_KINDS
    - COLLECTION_PAGE_KINDS
    - LINK_KINDS
)

# Kinds worth indexing as user content.
SUPPORTED_CONTENT_KINDS: Final[frozenset[EntityKind]] = frozenset(
    {EntityKind.NOTE, EntityKind.VIDEO, EntityKind.MOVIE, EntityKind.ARTICLE}
)

_BY_VALUE: Final[dict[str, EntityKind]] = {k.value: k for k in EntityKind}

_FAMILIES: Final[tuple[tuple[frozenset[EntityKind], KindFamily], ...]] = (
    (ACTIVITY_KINDS, KindFamily.ACTIVITY),
    (ACTOR_KINDS, KindFamily.ACTOR),
    (COLLECTION_KINDS, KindFamily.COLLECTION),
    (COLLECTION_PAGE_KINDS, KindFamily.COLLECTION_PAGE),
    (LINK_KINDS, KindFamily.LINK),
    (OBJECT_KINDS, KindFamily.OBJECT),
)


def entity_kind_from_value(value: str) -> EntityKind | None:
    """
    Look up a wire tag.

    Args:
        value (str): Tag as it appears in ``type`` (case-sensitive).

    Returns:
        EntityKind | None: The matching kind, or None when the tag is not modeled.
    """
    return _BY_VALUE.get(value)


def kind_family(value: str | EntityKind) -> KindFamily | None:
    """
    Family of a kind tag.

    Args:
        value (str | EntityKind): Wire tag or enum member.

    Returns:
        KindFamily | None: Family used for dispatch, or None for unknown tags.
    """
    kind = value if isinstance(value, EntityKind) else entity_kind_from_value(value)
    if kind is None:
        return None
    for members, family in _FAMILIES:
        if kind in members:
            return family
    return None  # pragma: no cover - every kind belongs to a family


def is_actor_kind(value: str | EntityKind) -> bool:
    """Return True if the tag names an actor kind."""
    return kind_family(value) is KindFamily.ACTOR


def is_supported_content_kind(value: str | EntityKind) -> bool:
    """Return True if the tag is one of the indexable content kinds (Note, Video, Movie, Article)."""
    kind = value if isinstance(value, EntityKind) else entity_kind_from_value(value)
    return kind in SUPPORTED_CONTENT_KINDS
