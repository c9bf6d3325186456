"""
Helpers for the JSON-LD ``@context`` property.

There is no JSON-LD processor here: a context is kept as the single-or-many
list of entries the producer sent (URL strings and term-definition mappings),
and these helpers answer the two questions real consumers ask of it.

Notes:
    - `context_has_definition` only sees terms declared inline; a term defined
      under a different name or inside a remote context is not found.

Examples:
    >>> from fedimodel.context import context_has_definition, default_context
    >>> from fedimodel.values import SingleOrMany
    >>> ctx = SingleOrMany.many(["https://www.w3.org/ns/activitystreams", {"indexable": "toot:indexable"}])
    >>> context_has_definition(ctx, "indexable")
    True
    >>> default_context().items[0]
    'https://w3id.org/security/v1'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .constants import ACTIVITYSTREAMS_CONTEXT, SECURITY_CONTEXT
from .values import SingleOrMany, Unset

__all__ = [
    "default_context",
    "context_matches_url",
    "context_has_definition",
]


def default_context() -> SingleOrMany[str | FrozenDict]:
    """Context used for newly built entities: security vocabulary plus ActivityStreams."""
    return SingleOrMany.many([SECURITY_CONTEXT, ACTIVITYSTREAMS_CONTEXT])


def context_matches_url(context: SingleOrMany[Any] | Unset | None, url: str) -> bool:
    """
    Check whether a context references `url` directly.

    Args:
        context: The entity's ``@context`` (UNSET/None when absent or null).
        url (str): Context URL to look for, compared verbatim.

    Returns:
        bool: True if any URL entry equals `url`.
    """
    if not isinstance(context, SingleOrMany):
        return False
    return any(isinstance(item, str) and item == url for item in context)


def context_has_definition(context: SingleOrMany[Any] | Unset | None, name: str) -> bool:
    """
    Check whether a term is declared inline in the context.

    Args:
        context: The entity's ``@context`` (UNSET/None when absent or null).
        name (str): Term name, e.g. ``"indexable"``.

    Returns:
        bool: True if any mapping entry declares `name`.
    """
    if not isinstance(context, SingleOrMany):
        return False
    return any(isinstance(item, Mapping) and name in item for item in context)
