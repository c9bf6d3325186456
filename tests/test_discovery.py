from __future__ import annotations

import logging

import pytest

from fedimodel.constants import ACTIVITYSTREAMS_CONTEXT, FEDINEKO_PUBLIC_COLLECTION, PUBLIC_COLLECTION
from fedimodel.discovery import (
    AllowReason,
    DenyReason,
    Discoverability,
    actor_discoverability,
    content_discoverability,
    content_opt_in_discoverability,
    content_opt_out_discoverability,
    is_public_searchable_by,
)
from fedimodel.schema import Actor, Object

TOOT_CONTEXT = [
    ACTIVITYSTREAMS_CONTEXT,
    {"toot": "http://joinmastodon.org/ns#", "indexable": "toot:indexable", "discoverable": "toot:discoverable"},
]


def _actor(**fields: object) -> Actor:
    payload: dict[str, object] = {"type": "Person", "id": "https://example.org/users/alice"}
    payload.update(fields)
    return Actor.from_payload(payload)


def test_public_searchable_by() -> None:
    verdict = is_public_searchable_by([FEDINEKO_PUBLIC_COLLECTION])
    assert verdict == Discoverability.allow(AllowReason.SEARCHABLE_BY, FEDINEKO_PUBLIC_COLLECTION)
    assert is_public_searchable_by(["https://example.org/users/alice/followers"]) is None
    assert is_public_searchable_by(None) is None


def test_index_property_wins_over_flags() -> None:
    actor = _actor(
        **{
            "@context": TOOT_CONTEXT,
            "indexable": True,
            "attachment": [
                {"type": "PropertyValue", "name": "Website", "value": "https://alice.example"},
                {"type": "PropertyValue", "name": "fedineko:index", "value": "deny"},
            ],
        }
    )
    verdict = actor_discoverability(actor)
    assert verdict.allowed is False
    assert verdict.reason is DenyReason.FEDINEKO_PROPERTY


def test_index_property_allow() -> None:
    actor = _actor(attachment={"type": "PropertyValue", "name": "fedineko:index", "value": "allow"})
    assert actor_discoverability(actor) == Discoverability.allow(AllowReason.FEDINEKO_PROPERTY)


def test_searchable_by_wins_over_indexable() -> None:
    actor = _actor(**{"@context": TOOT_CONTEXT, "indexable": False, "searchableBy": PUBLIC_COLLECTION})
    verdict = actor_discoverability(actor)
    assert verdict.allowed
    assert verdict.reason is AllowReason.SEARCHABLE_BY
    assert verdict.detail == PUBLIC_COLLECTION


def test_actor_without_context_is_denied(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="fedimodel.discovery"):
        verdict = actor_discoverability(_actor(indexable=True))
    assert verdict == Discoverability.deny(DenyReason.DEFAULT)
    assert "lacks @context" in caplog.text


@pytest.mark.parametrize(
    "flags, expected",
    [
        ({"indexable": True}, Discoverability.allow(AllowReason.INDEXABLE)),
        ({"indexable": False, "discoverable": True}, Discoverability.deny(DenyReason.INDEXABLE)),
        ({"discoverable": True}, Discoverability.deny(DenyReason.INDEXABLE)),
    ],
)
def test_declared_indexable_decides(flags: dict[str, bool], expected: Discoverability) -> None:
    assert actor_discoverability(_actor(**{"@context": TOOT_CONTEXT}, **flags)) == expected


@pytest.mark.parametrize(
    "flags, expected",
    [
        ({"discoverable": True}, Discoverability.allow(AllowReason.DISCOVERABLE)),
        ({"discoverable": False}, Discoverability.deny(DenyReason.DISCOVERABLE)),
        ({}, Discoverability.deny(DenyReason.DISCOVERABLE)),
    ],
)
def test_declared_discoverable_decides(flags: dict[str, bool], expected: Discoverability) -> None:
    context = [ACTIVITYSTREAMS_CONTEXT, {"discoverable": "toot:discoverable"}]
    assert actor_discoverability(_actor(**{"@context": context}, **flags)) == expected


def test_actor_is_assumed_discoverable_when_silent() -> None:
    actor = _actor(**{"@context": ACTIVITYSTREAMS_CONTEXT})
    assert actor_discoverability(actor) == Discoverability.allow(AllowReason.ASSUMED)


def test_content_precedence() -> None:
    default = Discoverability.deny(DenyReason.DEFAULT)
    searchable = Object.from_payload({"type": "Note", "searchableBy": [PUBLIC_COLLECTION], "indexable": False})
    assert content_discoverability(searchable, default).reason is AllowReason.SEARCHABLE_BY

    indexable = Object.from_payload({"type": "Note", "indexable": False, "discoverable": True})
    assert content_discoverability(indexable, default) == Discoverability.deny(DenyReason.INDEXABLE)

    discoverable = Object.from_payload({"type": "Note", "discoverable": True})
    assert content_discoverability(discoverable, default) == Discoverability.allow(AllowReason.DISCOVERABLE)


def test_content_defaults_for_opt_in_and_opt_out() -> None:
    silent = Object.from_payload({"type": "Note"})
    assert content_opt_in_discoverability(silent) == Discoverability.deny(DenyReason.DEFAULT)
    assert content_opt_out_discoverability(silent) == Discoverability.allow(AllowReason.ASSUMED)
