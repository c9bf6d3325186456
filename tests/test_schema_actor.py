from __future__ import annotations

import logging

import pytest

from fedimodel.constants import ACTIVITYSTREAMS_CONTEXT, SECURITY_CONTEXT
from fedimodel.errors import MissingFieldError
from fedimodel.schema import Actor, Endpoints, Image, PublicKey
from fedimodel.values import UNSET, Embedded, Reference, SingleOrMany

PEM = "-----BEGIN PUBLIC KEY-----\nMIIBIjANBg\n-----END PUBLIC KEY-----\n"


def _person(**fields: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "@context": [ACTIVITYSTREAMS_CONTEXT, SECURITY_CONTEXT],
        "type": "Person",
        "id": "https://example.org/users/alice",
        "preferredUsername": "alice",
        "inbox": "https://example.org/users/alice/inbox",
        "outbox": "https://example.org/users/alice/outbox",
        "followers": "https://example.org/users/alice/followers",
        "following": "https://example.org/users/alice/following",
    }
    payload.update(fields)
    return payload


def test_actor_core_fields() -> None:
    actor = Actor.from_payload(
        _person(
            endpoints={"sharedInbox": "https://example.org/inbox", "oauthAuthorizationEndpoint": "https://x"},
            publicKey={
                "id": "https://example.org/users/alice#main-key",
                "owner": "https://example.org/users/alice",
                "publicKeyPem": PEM,
            },
            manuallyApprovesFollowers=False,
        )
    )
    assert actor.is_person()
    assert actor.identifier == "https://example.org/users/alice"
    assert actor.preferred_username == "alice"
    assert actor.inbox == "https://example.org/users/alice/inbox"
    assert isinstance(actor.followers, Reference)
    assert actor.followers.identifier == "https://example.org/users/alice/followers"
    assert isinstance(actor.endpoints, Endpoints)
    assert actor.shared_inbox == "https://example.org/inbox"
    assert actor.endpoints.extra_fields == {"oauthAuthorizationEndpoint": "https://x"}
    assert actor.manually_approves_followers is False

    (key,) = actor.public_keys
    assert isinstance(key, PublicKey)
    assert key.public_key_pem == PEM
    assert key.identifier == "https://example.org/users/alice#main-key"
    assert actor.has_valid_security_context()


def test_service_is_not_a_person() -> None:
    actor = Actor.from_payload({"type": "Service", "id": "https://example.org/bot"})
    assert not actor.is_person()
    assert actor.shared_inbox is None
    assert actor.public_keys == ()


def test_security_context_without_key_is_invalid(caplog: pytest.LogCaptureFixture) -> None:
    actor = Actor.from_payload(_person())
    with caplog.at_level(logging.WARNING, logger="fedimodel.schema"):
        assert actor.has_valid_security_context() is False
    assert "publicKey" in caplog.text


def test_no_security_context_is_valid_without_key() -> None:
    actor = Actor.from_payload(_person(**{"@context": ACTIVITYSTREAMS_CONTEXT}))
    assert actor.has_valid_security_context()


def test_public_key_without_pem_is_a_nested_diagnostic() -> None:
    payload = _person(publicKey={"id": "https://example.org/users/alice#main-key"})
    result = Actor.extract(payload)
    assert result.entity.public_key is UNSET
    assert len(result.diagnostics) == 1
    diag = result.diagnostics[0]
    assert isinstance(diag, MissingFieldError)
    assert diag.field == "publicKey.publicKeyPem"
    assert result.entity.to_payload() == payload


def test_embedded_collection_reference() -> None:
    actor = Actor.from_payload(
        _person(followers={"type": "OrderedCollection", "id": "https://example.org/f", "totalItems": 3})
    )
    assert isinstance(actor.followers, Embedded)
    assert actor.followers.identifier == "https://example.org/f"


def test_actor_round_trip() -> None:
    payload = _person(
        icon={"type": "Image", "mediaType": "image/png", "url": "https://example.org/a.png"},
        publicKey={"id": "k", "owner": "https://example.org/users/alice", "publicKeyPem": PEM},
        featured="https://example.org/users/alice/featured",
        discoverable=True,
    )
    actor = Actor.from_payload(payload)
    assert actor.to_payload() == payload
    assert Actor.extract(actor.to_payload()).entity == actor


def test_largest_image_by_width_then_height() -> None:
    actor = Actor.from_payload(
        _person(
            icon=[
                {"type": "Image", "url": "https://example.org/small.png", "width": 100, "height": 100},
                {"type": "Image", "url": "https://example.org/big.png", "width": 400, "height": 400},
                "https://example.org/unknown.png",
            ]
        )
    )
    largest = Image.largest(actor.icon)
    assert largest is not None
    assert largest.image_url == "https://example.org/big.png"


def test_largest_image_of_bare_references_keeps_order() -> None:
    icons = SingleOrMany.many([Reference("https://example.org/1.png"), Reference("https://example.org/2.png")])
    largest = Image.largest(icons)
    assert largest is not None
    assert largest.image_url == "https://example.org/1.png"


def test_largest_image_of_nothing() -> None:
    assert Image.largest(UNSET) is None
    assert Image.largest(None) is None
    assert Image.largest(SingleOrMany.many([])) is None
