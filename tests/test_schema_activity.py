from __future__ import annotations

from fedimodel.config import ParseSettings
from fedimodel.errors import FieldTypeError, UnrecognizedKind
from fedimodel.schema import Activity, Actor, EntityKindSet, GenericObject, Object
from fedimodel.values import UNSET, Embedded, Reference
from fedimodel.vocabulary import EntityKind


def test_create_with_embedded_note() -> None:
    activity = Activity.from_payload(
        {
            "type": "Create",
            "id": "https://example.org/activities/1",
            "actor": "https://example.org/users/alice",
            "object": {
                "type": "Note",
                "id": "https://example.org/notes/1",
                "content": "hello",
                "attributedTo": "https://example.org/users/alice",
            },
        }
    )
    assert activity.actor_id() == "https://example.org/users/alice"
    assert isinstance(activity.object, Embedded)
    kinds = activity.object.value
    assert isinstance(kinds, EntityKindSet)
    note = kinds.get(Object)
    assert note is not None
    assert note.content == "hello"
    assert activity.inner_object_kind() is EntityKind.NOTE
    assert activity.inner_object_id() == "https://example.org/notes/1"


def test_follow_with_referenced_object() -> None:
    follow = Activity.from_payload(
        {
            "type": "Follow",
            "actor": {"type": "Person", "id": "https://example.org/users/alice"},
            "object": "https://other.example/users/bob",
        }
    )
    assert isinstance(follow.object, Reference)
    assert follow.inner_object_kind() is None
    assert follow.inner_object_id() == "https://other.example/users/bob"
    assert isinstance(follow.actor[0].value, Actor)
    assert follow.actor_id() == "https://example.org/users/alice"


def test_update_of_embedded_actor_object_is_an_actor() -> None:
    activity = Activity.from_payload(
        {"type": "Update", "object": {"type": "Person", "id": "https://example.org/users/alice"}}
    )
    assert activity.object.value.has(Actor)
    assert activity.inner_object_kind() is EntityKind.PERSON


def test_intransitive_activity_has_unset_object() -> None:
    activity = Activity.from_payload({"type": "IntransitiveActivity", "actor": "https://example.org/a"})
    assert activity.object is UNSET
    assert activity.inner_object_id() is None


def test_many_actors() -> None:
    activity = Activity.from_payload(
        {"type": "Like", "actor": ["https://example.org/a", "https://example.org/b"], "object": "https://x"}
    )
    assert activity.actor_ids() == ("https://example.org/a", "https://example.org/b")
    assert activity.actor_id() == "https://example.org/a"


def test_malformed_object_is_a_diagnostic() -> None:
    payload = {"type": "Delete", "actor": "https://example.org/a", "object": 42}
    result = Activity.extract(payload)
    assert result.entity.object is UNSET
    assert len(result.diagnostics) == 1
    diag = result.diagnostics[0]
    assert isinstance(diag, FieldTypeError)
    assert diag.field == "object"
    assert result.entity.to_payload() == payload


def test_unknown_nested_kind_falls_back_to_generic_object() -> None:
    result = Activity.extract(
        {"type": "Create", "object": {"type": "ChatMessage", "id": "https://example.org/m/1", "content": "hi"}}
    )
    inner = result.entity.object.value
    assert isinstance(inner.first, GenericObject)
    assert inner.first.content == "hi"
    assert len(result.diagnostics) == 1
    diag = result.diagnostics[0]
    assert isinstance(diag, UnrecognizedKind)
    assert diag.tag == "ChatMessage"
    assert diag.field == "object"


def test_nested_depth_limit_applies_to_polymorphic_fields() -> None:
    payload = {
        "type": "Create",
        "object": {"type": "Note", "inReplyTo": {"type": "Note", "id": "https://example.org/parent"}},
    }
    result = Activity.extract(payload, ParseSettings(max_depth=1))
    note = result.entity.object.value.get(Object)
    assert note is not None
    assert note.in_reply_to is UNSET
    assert note.extra_fields == {"inReplyTo": {"type": "Note", "id": "https://example.org/parent"}}
    assert [d.field for d in result.diagnostics] == ["object.inReplyTo"]
    assert result.entity.to_payload() == payload


def test_activity_round_trip() -> None:
    payload = {
        "@context": "https://www.w3.org/ns/activitystreams",
        "type": "Announce",
        "id": "https://example.org/activities/2",
        "actor": "https://example.org/users/alice",
        "object": {"type": "Note", "id": "https://other.example/notes/9", "content": "boosted"},
        "to": ["https://www.w3.org/ns/activitystreams#Public"],
        "published": "2024-01-02T03:04:05Z",
        "signature": {"type": "RsaSignature2017", "signatureValue": "abc"},
    }
    activity = Activity.from_payload(payload)
    assert activity.to_payload() == payload
    assert Activity.extract(activity.to_payload()).entity == activity
