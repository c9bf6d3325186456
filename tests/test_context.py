from __future__ import annotations

from fedimodel.constants import ACTIVITYSTREAMS_CONTEXT, SECURITY_CONTEXT
from fedimodel.context import context_has_definition, context_matches_url, default_context
from fedimodel.schema import Object
from fedimodel.values import UNSET, SingleOrMany


def test_default_context_lists_security_then_activitystreams() -> None:
    ctx = default_context()
    assert ctx.items == (SECURITY_CONTEXT, ACTIVITYSTREAMS_CONTEXT)
    assert ctx.plural


def test_matches_url_only_on_url_entries() -> None:
    ctx = SingleOrMany.many([ACTIVITYSTREAMS_CONTEXT, {SECURITY_CONTEXT: "x"}])
    assert context_matches_url(ctx, ACTIVITYSTREAMS_CONTEXT)
    assert not context_matches_url(ctx, SECURITY_CONTEXT)
    assert context_matches_url(SingleOrMany.one(SECURITY_CONTEXT), SECURITY_CONTEXT)


def test_has_definition_only_on_inline_terms() -> None:
    ctx = SingleOrMany.many([ACTIVITYSTREAMS_CONTEXT, {"indexable": "toot:indexable"}])
    assert context_has_definition(ctx, "indexable")
    assert not context_has_definition(ctx, "discoverable")
    assert not context_has_definition(SingleOrMany.one("indexable"), "indexable")


def test_absent_or_null_context_matches_nothing() -> None:
    for ctx in (UNSET, None):
        assert not context_matches_url(ctx, ACTIVITYSTREAMS_CONTEXT)
        assert not context_has_definition(ctx, "indexable")


def test_object_context_helpers() -> None:
    note = Object.from_payload(
        {"@context": [ACTIVITYSTREAMS_CONTEXT, {"sensitive": "as:sensitive"}], "type": "Note"}
    )
    assert note.uses_context(ACTIVITYSTREAMS_CONTEXT)
    assert note.defines_in_context("sensitive")
    assert not Object.from_payload({"type": "Note"}).uses_context(ACTIVITYSTREAMS_CONTEXT)
