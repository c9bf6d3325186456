from __future__ import annotations

import json

import pytest

from fedimodel.errors import PayloadSyntaxError
from fedimodel.schema import Object
from fedimodel.serde import dumps, json_dumps_canonical, parse


def test_parse_returns_generic_values() -> None:
    assert parse('{"type": "Note", "n": [1, 2.5, true, null]}') == {"type": "Note", "n": [1, 2.5, True, None]}
    assert parse("[1]") == [1]
    assert parse(b'{"name": "caf\xc3\xa9"}') == {"name": "café"}


def test_syntax_error_carries_position() -> None:
    with pytest.raises(PayloadSyntaxError) as ei:
        parse('{\n"a": nope}')
    err = ei.value
    assert err.offset == 7
    assert err.lineno == 2
    assert err.colno == 6
    assert isinstance(err.__cause__, json.JSONDecodeError)
    assert isinstance(err, ValueError)


def test_invalid_utf8_reports_byte_offset() -> None:
    with pytest.raises(PayloadSyntaxError) as ei:
        parse(b'{"a": "\xff"}')
    assert ei.value.offset == 7
    assert ei.value.lineno == 1
    assert ei.value.colno == 8


def test_empty_input_is_a_syntax_error() -> None:
    with pytest.raises(PayloadSyntaxError) as ei:
        parse("")
    assert ei.value.offset == 0


def test_canonical_dumps_is_order_insensitive() -> None:
    a = {"b": 2, "a": 1, "nested": {"y": 2, "x": 1}, "emoji": "🙂"}
    b = {"nested": {"x": 1, "y": 2}, "a": 1, "emoji": "🙂", "b": 2}
    assert json_dumps_canonical(a) == json_dumps_canonical(b)
    assert "🙂" in json_dumps_canonical(a)


def test_dumps_entity() -> None:
    note = Object.from_payload({"type": "Note", "content": "hi", "published": "2024-05-01T00:00:00Z"})
    text = dumps(note)
    assert json.loads(text) == {"type": "Note", "content": "hi", "published": "2024-05-01T00:00:00Z"}
    assert dumps(note, canonical=True) == '{"content":"hi","published":"2024-05-01T00:00:00Z","type":"Note"}'
    assert "\n" in dumps(note, indent=2)


def test_deeply_nested_text_is_a_syntax_error() -> None:
    with pytest.raises(PayloadSyntaxError) as ei:
        parse("[" * 200000)
    assert ei.value.offset == 128
    assert "nesting" in str(ei.value)


def test_nesting_limit_is_configurable() -> None:
    text = '{"a": [[{"b": []}]]}'
    assert parse(text, max_nesting=5) == {"a": [[{"b": []}]]}
    with pytest.raises(PayloadSyntaxError) as ei:
        parse(text, max_nesting=4)
    assert ei.value.offset == text.index('[]')


def test_brackets_inside_strings_do_not_count_as_nesting() -> None:
    text = '{"content": "' + "[{" * 500 + '\\"]"}'
    assert parse(text, max_nesting=1) == {"content": "[{" * 500 + '"]'}


@pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
def test_non_json_constants_are_rejected(token: str) -> None:
    text = '{"type": "Note",\n "x": ' + token + "}"
    with pytest.raises(PayloadSyntaxError) as ei:
        parse(text)
    assert ei.value.offset == text.index(token)
    assert ei.value.lineno == 2
    assert ei.value.colno == 7


def test_constant_names_inside_strings_are_fine() -> None:
    assert parse('{"name": "NaN Infinity"}') == {"name": "NaN Infinity"}


def test_dumps_refuses_non_finite_floats() -> None:
    with pytest.raises(ValueError):
        dumps({"x": float("nan")})
    with pytest.raises(ValueError):
        json_dumps_canonical({"x": float("inf")})
