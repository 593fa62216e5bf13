"""Tests for payload normalization."""

from __future__ import annotations

from collections import OrderedDict
from types import MappingProxyType

import pytest

from json_query.errors import PayloadError, PayloadErrorKind
from json_query.models import RawPayload, StructuredPayload
from json_query.normalizer import normalize, to_value


# ── Structured payloads ──────────────────────────────────────────


def test_structured_flat():
    payload = StructuredPayload(data={"a": 1, "b": "two", "c": None})
    assert normalize(payload) == {"a": 1, "b": "two", "c": None}


def test_structured_nested_mappings_become_dicts():
    inner = MappingProxyType({"deep": OrderedDict(x=1)})
    payload = StructuredPayload(data={"outer": inner})
    value = normalize(payload)
    assert value == {"outer": {"deep": {"x": 1}}}
    assert type(value["outer"]) is dict
    assert type(value["outer"]["deep"]) is dict


def test_structured_tuples_become_lists():
    payload = StructuredPayload(data={"items": (1, (2, 3), {"k": (4,)})})
    assert normalize(payload) == {"items": [1, [2, 3], {"k": [4]}]}


def test_structured_deep_nesting():
    data: dict = {"leaf": True}
    for i in range(200):
        data = {f"level{i}": [data]}
    value = normalize(StructuredPayload(data=data))
    for i in reversed(range(200)):
        value = value[f"level{i}"][0]
    assert value == {"leaf": True}


def test_structured_copy_is_independent():
    nested = {"list": [1, 2]}
    payload = StructuredPayload(data={"nested": nested})
    value = normalize(payload)
    value["nested"]["list"].append(3)
    assert nested["list"] == [1, 2]


def test_to_value_leaves_pass_through():
    assert to_value(1.5) == 1.5
    assert to_value("s") == "s"
    assert to_value(None) is None


# ── Raw payloads ─────────────────────────────────────────────────


def test_raw_object():
    payload = RawPayload(data=b'{"status": "active", "count": 42}')
    assert normalize(payload) == {"status": "active", "count": 42}


def test_raw_scalar_and_array():
    assert normalize(RawPayload(data=b"42")) == 42
    assert normalize(RawPayload(data=b"[1, 2]")) == [1, 2]


def test_raw_utf8():
    payload = RawPayload(data='{"name": "Zoë"}'.encode("utf-8"))
    assert normalize(payload) == {"name": "Zoë"}


def test_raw_invalid_json():
    with pytest.raises(PayloadError) as exc_info:
        normalize(RawPayload(data=b"invalid json"))
    assert exc_info.value.kind is PayloadErrorKind.MALFORMED


def test_raw_invalid_utf8():
    with pytest.raises(PayloadError) as exc_info:
        normalize(RawPayload(data=b'{"a": "\xff"}'))
    assert exc_info.value.kind is PayloadErrorKind.MALFORMED


@pytest.mark.parametrize("literal", [b"NaN", b"Infinity", b'{"x": -Infinity}'])
def test_raw_rejects_non_standard_constants(literal):
    with pytest.raises(PayloadError) as exc_info:
        normalize(RawPayload(data=literal))
    assert exc_info.value.kind is PayloadErrorKind.MALFORMED


# ── Missing payloads ─────────────────────────────────────────────


def test_none_payload_is_missing():
    with pytest.raises(PayloadError) as exc_info:
        normalize(None)
    assert exc_info.value.kind is PayloadErrorKind.MISSING


def test_empty_raw_payload_is_missing():
    with pytest.raises(PayloadError) as exc_info:
        normalize(RawPayload(data=b""))
    assert exc_info.value.kind is PayloadErrorKind.MISSING
