"""Tests for the JMESPath and jq query backends."""

from __future__ import annotations

import pytest

from json_query.backends import (
    BACKENDS,
    NO_RESULTS,
    JMESPathQuery,
    JqQuery,
    compile_query,
)
from json_query.errors import CompileError, ConfigError, EvaluationError


# ── Registry / compile_query ──────────────────────────────────────


def test_registry_has_both_backends():
    assert set(BACKENDS) == {"jmespath", "jq"}


def test_compile_query_jmespath():
    query = compile_query("name", "jmespath")
    assert isinstance(query, JMESPathQuery)
    assert query.expression == "name"
    assert query.query_type == "jmespath"


def test_compile_query_jq():
    query = compile_query(".name", "jq")
    assert isinstance(query, JqQuery)
    assert query.query_type == "jq"


def test_compile_query_unknown_type():
    with pytest.raises(ConfigError, match="unsupported query type"):
        compile_query("name", "jsonata")


def test_compile_query_unknown_type_is_not_compile_error():
    with pytest.raises(ConfigError) as exc_info:
        compile_query("name", "xpath")
    assert not isinstance(exc_info.value, CompileError)


# ── JMESPath ──────────────────────────────────────────────────────


def test_jmespath_invalid_expression():
    with pytest.raises(CompileError) as exc_info:
        JMESPathQuery.compile("[invalid")
    assert exc_info.value.query_type == "jmespath"
    assert exc_info.value.expression == "[invalid"


def test_jmespath_nested_path():
    query = JMESPathQuery.compile("user.name")
    value = {"user": {"name": "John Doe", "email": "john@example.com"}}
    assert query.evaluate(value) == "John Doe"


def test_jmespath_missing_path_is_none():
    query = JMESPathQuery.compile("user.phone")
    assert query.evaluate({"user": {"name": "x"}}) is None


def test_jmespath_projection_returns_list():
    query = JMESPathQuery.compile("items[*].name")
    value = {"items": [{"name": "a"}, {"name": "b"}]}
    assert query.evaluate(value) == ["a", "b"]


def test_jmespath_multiselect_hash():
    query = JMESPathQuery.compile("{n: user.name, c: count}")
    assert query.evaluate({"user": {"name": "x"}, "count": 3}) == {"n": "x", "c": 3}


def test_jmespath_function_type_error():
    query = JMESPathQuery.compile("length(count)")
    with pytest.raises(EvaluationError):
        query.evaluate({"count": 42})


def test_jmespath_query_is_reusable():
    query = JMESPathQuery.compile("a")
    assert query.evaluate({"a": 1}) == 1
    assert query.evaluate({"a": 2}) == 2


# ── jq ────────────────────────────────────────────────────────────


def test_jq_invalid_expression():
    with pytest.raises(CompileError) as exc_info:
        JqQuery.compile(".[invalid")
    assert exc_info.value.query_type == "jq"


def test_jq_sum():
    query = JqQuery.compile(".items | map(.price) | add")
    value = {"items": [{"price": 1.5}, {"price": 0.75}, {"price": 2.0}]}
    assert query.evaluate(value) == pytest.approx(4.25)


def test_jq_object_construction():
    query = JqQuery.compile("{name: .user.name, total: .orders | map(.amount) | add}")
    value = {
        "user": {"name": "Alice", "id": 123},
        "orders": [{"amount": 100.0}, {"amount": 50.5}, {"amount": 75.25}],
    }
    result = query.evaluate(value)
    assert result["name"] == "Alice"
    assert result["total"] == pytest.approx(225.75)


def test_jq_missing_field_is_null():
    query = JqQuery.compile(".missing")
    assert query.evaluate({"a": 1}) is None


def test_jq_only_first_result_used():
    query = JqQuery.compile(".[]")
    assert query.evaluate([1, 2, 3]) == 1


def test_jq_later_results_are_never_computed():
    query = JqQuery.compile('.v, error("later")')
    assert query.evaluate({"v": 1}) == 1


def test_jq_iter_results_yields_every_value():
    query = JqQuery.compile(".[]")
    assert list(query.iter_results([1, 2, 3])) == [1, 2, 3]


def test_jq_empty_stream():
    query = JqQuery.compile("empty")
    with pytest.raises(EvaluationError) as exc_info:
        query.evaluate({"a": 1})
    assert exc_info.value.reason == NO_RESULTS


def test_jq_select_without_match_is_empty():
    query = JqQuery.compile(".items[] | select(.price > 100)")
    with pytest.raises(EvaluationError, match=NO_RESULTS):
        query.evaluate({"items": [{"price": 1}]})


def test_jq_runtime_error():
    query = JqQuery.compile('error("boom")')
    with pytest.raises(EvaluationError, match="boom"):
        query.evaluate({})


def test_jq_type_error():
    query = JqQuery.compile(".a + 1")
    with pytest.raises(EvaluationError):
        query.evaluate({"a": "text"})
