"""
Tests for the default-branch rewrite.
"""

import pytest

from starconditions.core import DEFAULT_PATTERN, evaluate_conditions, with_default_branch
from starconditions.core.defaults import rewrite_default


def test_default_moves_last():
    rewritten = rewrite_default({"default": "B", "1": "A", "2": "C"})
    assert list(rewritten) == ["1", "2", DEFAULT_PATTERN]
    assert rewritten[DEFAULT_PATTERN] == "B"


def test_without_default_is_unchanged():
    conditions = {"a": 1}
    rewritten = rewrite_default(conditions)
    assert rewritten == conditions
    assert rewritten is not conditions


def test_factories_are_evaluated_each_time():
    calls = []

    def factory():
        calls.append(1)
        return {"default": len(calls)}

    wrapped = with_default_branch(factory)
    assert wrapped()[DEFAULT_PATTERN] == 1
    assert wrapped()[DEFAULT_PATTERN] == 2
    assert evaluate_conditions(factory)[DEFAULT_PATTERN] == 3


def test_non_mapping_conditions():
    with pytest.raises(TypeError):
        evaluate_conditions(lambda: ["not", "a", "mapping"])


@pytest.mark.parametrize("value,expected", [(1, "A"), (2, "B"), ("x", "B"), (None, "B")])
def test_default_precedence(static_engine, value, expected):
    for conditions in ({"1": "A", "default": "B"}, {"default": "B", "1": "A"}):
        assert static_engine.find_match(value, conditions) == expected
