"""
Tests for value coercion helpers.
"""

import math

import pytest

from starconditions.core import UNDEFINED, is_index_key, is_number, is_truthy, js_string, to_number


@pytest.mark.parametrize("value,expected", [
    (None, "null"),
    (UNDEFINED, "undefined"),
    (True, "true"),
    (False, "false"),
    (5, "5"),
    (5.0, "5"),
    (2.5, "2.5"),
    (float("nan"), "NaN"),
    (float("-inf"), "-Infinity"),
    (["a", None, 1], "a,,1"),
    ([["a", "b"], "c"], "a,b,c"),
    ({"a": 1}, "[object Object]"),
])
def test_js_string(value, expected):
    assert js_string(value) == expected


@pytest.mark.parametrize("text,expected", [
    ("42", 42.0),
    (" -3.5 ", -3.5),
    ("", 0.0),
    ("1e3", 1000.0),
    (".5", 0.5),
    ("0x1F", 31.0),
    ("Infinity", math.inf),
    (7, 7.0),
])
def test_to_number(text, expected):
    assert to_number(text) == expected


def test_to_number_nan():
    for text in ("abc", "1-3", ">=5", "0xZZ"):
        assert math.isnan(to_number(text))


def test_is_number_excludes_bool():
    assert is_number(1) and is_number(1.5)
    assert not is_number(True)
    assert not is_number("1")


def test_is_truthy():
    assert is_truthy([]) and is_truthy({}) and is_truthy("0")
    assert not is_truthy(0) and not is_truthy("") and not is_truthy(UNDEFINED)


def test_is_index_key():
    assert is_index_key("0") and is_index_key("-1") and is_index_key(3)
    assert not is_index_key("1.5") and not is_index_key("a1") and not is_index_key(True)


def test_undefined_singleton():
    assert type(UNDEFINED)() is UNDEFINED
    assert not UNDEFINED
    assert repr(UNDEFINED) == "UNDEFINED"
