"""
Condition Matchers

Ordered strategy table classifying a value against a condition string.
The first matcher whose `test` accepts the condition decides the outcome;
its `match` result is final, later matchers are never consulted.
"""

import logging
import math
import operator
import re
from collections.abc import Mapping, Sized
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, List

from .errors import InvalidRuleError, PatternError
from .utils import UNDEFINED, is_number, is_numeric, is_truthy, js_string, to_number

logger = logging.getLogger(__name__)

_RANGE = re.compile(r"^(-?\d+(?:\.\d+)?)\s*-\s*(-?\d+(?:\.\d+)?)$")
_NAMED_GROUP = re.compile(r"\(\?<(?![=!])")
_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}
_IGNORED_FLAGS = set("gyud")


@dataclass
class Matcher:
    """One row of the matcher table: `test(condition, value)` then `match(value, condition)`."""
    name: str
    test: Callable[[str, Any], bool]
    match: Callable[[Any, str], bool]


def as_matcher(name: str, rule: Any) -> Matcher:
    "Coerce a `Matcher`, a mapping or any object with `test`/`match` into a `Matcher`"
    if isinstance(rule, Matcher):
        return Matcher(name, rule.test, rule.match)
    if isinstance(rule, Mapping):
        test, match = rule.get("test"), rule.get("match")
    else:
        test, match = getattr(rule, "test", None), getattr(rule, "match", None)
    if not callable(test) or not callable(match):
        raise InvalidRuleError(f"Matcher {name!r} must provide callable test() and match()")
    return Matcher(name, test, match)


@lru_cache(maxsize=256)
def compile_pattern(condition: str) -> "re.Pattern":
    """
    Compile a `/pattern/flags` condition into a Python regular expression.

    Raises:
        PatternError: if the literal is malformed, a flag is unknown or the
            pattern does not compile
    """
    last = condition.rfind("/")
    if not condition.startswith("/") or last <= 0:
        raise PatternError(f"Not a pattern literal: {condition}")
    source, flag_chars = condition[1:last], condition[last + 1:]
    flags = 0
    for ch in flag_chars:
        if ch in _FLAGS:
            flags |= _FLAGS[ch]
        elif ch not in _IGNORED_FLAGS:
            raise PatternError(f"Invalid flag {ch!r} in {condition}")
    try:
        return re.compile(_NAMED_GROUP.sub("(?P<", source), flags)
    except re.error as e:
        raise PatternError(f"Invalid pattern {condition}: {e}") from e


def _is_empty(value: Any) -> bool:
    if value is None or value is UNDEFINED:
        return True
    if isinstance(value, (str, list, tuple, Mapping)):
        return len(value) == 0
    if isinstance(value, (bool, int, float)):
        return False
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def _regex_match(value, condition):
    try:
        pattern = compile_pattern(condition)
    except PatternError as e:
        logger.warning(f"Invalid regex condition skipped: {e}")
        return False
    return pattern.search(js_string(value)) is not None


def _range_match(value, condition):
    low, high = _RANGE.match(condition).groups()
    return float(low) <= value <= float(high)


def _compare(op: Callable[[float, float], bool], size: int):
    def match(value, condition):
        target = to_number(condition[size:].strip())
        return not math.isnan(target) and op(value, target)
    return match


def _numeric_test(predicate: Callable[[str], bool]):
    return lambda condition, value=None: is_number(value) and predicate(condition)


def default_matchers() -> List[Matcher]:
    "Fresh copy of the built-in matcher table, in evaluation order"
    return [
        Matcher("booleanTrue", lambda c, v=None: c == "true", lambda v, c=None: v is True),
        Matcher("booleanFalse", lambda c, v=None: c == "false", lambda v, c=None: v is False),
        Matcher("truthy", lambda c, v=None: c == "truthy", lambda v, c=None: is_truthy(v)),
        Matcher("falsy", lambda c, v=None: c == "falsy", lambda v, c=None: not is_truthy(v)),
        Matcher("null", lambda c, v=None: c == "null", lambda v, c=None: v is None),
        Matcher("undefined", lambda c, v=None: c == "undefined", lambda v, c=None: v is UNDEFINED),
        Matcher("empty", lambda c, v=None: c == "empty", lambda v, c=None: _is_empty(v)),
        Matcher(
            "quotedString",
            lambda c, v=None: (c.startswith('"') and c.endswith('"')) or (c.startswith("'") and c.endswith("'")),
            lambda v, c: js_string(v) == c[1:-1],
        ),
        Matcher("includes", lambda c, v=None: c.startswith("includes:"),
                lambda v, c: c[9:].strip() in js_string(v)),
        Matcher("startsWith", lambda c, v=None: c.startswith("startsWith:"),
                lambda v, c: js_string(v).startswith(c[11:].strip())),
        Matcher("endsWith", lambda c, v=None: c.startswith("endsWith:"),
                lambda v, c: js_string(v).endswith(c[9:].strip())),
        Matcher("regex", lambda c, v=None: c.startswith("/") and c.rfind("/") > 0, _regex_match),
        Matcher("numericRange", _numeric_test(lambda c: _RANGE.match(c) is not None), _range_match),
        Matcher("numericExact", _numeric_test(is_numeric), lambda v, c: v == to_number(c)),
        Matcher("greaterThanOrEqual", _numeric_test(lambda c: c.startswith(">=")), _compare(operator.ge, 2)),
        Matcher("lessThanOrEqual", _numeric_test(lambda c: c.startswith("<=")), _compare(operator.le, 2)),
        Matcher("greaterThan", _numeric_test(lambda c: c.startswith(">") and not c.startswith(">=")),
                _compare(operator.gt, 1)),
        Matcher("lessThan", _numeric_test(lambda c: c.startswith("<") and not c.startswith("<=")),
                _compare(operator.lt, 1)),
        Matcher("stringEquality", lambda c, v=None: True, lambda v, c: js_string(v) == c),
    ]


def matches_condition(matchers: List[Matcher], value: Any, condition: Any) -> bool:
    condition = js_string(condition).strip()
    for matcher in matchers:
        if matcher.test(condition, value):
            return bool(matcher.match(value, condition))
    return False
