"""
Default Branch

A `"default"` condition is re-expressed as a catch-all pattern appended after
every explicit condition, so it is reached only when nothing else matched,
wherever it appeared in the caller's mapping.
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, Union

DEFAULT_KEY = "default"
DEFAULT_PATTERN = r"/^[\s\S]*$/"

ConditionSet = Union[Mapping, Callable[[], Mapping]]


def rewrite_default(conditions: Mapping) -> Dict[Any, Any]:
    if DEFAULT_KEY not in conditions:
        return dict(conditions)
    rewritten = {k: v for k, v in conditions.items() if k != DEFAULT_KEY}
    rewritten[DEFAULT_PATTERN] = conditions[DEFAULT_KEY]
    return rewritten


def evaluate_conditions(conditions: ConditionSet) -> Dict[Any, Any]:
    """
    Produce this cycle's condition mapping.

    Factories are called every time; the result is never cached across
    cycles.

    Raises:
        TypeError: if the (produced) condition set is not a mapping
    """
    current = conditions() if callable(conditions) else conditions
    if not isinstance(current, Mapping):
        raise TypeError(f"Conditions must be a mapping, got {type(current).__name__}")
    return rewrite_default(current)


def with_default_branch(conditions: ConditionSet) -> Callable[[], Dict[Any, Any]]:
    "Wrap a condition set into a factory applying the default rewrite on each call"
    return lambda: evaluate_conditions(conditions)
