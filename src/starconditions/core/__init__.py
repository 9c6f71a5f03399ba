"""
starconditions core

Framework-agnostic matching and property-application rules.
Contains the matcher and handler tables, the listener side table and the
default-branch rewrite, with no dependency on any element implementation.
"""

from .errors import ConditionsError, InvalidRuleError, PatternError
from .utils import UNDEFINED, is_index_key, is_number, is_truthy, js_string, to_number
from .matchers import Matcher, as_matcher, compile_pattern, default_matchers, matches_condition
from .handlers import FALLBACK_HANDLER, Handler, apply_property, as_handler, default_handlers
from .listeners import ListenerRecord, ListenerRegistry
from .defaults import DEFAULT_KEY, DEFAULT_PATTERN, evaluate_conditions, with_default_branch

__all__ = [
    "ConditionsError",
    "InvalidRuleError",
    "PatternError",
    "UNDEFINED",
    "is_index_key",
    "is_number",
    "is_truthy",
    "js_string",
    "to_number",
    "Matcher",
    "as_matcher",
    "compile_pattern",
    "default_matchers",
    "matches_condition",
    "FALLBACK_HANDLER",
    "Handler",
    "apply_property",
    "as_handler",
    "default_handlers",
    "ListenerRecord",
    "ListenerRegistry",
    "DEFAULT_KEY",
    "DEFAULT_PATTERN",
    "evaluate_conditions",
    "with_default_branch",
]
