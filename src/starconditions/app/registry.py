"""
Rule Registry

`EngineConfig` owns the ordered matcher and handler tables and the listener
side table for one engine. Every binding created from that engine shares it.
"""

import logging
from dataclasses import dataclass, field
from collections.abc import Mapping
from typing import Any, Callable, List, Optional, Tuple

from ..core.errors import InvalidRuleError
from ..core.handlers import FALLBACK_HANDLER, Handler, as_handler, default_handlers
from ..core.listeners import ListenerRegistry
from ..core.matchers import Matcher, as_matcher, default_matchers

logger = logging.getLogger(__name__)

CATCH_ALL_MATCHER = "stringEquality"


def _index_of(rules: list, name: str) -> Optional[int]:
    return next((i for i, r in enumerate(rules) if r.name == name), None)


@dataclass
class EngineConfig:
    matchers: List[Matcher] = field(default_factory=default_matchers)
    listeners: ListenerRegistry = field(default_factory=ListenerRegistry)
    handlers: Optional[List[Handler]] = None

    def __post_init__(self):
        if self.handlers is None:
            self.handlers = default_handlers(self.listeners)

    def register_matcher(self, name: str, matcher: Any) -> bool:
        """
        Add a matcher, or replace the one registered under `name`.

        New matchers go ahead of the catch-all string-equality matcher so
        they can be reached. Malformed matchers are logged and ignored.
        """
        try:
            rule = as_matcher(name, matcher)
        except InvalidRuleError as e:
            logger.error(f"Invalid matcher: {e}")
            return False
        existing = _index_of(self.matchers, name)
        if existing is not None:
            self.matchers[existing] = rule
        elif self.matchers and self.matchers[-1].name == CATCH_ALL_MATCHER:
            self.matchers.insert(len(self.matchers) - 1, rule)
        else:
            self.matchers.append(rule)
        logger.debug(f"Registered matcher '{name}'")
        return True

    def register_handler(self, name: str, handler: Any) -> bool:
        """
        Add a handler, or replace the one registered under `name`.

        The terminal fallback handler is popped, the new handler appended and
        the fallback re-appended, so the fallback always stays last.
        """
        try:
            rule = as_handler(name, handler)
        except InvalidRuleError as e:
            logger.error(f"Invalid handler: {e}")
            return False
        existing = _index_of(self.handlers, name)
        if existing is not None:
            self.handlers[existing] = rule
        else:
            fallback = self.handlers.pop() if self.handlers else None
            self.handlers.append(rule)
            if fallback is not None:
                self.handlers.append(fallback)
        logger.debug(f"Registered handler '{name}'")
        return True

    def has_matcher(self, name: str) -> bool:
        return _index_of(self.matchers, name) is not None

    def has_handler(self, name: str) -> bool:
        return _index_of(self.handlers, name) is not None

    def register_matchers(self, matchers: Mapping) -> Tuple[int, int]:
        "Register each `name -> matcher` entry; returns `(registered, failed)`"
        return self._register_all("matchers", matchers, self.register_matcher)

    def register_handlers(self, handlers: Mapping) -> Tuple[int, int]:
        "Register each `name -> handler` entry; returns `(registered, failed)`"
        return self._register_all("handlers", handlers, self.register_handler)

    def _register_all(self, kind: str, rules: Mapping, register: Callable[[str, Any], bool]) -> Tuple[int, int]:
        if not isinstance(rules, Mapping):
            logger.error(f"Bulk registration of {kind} needs a mapping, got {type(rules).__name__}")
            return 0, 0
        registered = failed = 0
        for name, rule in rules.items():
            if register(name, rule):
                registered += 1
            else:
                failed += 1
        logger.debug(f"Registered {registered} {kind}" + (f", {failed} failed" if failed else ""))
        return registered, failed

    def create_simple_matcher(self, name: str, keyword: str, check: Callable[[Any], bool]) -> bool:
        "Matcher for the exact condition `keyword`, deciding with `check(value)`"
        return self.register_matcher(name, Matcher(
            name,
            lambda condition, value=None: condition == keyword,
            lambda value, condition=None: check(value),
        ))

    def create_simple_handler(self, name: str, key: str, apply: Callable[[Any, Any], None]) -> bool:
        "Handler for the config key `key`, applied as `apply(element, value)`"
        return self.register_handler(name, Handler(
            name,
            lambda k, value=None, element=None: k == key,
            lambda element, value, k=None: apply(element, value),
        ))

    def matcher_names(self) -> List[str]:
        return [m.name for m in self.matchers]

    def handler_names(self) -> List[str]:
        return [h.name for h in self.handlers]

    @property
    def fallback_is_last(self) -> bool:
        return bool(self.handlers) and self.handlers[-1].name == FALLBACK_HANDLER
