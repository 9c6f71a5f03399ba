"""
Conditions Engine

Binds a driving value and a condition set to DOM targets. Each cycle reads
the value, evaluates the conditions (with the default-branch rewrite), picks
the first matching condition and dispatches its config to the resolved
elements. With reactive primitives injected, the cycle runs inside an
effect and re-runs whenever a value it read changes.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from ..core.defaults import ConditionSet, evaluate_conditions
from ..core.handlers import apply_property
from ..core.matchers import matches_condition
from .dispatcher import Dispatcher
from .registry import EngineConfig
from .targets import TargetResolver

logger = logging.getLogger(__name__)

_NO_MATCH = object()


class WhenStateOptions(BaseModel):
    """Options recognised by `when_state`."""
    model_config = ConfigDict(extra="ignore")

    reactive: bool = True


class Binding:
    """
    One live `when_state` call.

    Reactive bindings hold the effect handle from the reactive collaborator;
    `destroy()` disposes it. Static bindings re-run only through `update()`
    and their `destroy()` does nothing.
    """

    def __init__(self, run: Callable[[], bool], handle: Any = None):
        self._run = run
        self.handle = handle

    @property
    def reactive(self) -> bool:
        return self.handle is not None

    @property
    def mode(self) -> str:
        return "reactive" if self.reactive else "static"

    def update(self) -> bool:
        return self._run()

    def destroy(self) -> None:
        if self.handle is None:
            return
        dispose = getattr(self.handle, "dispose", None)
        if callable(dispose):
            dispose()
        elif callable(self.handle):
            self.handle()

    dispose = destroy

    def __repr__(self):
        return f"Binding(mode={self.mode!r})"


class ConditionsEngine:
    """
    Declarative conditional-update engine.

    Args:
        effect: `effect(fn) -> handle`; runs `fn` now and again whenever a
            reactive value it read changes
        batch: `batch(fn)`; runs `fn`, coalescing the effect re-runs it causes
        is_reactive: `is_reactive(value) -> bool`
        document: native lookup fallback for selector strings
        elements, class_collections, query_all: optional element caches,
            see `TargetResolver`
        config: rule tables to share; a fresh default `EngineConfig` otherwise
    """

    def __init__(self, effect: Optional[Callable] = None, batch: Optional[Callable] = None,
                 is_reactive: Optional[Callable[[Any], bool]] = None, document: Any = None,
                 elements: Any = None, class_collections: Any = None,
                 query_all: Optional[Callable[[str], Any]] = None,
                 config: Optional[EngineConfig] = None):
        self._effect = effect
        self._batch = batch
        self._is_reactive = is_reactive
        self.config = config or EngineConfig()
        self.resolver = TargetResolver(document, elements, class_collections, query_all)
        self.dispatcher = Dispatcher(self.config)

    @classmethod
    def with_reactivity(cls, system=None, **kwargs) -> "ConditionsEngine":
        "Engine wired to a `ReactiveSystem` (the global one by default)"
        from ..signals import get_reactive_system
        system = system or get_reactive_system()
        return cls(effect=system.effect, batch=system.batch, is_reactive=system.is_reactive, **kwargs)

    @property
    def has_reactivity(self) -> bool:
        return self._effect is not None and self._batch is not None

    @property
    def mode(self) -> str:
        return "reactive" if self.has_reactivity else "static"

    @property
    def document(self) -> Any:
        return self.resolver.document

    @document.setter
    def document(self, document: Any) -> None:
        self.resolver.document = document

    # --- matching --------------------------------------------------------
    def test_condition(self, value: Any, condition: Any) -> bool:
        return matches_condition(self.config.matchers, value, condition)

    def _find_match(self, value: Any, conditions: Mapping) -> Any:
        for condition, config in conditions.items():
            try:
                matched = self.test_condition(value, condition)
            except Exception as e:
                logger.warning(f"Condition {condition!r} failed to evaluate; skipped: {e}")
                continue
            if matched:
                return config
        return _NO_MATCH

    def find_match(self, value: Any, conditions: ConditionSet) -> Optional[Mapping]:
        "The config the first matching condition selects for `value`, or None"
        config = self._find_match(value, evaluate_conditions(conditions))
        return None if config is _NO_MATCH else config

    def get_elements(self, selector: Any) -> List[Any]:
        return self.resolver.resolve(selector)

    # --- application -----------------------------------------------------
    def apply_property(self, element, key: str, value: Any) -> bool:
        return apply_property(self.config.handlers, element, key, value)

    def apply_config(self, element, config: Mapping) -> None:
        self.dispatcher.apply_config(element, config)

    def _run_cycle(self, get_value: Callable[[], Any], conditions: ConditionSet, selector: Any) -> bool:
        try:
            value = get_value()
        except Exception as e:
            logger.error(f"Error getting value: {e}", exc_info=True)
            return False
        try:
            current = evaluate_conditions(conditions)
        except Exception as e:
            logger.error(f"Error evaluating conditions: {e}", exc_info=True)
            return False
        config = self._find_match(value, current)
        if config is _NO_MATCH or config is None:
            logger.info(f"No matching condition for value: {value!r}")
            return False
        if not isinstance(config, Mapping):
            logger.warning(f"Matched config must be a mapping, got {type(config).__name__}")
            return False
        try:
            elements = self.resolver.resolve(selector)
        except Exception as e:
            logger.warning(f"Could not resolve selector {selector!r}: {e}")
            return False
        if not elements:
            logger.warning(f"No elements found for selector: {selector!r}")
            return False
        self.dispatcher.dispatch(elements, config)
        return True

    # --- public surface --------------------------------------------------
    def when_state(self, value_fn: Any, conditions: ConditionSet, selector: Any,
                   options: Union[WhenStateOptions, Mapping, None] = None, **kwargs) -> Optional[Binding]:
        """
        Bind `value_fn` and `conditions` to the elements `selector` resolves.

        Runs reactively (inside `effect`) when reactive primitives are wired,
        `options.reactive` is not False and `value_fn` is callable or a
        reactive value; otherwise applies once and returns a static binding.
        """
        if not isinstance(conditions, Mapping) and not callable(conditions):
            logger.error("Conditions must be a mapping or a function returning a mapping")
            return None
        if isinstance(options, WhenStateOptions):
            opts = options
        else:
            opts = WhenStateOptions(**{**(options or {}), **kwargs})

        is_function = callable(value_fn)
        get_value = value_fn if is_function else (lambda: value_fn)
        use_reactive = opts.reactive and self.has_reactivity
        value_is_reactive = not is_function and self._is_reactive is not None and self._is_reactive(value_fn)

        def run() -> bool:
            return self._run_cycle(get_value, conditions, selector)

        if use_reactive and (is_function or value_is_reactive):
            handle = self._effect(run)
            return Binding(run, handle)
        run()
        return Binding(run)

    def apply(self, value: Any, conditions: ConditionSet, selector: Any) -> "ConditionsEngine":
        "One-shot application; callables are called for their value"
        if not isinstance(conditions, Mapping) and not callable(conditions):
            logger.error("Conditions must be a mapping or a function returning a mapping")
            return self
        get_value = value if callable(value) else (lambda: value)
        self._run_cycle(get_value, conditions, selector)
        return self

    def watch(self, value_fn: Any, conditions: ConditionSet, selector: Any) -> Union[Binding, "ConditionsEngine", None]:
        if not self.has_reactivity:
            logger.warning("watch() requires reactive primitives; applying once instead")
            return self.apply(value_fn, conditions, selector)
        return self.when_state(value_fn, conditions, selector, WhenStateOptions(reactive=True))

    when_collection = when_state

    def batch(self, fn: Callable[[], Any]) -> Any:
        if self._batch is not None:
            return self._batch(fn)
        return fn()

    def register_matcher(self, name: str, matcher: Any) -> "ConditionsEngine":
        self.config.register_matcher(name, matcher)
        return self

    def register_handler(self, name: str, handler: Any) -> "ConditionsEngine":
        self.config.register_handler(name, handler)
        return self

    def register_matchers(self, matchers) -> "ConditionsEngine":
        self.config.register_matchers(matchers)
        return self

    def register_handlers(self, handlers) -> "ConditionsEngine":
        self.config.register_handlers(handlers)
        return self

    def create_simple_matcher(self, name: str, keyword: str, check) -> "ConditionsEngine":
        self.config.create_simple_matcher(name, keyword, check)
        return self

    def create_simple_handler(self, name: str, key: str, apply) -> "ConditionsEngine":
        self.config.create_simple_handler(name, key, apply)
        return self

    def has_matcher(self, name: str) -> bool:
        return self.config.has_matcher(name)

    def has_handler(self, name: str) -> bool:
        return self.config.has_handler(name)

    def get_matchers(self) -> List[str]:
        return self.config.matcher_names()

    def get_handlers(self) -> List[str]:
        return self.config.handler_names()

    # camelCase surface
    whenState = when_state
    whenCollection = when_state
    registerMatcher = register_matcher
    registerHandler = register_handler
    getMatchers = get_matchers
    getHandlers = get_handlers
    registerMatchers = register_matchers
    registerHandlers = register_handlers
    createSimpleMatcher = create_simple_matcher
    createSimpleHandler = create_simple_handler
    hasMatcher = has_matcher
    hasHandler = has_handler
    testCondition = test_condition
    getElements = get_elements

    def __repr__(self):
        return f"ConditionsEngine(mode={self.mode!r}, matchers={len(self.config.matchers)}, handlers={len(self.config.handlers)})"
