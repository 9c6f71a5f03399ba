"""
Reactive Signal System

Default reactive collaborator for the conditions engine. Reads of reactive
values inside an `effect` body are recorded as dependencies; writes re-run
the dependent effects synchronously, or once at the end of the outermost
`batch`.

Key pieces:
- ReactiveSystem: dependency tracking, effects and batching
- reactive(): mapping proxy with tracked item and attribute access
- Signal: a single tracked value
- ReactiveState: pydantic model whose fields are tracked
"""

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Callable, ClassVar, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, PrivateAttr

logger = logging.getLogger(__name__)

DepMap = Dict[Any, Set["_Effect"]]


class _Effect:
    def __init__(self, system: "ReactiveSystem", fn: Callable[[], Any]):
        self.system = system
        self.fn = fn
        self.active = True
        self.running = False
        self.sources: List[tuple] = []

    def _cleanup(self):
        for deps, key in self.sources:
            effects = deps.get(key)
            if effects is not None:
                effects.discard(self)
        self.sources = []

    def run(self):
        if not self.active or self.running:
            return
        self._cleanup()
        self.running = True
        self.system._stack.append(self)
        try:
            self.fn()
        finally:
            self.system._stack.pop()
            self.running = False

    def stop(self):
        self.active = False
        self._cleanup()


class EffectHandle:
    """Returned by `effect()`; `dispose()` stops future re-runs."""

    def __init__(self, effect: _Effect):
        self._effect = effect

    @property
    def active(self) -> bool:
        return self._effect.active

    def dispose(self) -> None:
        self._effect.stop()

    def __call__(self) -> None:
        self.dispose()


class ReactiveSystem:
    """
    Dependency tracker shared by every reactive value created against it.

    Effects are synchronous: a write outside `batch()` re-runs dependents
    before returning. An effect never re-triggers itself.
    """

    def __init__(self):
        self._stack: List[_Effect] = []
        self._batch_depth = 0
        self._pending: Dict[_Effect, None] = {}

    @property
    def current(self) -> Optional[_Effect]:
        return self._stack[-1] if self._stack else None

    def track(self, deps: DepMap, key: Any) -> None:
        eff = self.current
        if eff is None:
            return
        effects = deps.setdefault(key, set())
        if eff not in effects:
            effects.add(eff)
            eff.sources.append((deps, key))

    def trigger(self, deps: DepMap, key: Any) -> None:
        for eff in list(deps.get(key, ())):
            if eff is self.current:
                continue
            if self._batch_depth > 0:
                self._pending[eff] = None
            else:
                self._run(eff)

    def _run(self, eff: _Effect) -> None:
        try:
            eff.run()
        except Exception as e:
            logger.error(f"Reactive effect failed: {e}", exc_info=True)

    def effect(self, fn: Callable[[], Any]) -> EffectHandle:
        eff = _Effect(self, fn)
        eff.run()
        return EffectHandle(eff)

    def batch(self, fn: Callable[[], Any]) -> Any:
        self._batch_depth += 1
        try:
            return fn()
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self._flush()

    def _flush(self) -> None:
        while self._pending:
            pending = list(self._pending)
            self._pending.clear()
            for eff in pending:
                self._run(eff)

    def is_reactive(self, value: Any) -> bool:
        return isinstance(value, (ReactiveDict, Signal, ReactiveState)) or bool(getattr(value, "__reactive__", False))

    def reactive(self, target: Optional[Mapping] = None, **values) -> "ReactiveDict":
        return ReactiveDict({**(target or {}), **values}, system=self)

    def signal(self, value: Any = None) -> "Signal":
        return Signal(value, system=self)


_reactive_system = ReactiveSystem()


def get_reactive_system() -> ReactiveSystem:
    """Get the global reactive system"""
    return _reactive_system


class ReactiveDict(MutableMapping):
    """Mapping whose item (and attribute) reads are tracked and writes trigger effects."""

    def __init__(self, data: Optional[Mapping] = None, system: Optional[ReactiveSystem] = None):
        object.__setattr__(self, "_data", dict(data or {}))
        object.__setattr__(self, "_deps", {})
        object.__setattr__(self, "_system", system or get_reactive_system())

    def __getitem__(self, key):
        self._system.track(self._deps, key)
        value = self._data[key]
        if isinstance(value, Mapping) and not isinstance(value, ReactiveDict):
            value = self._data[key] = ReactiveDict(value, system=self._system)
        return value

    def __setitem__(self, key, value):
        if key in self._data and self._data[key] is value:
            return
        self._data[key] = value
        self._system.trigger(self._deps, key)

    def __delitem__(self, key):
        del self._data[key]
        self._system.trigger(self._deps, key)

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name, value):
        self[name] = value

    def to_dict(self) -> Dict[str, Any]:
        return {k: v.to_dict() if isinstance(v, ReactiveDict) else v for k, v in self._data.items()}

    def __repr__(self):
        return f"reactive({self._data!r})"


class Signal:
    """A single tracked value."""

    def __init__(self, value: Any = None, system: Optional[ReactiveSystem] = None):
        self._value = value
        self._deps: DepMap = {}
        self._system = system or get_reactive_system()

    @property
    def value(self) -> Any:
        self._system.track(self._deps, "value")
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        if new_value is self._value:
            return
        self._value = new_value
        self._system.trigger(self._deps, "value")

    def peek(self) -> Any:
        "Read without tracking"
        return self._value

    def __call__(self) -> Any:
        return self.value

    def __repr__(self):
        return f"Signal({self._value!r})"


class ReactiveState(BaseModel):
    """
    Base class for tracked state models.

    Field reads inside an effect register a dependency on that field;
    assigning a different value re-runs the dependent effects.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)
    reactive_system: ClassVar[Optional[ReactiveSystem]] = None

    _deps: Dict[str, set] = PrivateAttr(default_factory=dict)

    @classmethod
    def tracking_system(cls) -> ReactiveSystem:
        return cls.reactive_system or get_reactive_system()

    def __getattribute__(self, name):
        value = super().__getattribute__(name)
        if not name.startswith("_") and name in type(self).model_fields:
            type(self).tracking_system().track(self._deps, name)
        return value

    def __setattr__(self, name, value):
        if name.startswith("_") or name not in type(self).model_fields:
            super().__setattr__(name, value)
            return
        old = self.__dict__.get(name)
        super().__setattr__(name, value)
        if old is not value and old != value:
            type(self).tracking_system().trigger(self._deps, name)

    @property
    def signals(self) -> Dict[str, Any]:
        return self.model_dump()


def effect(fn: Callable[[], Any]) -> EffectHandle:
    return _reactive_system.effect(fn)

def batch(fn: Callable[[], Any]) -> Any:
    return _reactive_system.batch(fn)

def is_reactive(value: Any) -> bool:
    return _reactive_system.is_reactive(value)

def reactive(target: Optional[Mapping] = None, **values) -> ReactiveDict:
    return _reactive_system.reactive(target, **values)


__all__ = [
    "ReactiveSystem", "EffectHandle", "ReactiveDict", "Signal", "ReactiveState",
    "get_reactive_system", "effect", "batch", "is_reactive", "reactive",
]
