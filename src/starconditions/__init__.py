"""
starconditions - Declarative Conditional Updates for Element Trees

Match a (static or reactive) value against named conditions and apply the
first matching condition's property config to one element or a whole
collection, re-running automatically when the value changes.
"""

from typing import Any, Optional

from .core import (
    UNDEFINED, ConditionsError, InvalidRuleError, PatternError,
    Matcher, Handler, ListenerRegistry, DEFAULT_PATTERN,
)
from .app import (
    Binding, ConditionsEngine, EngineConfig, WhenStateOptions,
    ApplicationConfig, Environment, LoggingConfig, EngineSettings,
    configure_logging, create_engine, get_config, set_config,
)
from .signals import ReactiveSystem, ReactiveState, Signal, reactive, effect, is_reactive, get_reactive_system
from . import ui
from .ui import *

_engine: Optional[ConditionsEngine] = None

def get_engine() -> ConditionsEngine:
    """Get the shared default engine, creating it from the global configuration"""
    global _engine
    if _engine is None:
        _engine = create_engine()
    return _engine

def set_engine(engine: Optional[ConditionsEngine]) -> None:
    global _engine
    _engine = engine

def set_document(document: Any) -> None:
    "Document the default engine resolves selector strings against"
    get_engine().document = document

def when_state(value_fn, conditions, selector, options=None, **kwargs):
    return get_engine().when_state(value_fn, conditions, selector, options, **kwargs)

def apply(value, conditions, selector):
    return get_engine().apply(value, conditions, selector)

def watch(value_fn, conditions, selector):
    return get_engine().watch(value_fn, conditions, selector)

def batch(fn):
    return get_engine().batch(fn)

def register_matcher(name, matcher):
    return get_engine().register_matcher(name, matcher)

def register_handler(name, handler):
    return get_engine().register_handler(name, handler)

def get_matchers():
    return get_engine().get_matchers()

def get_handlers():
    return get_engine().get_handlers()

def register_matchers(matchers):
    return get_engine().register_matchers(matchers)

def register_handlers(handlers):
    return get_engine().register_handlers(handlers)

def create_simple_matcher(name, keyword, check):
    return get_engine().create_simple_matcher(name, keyword, check)

def create_simple_handler(name, key, apply):
    return get_engine().create_simple_handler(name, key, apply)

def has_matcher(name):
    return get_engine().has_matcher(name)

def has_handler(name):
    return get_engine().has_handler(name)


__all__ = [
    # Engine
    'ConditionsEngine',
    'EngineConfig',
    'Binding',
    'WhenStateOptions',
    'get_engine',
    'set_engine',
    'set_document',
    'when_state',
    'apply',
    'watch',
    'batch',
    'register_matcher',
    'register_handler',
    'get_matchers',
    'get_handlers',
    'register_matchers',
    'register_handlers',
    'create_simple_matcher',
    'create_simple_handler',
    'has_matcher',
    'has_handler',

    # Rules
    'Matcher',
    'Handler',
    'ListenerRegistry',
    'UNDEFINED',
    'DEFAULT_PATTERN',
    'ConditionsError',
    'InvalidRuleError',
    'PatternError',

    # Configuration
    'ApplicationConfig',
    'Environment',
    'LoggingConfig',
    'EngineSettings',
    'configure_logging',
    'create_engine',
    'get_config',
    'set_config',

    # Reactivity
    'ReactiveSystem',
    'ReactiveState',
    'Signal',
    'reactive',
    'effect',
    'is_reactive',
    'get_reactive_system',

    # UI
    'Element',
    'Document',
    'NodeList',
    'HTMLCollection',
    'Event',
    *ui.html_tags,
    *ui.self_closing_tags,
]
