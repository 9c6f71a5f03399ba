"""
Application Layer

Wires the core rule tables to element targets:
- targets: selector -> element resolution
- dispatcher: shared vs. indexed config application
- registry: the per-engine matcher/handler tables
- engine: bindings, reactive wiring and the public surface
- configurator: environment-aware configuration and logging
"""

from .registry import EngineConfig
from .targets import TargetResolver, is_element, to_list
from .dispatcher import Dispatcher, split_config
from .engine import Binding, ConditionsEngine, WhenStateOptions
from .configurator import (
    ApplicationConfig, EngineSettings, Environment, LoggingConfig,
    configure_logging, create_engine, get_config, set_config,
)

__all__ = [
    'EngineConfig',
    'TargetResolver',
    'is_element',
    'to_list',
    'Dispatcher',
    'split_config',
    'Binding',
    'ConditionsEngine',
    'WhenStateOptions',
    'ApplicationConfig',
    'EngineSettings',
    'Environment',
    'LoggingConfig',
    'configure_logging',
    'create_engine',
    'get_config',
    'set_config',
]
