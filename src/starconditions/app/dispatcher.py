"""
Config Dispatcher

Applies a matched config to resolved elements. Integer-like keys (`"0"`,
`"-1"`, `2`) address one element by position; every other key is shared by
all elements. Shared keys are applied to every element before any indexed
key, so an index-specific override always wins within a cycle.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Tuple

from fastcore.basics import partition

from ..core.handlers import apply_property
from ..core.utils import is_index_key
from .registry import EngineConfig

logger = logging.getLogger(__name__)


def split_config(config: Mapping) -> Tuple[Dict[Any, Any], Dict[Any, Any]]:
    "Partition `config` into `(shared, indexed)` mappings, preserving order"
    indexed, shared = partition(list(config.items()), lambda kv: is_index_key(kv[0]))
    return dict(shared), dict(indexed)


class Dispatcher:
    def __init__(self, config: EngineConfig):
        self.config = config

    def apply_config(self, element, config: Mapping) -> None:
        """
        Apply every key of `config` to one element.

        An element exposing `update(config)` handles the whole config itself;
        if that raises, keys go through the handler table one by one. A key
        that fails is logged and skipped, the remaining keys still apply.
        """
        update = getattr(element, "update", None)
        if callable(update):
            try:
                update(config)
                return
            except Exception as e:
                logger.warning(f"element.update() failed, applying keys individually: {e}")
        for key, value in config.items():
            try:
                apply_property(self.config.handlers, element, key, value)
            except Exception as e:
                logger.warning(f"Failed to apply '{key}': {e}", exc_info=True)

    def dispatch(self, elements: List[Any], config: Mapping) -> None:
        shared, indexed = split_config(config)
        for element in elements:
            self.config.listeners.release(element)
        if shared:
            for element in elements:
                self.apply_config(element, shared)
        count = len(elements)
        for key, updates in indexed.items():
            index = int(key)
            if index < 0:
                index += count
            if not 0 <= index < count:
                logger.warning(f"Index {key} is out of range for {count} element(s); skipped")
                continue
            if not isinstance(updates, Mapping):
                logger.warning(f"Config for index {key} must be a mapping, got {type(updates).__name__}; skipped")
                continue
            self.apply_config(elements[index], updates)
