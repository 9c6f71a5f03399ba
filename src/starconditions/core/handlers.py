"""
Property Handlers

Ordered strategy table translating one configuration key/value pair into a
mutation of one element. The last entry, the primitive-to-attribute
fallback, always stays last.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, List

from fastcore.basics import listify

from .errors import InvalidRuleError
from .listeners import ListenerRegistry
from .utils import UNDEFINED, js_string

logger = logging.getLogger(__name__)

FALLBACK_HANDLER = "fallback"


@dataclass
class Handler:
    """One row of the handler table: `test(key, value, element)` then `apply(element, value, key)`."""
    name: str
    test: Callable[[str, Any, Any], bool]
    apply: Callable[[Any, Any, str], None]


def as_handler(name: str, rule: Any) -> Handler:
    "Coerce a `Handler`, a mapping or any object with `test`/`apply` into a `Handler`"
    if isinstance(rule, Handler):
        return Handler(name, rule.test, rule.apply)
    if isinstance(rule, Mapping):
        test, apply = rule.get("test"), rule.get("apply")
    else:
        test, apply = getattr(rule, "test", None), getattr(rule, "apply", None)
    if not callable(test) or not callable(apply):
        raise InvalidRuleError(f"Handler {name!r} must provide callable test() and apply()")
    return Handler(name, test, apply)


def _is_seq(value) -> bool:
    return isinstance(value, (list, tuple))


def _is_object(value) -> bool:
    "`typeof value === 'object' && value !== null`"
    return isinstance(value, (Mapping, list, tuple))


def has_property(element, key: str) -> bool:
    "`key in element`, for elements that support it, else an attribute lookup"
    try:
        return key in element
    except TypeError:
        return not key.startswith("_") and hasattr(element, key)


def _apply_style(element, val, key=None):
    for prop, value in val.items():
        if value is not None and value is not UNDEFINED:
            element.style[prop] = value


def _apply_class_list(element, val, key=None):
    if _is_seq(val):
        element.className = " ".join(js_string(c) for c in val if c)
        return
    class_list = element.classList
    for method, classes in val.items():
        if method == "replace":
            if _is_seq(classes) and len(classes) == 2:
                class_list.replace(classes[0], classes[1])
        elif method in ("add", "remove", "toggle"):
            op = getattr(class_list, method)
            for cls in listify(classes):
                if cls:
                    op(cls)


def _apply_attrs(element, val, key=None):
    for attr, value in val.items():
        if value is None or value is UNDEFINED or value is False:
            element.removeAttribute(attr)
        else:
            element.setAttribute(attr, js_string(value))


def _apply_remove_attribute(element, val, key=None):
    if _is_seq(val):
        for attr in val:
            element.removeAttribute(attr)
    elif isinstance(val, str):
        element.removeAttribute(val)


def _apply_dataset(element, val, key=None):
    for data_key, data_val in val.items():
        element.dataset[data_key] = js_string(data_val)


def _apply_remove_listener(element, val, key=None):
    event, handler, *rest = val
    element.removeEventListener(event, handler, rest[0] if rest else None)


def _set_property(element, val, key):
    setattr(element, key, val)


def _apply_fallback(element, val, key):
    element.setAttribute(key, js_string(val))


def _add_listeners(listeners: ListenerRegistry):
    def apply(element, val, key=None):
        for event, config in val.items():
            handler, options = None, None
            if callable(config):
                handler = config
            elif isinstance(config, Mapping):
                handler, options = config.get("handler"), config.get("options")
            if callable(handler):
                element.addEventListener(event, handler, options)
                listeners.record(element, event, handler, options)
    return apply


def default_handlers(listeners: ListenerRegistry) -> List[Handler]:
    "Fresh copy of the built-in handler table; `fallback` is last"
    return [
        Handler("style", lambda k, v, el=None: k == "style" and isinstance(v, Mapping), _apply_style),
        Handler("classList", lambda k, v, el=None: k == "classList" and _is_object(v), _apply_class_list),
        Handler("setAttribute", lambda k, v, el=None: k in ("attrs", "setAttribute") and isinstance(v, Mapping),
                _apply_attrs),
        Handler("removeAttribute", lambda k, v, el=None: k == "removeAttribute", _apply_remove_attribute),
        Handler("dataset", lambda k, v, el=None: k == "dataset" and isinstance(v, Mapping), _apply_dataset),
        Handler("addEventListener", lambda k, v, el=None: k == "addEventListener" and isinstance(v, Mapping),
                _add_listeners(listeners)),
        Handler("removeEventListener", lambda k, v, el=None: k == "removeEventListener" and _is_seq(v) and len(v) >= 2,
                _apply_remove_listener),
        Handler("eventProperty", lambda k, v, el=None: k.startswith("on") and callable(v), _set_property),
        Handler("nativeProperty", lambda k, v, el=None: has_property(el, k), _set_property),
        Handler(FALLBACK_HANDLER, lambda k, v, el=None: isinstance(v, (str, int, float)), _apply_fallback),
    ]


def apply_property(handlers: List[Handler], element, key: str, value: Any) -> bool:
    """
    Apply one key to one element using the first handler that accepts it.

    Returns False when no handler accepted the key. Errors raised by the
    handler propagate; the dispatcher isolates them per key.
    """
    key = js_string(key)
    for handler in handlers:
        if handler.test(key, value, element):
            handler.apply(element, value, key)
            return True
    logger.debug(f"No handler accepted key '{key}'")
    return False
