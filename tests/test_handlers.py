"""
Tests for the property handler table.
"""

from unittest.mock import Mock

import pytest

from starconditions import Div, Input, Button
from starconditions.core import Handler, ListenerRegistry, apply_property, default_handlers


@pytest.fixture
def listeners():
    return ListenerRegistry()


@pytest.fixture
def handlers(listeners):
    return default_handlers(listeners)


def test_fallback_is_last(handlers):
    assert handlers[-1].name == "fallback"
    assert [h.name for h in handlers][:3] == ["style", "classList", "setAttribute"]


def test_style(handlers):
    el = Div()
    apply_property(handlers, el, "style", {"color": "red", "backgroundColor": "blue", "margin": None})
    assert el.style["color"] == "red"
    assert el.style["background-color"] == "blue"
    assert "margin" not in el.style
    assert el.getAttribute("style") == "color: red; background-color: blue"


def test_class_list_array_replaces(handlers):
    el = Div(cls="old stale")
    apply_property(handlers, el, "classList", ["a", "", None, "b"])
    assert el.className == "a b"


def test_class_list_operations(handlers):
    el = Div(cls="one two")
    apply_property(handlers, el, "classList", {
        "add": ["three", "four"],
        "remove": "one",
        "toggle": "two",
        "replace": ["three", "3"],
    })
    assert el.className.split() == ["3", "four"]


def test_class_list_replace_needs_two_operands(handlers):
    el = Div(cls="a")
    apply_property(handlers, el, "classList", {"replace": ["a"]})
    assert el.className == "a"


def test_attrs(handlers):
    el = Input(disabled=True, title="x")
    apply_property(handlers, el, "attrs", {"placeholder": "Name", "disabled": False, "title": None, "maxlength": 5})
    assert el.getAttribute("placeholder") == "Name"
    assert el.getAttribute("maxlength") == "5"
    assert not el.hasAttribute("disabled")
    assert not el.hasAttribute("title")


def test_set_attribute_key_alias(handlers):
    el = Div()
    apply_property(handlers, el, "setAttribute", {"role": "alert", "aria-live": True})
    assert el.getAttribute("role") == "alert"
    assert el.getAttribute("aria-live") == "true"


def test_remove_attribute(handlers):
    el = Div(title="t", role="r", lang="en")
    apply_property(handlers, el, "removeAttribute", "title")
    apply_property(handlers, el, "removeAttribute", ["role", "lang"])
    assert el.attributes == {}


def test_dataset(handlers):
    el = Div()
    apply_property(handlers, el, "dataset", {"userId": 7, "active": True})
    assert el.getAttribute("data-user-id") == "7"
    assert el.dataset["active"] == "true"


def test_add_event_listener_records(handlers, listeners):
    el = Button()
    clicked = Mock()
    focused = Mock()
    apply_property(handlers, el, "addEventListener", {
        "click": clicked,
        "focus": {"handler": focused, "options": {"once": True}},
        "blur": "not callable",
    })
    assert el.listenerCount("click") == 1
    assert el.listenerCount("focus") == 1
    assert el.listenerCount("blur") == 0
    assert listeners.count(el) == 2

    el.dispatchEvent("click")
    clicked.assert_called_once()
    el.dispatchEvent("focus")
    el.dispatchEvent("focus")
    focused.assert_called_once()


def test_remove_event_listener(handlers):
    el = Button()
    handler = Mock()
    el.addEventListener("click", handler)
    apply_property(handlers, el, "removeEventListener", ["click", handler])
    assert el.listenerCount("click") == 0


def test_event_property(handlers):
    el = Button()
    handler = Mock()
    apply_property(handlers, el, "onclick", handler)
    el.dispatchEvent("click")
    handler.assert_called_once()


def test_native_properties(handlers):
    el = Div("old")
    apply_property(handlers, el, "textContent", "new")
    apply_property(handlers, el, "hidden", True)
    assert el.textContent == "new"
    assert el.hidden is True
    assert el.hasAttribute("hidden")

    apply_property(handlers, el, "innerHTML", "<b>bold</b>")
    assert el.render() == '<div hidden><b>bold</b></div>'


def test_primitive_fallback(handlers):
    el = Div()
    apply_property(handlers, el, "aria-label", "Close")
    apply_property(handlers, el, "tabindex", 0)
    apply_property(handlers, el, "draggable", True)
    assert el.getAttribute("aria-label") == "Close"
    assert el.getAttribute("tabindex") == "0"
    assert el.getAttribute("draggable") == "true"


def test_unhandled_key_is_reported(handlers):
    el = Div()
    assert apply_property(handlers, el, "mystery", {"nested": 1}) is False
    assert el.attributes == {}


def test_handler_errors_propagate(handlers):
    """Per-key isolation is the dispatcher's job."""
    boom = Handler("boom", lambda k, v, el=None: k == "boom", Mock(side_effect=RuntimeError("boom")))
    with pytest.raises(RuntimeError):
        apply_property([boom] + handlers, Div(), "boom", 1)
