"""
Tests for shared vs. indexed config dispatch.
"""

from unittest.mock import Mock

import pytest

from starconditions import Li
from starconditions.app import Dispatcher, EngineConfig, split_config


@pytest.fixture
def dispatcher():
    return Dispatcher(EngineConfig())


@pytest.fixture
def elements():
    return [Li("a"), Li("b"), Li("c")]


def test_split_config():
    shared, indexed = split_config({"style": {}, "0": {}, "-1": {}, 2: {}, "1.5": "x", "attrs": {}})
    assert list(shared) == ["style", "1.5", "attrs"]
    assert list(indexed) == ["0", "-1", 2]


def test_shared_and_indexed(dispatcher, elements):
    dispatcher.dispatch(elements, {
        "style": {"color": "red"},
        "0": {"textContent": "first"},
        "-1": {"textContent": "last"},
    })
    assert [el.style["color"] for el in elements] == ["red", "red", "red"]
    assert [el.textContent for el in elements] == ["first", "b", "last"]


def test_indexed_wins_over_shared(dispatcher, elements):
    """Indexed keys run after shared keys, whatever the key order."""
    dispatcher.dispatch(elements, {"1": {"textContent": "mine"}, "textContent": "all"})
    assert [el.textContent for el in elements] == ["all", "mine", "all"]


def test_out_of_range_index_is_skipped(dispatcher, elements, caplog):
    dispatcher.dispatch(elements, {"5": {"textContent": "x"}, "-4": {"textContent": "y"}, "0": {"title": "ok"}})
    assert [el.textContent for el in elements] == ["a", "b", "c"]
    assert elements[0].title == "ok"
    assert "Index 5 is out of range for 3 element(s)" in caplog.text
    assert "Index -4 is out of range" in caplog.text


def test_non_mapping_index_config(dispatcher, elements, caplog):
    dispatcher.dispatch(elements, {"0": "oops"})
    assert "must be a mapping" in caplog.text


def test_per_key_error_isolation(dispatcher, elements, caplog):
    """A failing key is logged and the remaining keys and elements still apply."""
    broken = Mock(side_effect=RuntimeError("bad handler"))
    dispatcher.config.register_handler("broken", {"test": lambda k, v, el=None: k == "broken", "apply": broken})
    dispatcher.dispatch(elements, {"broken": 1, "title": "t"})
    assert broken.call_count == 3
    assert [el.title for el in elements] == ["t", "t", "t"]
    assert "Failed to apply 'broken'" in caplog.text


def test_update_fast_path(dispatcher):
    el = Mock()
    dispatcher.apply_config(el, {"textContent": "x"})
    el.update.assert_called_once_with({"textContent": "x"})


def test_update_failure_falls_back(dispatcher, caplog):
    el = Li()
    el.update = Mock(side_effect=RuntimeError("no"))
    dispatcher.apply_config(el, {"textContent": "x"})
    assert el.textContent == "x"
    assert "element.update() failed" in caplog.text


def test_idempotent(dispatcher, elements):
    config = {"classList": {"add": "on"}, "style": {"color": "red"}, "0": {"dataset": {"k": 1}}}
    dispatcher.dispatch(elements, config)
    once = [el.render() for el in elements]
    dispatcher.dispatch(elements, config)
    assert [el.render() for el in elements] == once


def test_dispatch_releases_recorded_listeners(dispatcher, elements):
    handler = Mock()
    config = {"addEventListener": {"click": handler}, "0": {"addEventListener": {"focus": handler}}}
    for _ in range(3):
        dispatcher.dispatch(elements, config)
    assert [el.listenerCount("click") for el in elements] == [1, 1, 1]
    assert elements[0].listenerCount("focus") == 1
    assert dispatcher.config.listeners.count(elements[0]) == 2
