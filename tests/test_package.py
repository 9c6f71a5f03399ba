"""
Tests for the package-level convenience functions.
"""

import pytest

import starconditions as sc
from starconditions.signals import ReactiveSystem


@pytest.fixture
def default_engine(document):
    engine = sc.ConditionsEngine.with_reactivity(ReactiveSystem(), document=document)
    sc.set_engine(engine)
    yield engine
    sc.set_engine(None)


def test_module_functions_use_default_engine(default_engine, document):
    sc.apply("on", {"on": {"textContent": "On"}}, "#out")
    assert document.getElementById("out").textContent == "On"

    binding = sc.when_state(lambda: 2, {"1-3": {"title": "low"}}, "#out")
    assert binding.reactive
    assert document.getElementById("out").title == "low"

    assert sc.batch(lambda: "ok") == "ok"
    assert sc.get_engine() is default_engine


def test_module_registration(default_engine):
    sc.register_matcher("never", {"test": lambda c, v=None: c == "never", "match": lambda v, c=None: False})
    sc.register_handler("noop", {"test": lambda k, v, el=None: False, "apply": lambda el, v, k=None: None})
    assert "never" in sc.get_matchers()
    assert sc.get_handlers()[-2:] == ["noop", "fallback"]


def test_set_document(default_engine):
    doc = sc.Document(sc.Div(id="out"))
    sc.set_document(doc)
    sc.apply(1, {"default": {"textContent": "moved"}}, "#out")
    assert doc.getElementById("out").textContent == "moved"


def test_camel_case_surface(default_engine):
    assert default_engine.whenState == default_engine.when_state
    assert default_engine.getMatchers() == default_engine.get_matchers()


def test_module_bulk_and_simple_registration(default_engine):
    sc.create_simple_matcher("big", "big", lambda v: v > 100)
    sc.register_matchers({"tiny": {"test": lambda c, v=None: c == "tiny", "match": lambda v, c=None: v < 1}})
    sc.create_simple_handler("hint", "hint", lambda el, v: None)
    assert sc.has_matcher("big") and sc.has_matcher("tiny")
    assert sc.has_handler("hint")
    assert not sc.has_handler("missing")
