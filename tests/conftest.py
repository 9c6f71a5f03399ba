import pytest

from starconditions import ConditionsEngine, Document, Div, Span, Ul, Li, Button
from starconditions.signals import ReactiveSystem


@pytest.fixture
def document():
    """Small page: an output div, a list of three items and a button."""
    return Document(
        Div(id="out"),
        Ul(
            Li("one", cls="item"),
            Li("two", cls="item"),
            Li("three", cls="item"),
            id="list",
        ),
        Div(Span("note", cls="note"), id="panel", cls="panel"),
        Button("Go", id="go"),
    )


@pytest.fixture
def system():
    return ReactiveSystem()


@pytest.fixture
def engine(system, document):
    return ConditionsEngine.with_reactivity(system, document=document)


@pytest.fixture
def static_engine(document):
    return ConditionsEngine(document=document)


@pytest.fixture
def items(document):
    return list(document.getElementsByClassName("item"))
