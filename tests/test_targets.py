"""
Tests for selector resolution.
"""

from unittest.mock import Mock

from starconditions import Div, NodeList
from starconditions.app import TargetResolver, is_element, to_list


class IndexOnly:
    """Collection that refuses iteration but supports indexing, like some proxies."""

    def __init__(self, items):
        self._items = items
        self.length = len(items)

    def __iter__(self):
        raise TypeError("not iterable")

    def __getitem__(self, i):
        if i == 1:
            raise KeyError(i)
        return self._items[i]


def test_is_element():
    assert is_element(Div())
    assert not is_element("#out")
    assert not is_element([Div()])
    assert not is_element(None)
    assert not is_element({"setAttribute": print})


def test_to_list_index_walk():
    a, b, c = Div(), Div(), Div()
    assert to_list(IndexOnly([a, b, c])) == [a, c]
    assert to_list(NodeList([a, b])) == [a, b]
    assert to_list(None) == []


def test_element_and_collections(document):
    resolver = TargetResolver(document)
    el = Div()
    assert resolver.resolve(el) == [el]
    items = document.getElementsByClassName("item")
    assert resolver.resolve(items) == list(items)
    assert resolver.resolve([el, "junk", None]) == [el]


def test_id_and_class_lookups(document):
    resolver = TargetResolver(document)
    assert resolver.resolve("#out")[0].id == "out"
    assert resolver.resolve("#missing") == []
    assert [li.textContent for li in resolver.resolve(".item")] == ["one", "two", "three"]
    assert resolver.resolve(" #out ")[0].id == "out"


def test_other_selectors_use_query(document):
    resolver = TargetResolver(document)
    assert [el.textContent for el in resolver.resolve("#list > li")] == ["one", "two", "three"]
    assert resolver.resolve("#panel .note")[0].textContent == "note"
    assert resolver.resolve("") == []


def test_caches_are_preferred(document):
    cached = Div(id="cached")
    items = [Div(), Div()]
    resolver = TargetResolver(document, elements={"out": cached}, class_collections={"item": items})
    assert resolver.resolve("#out") == [cached]
    assert resolver.resolve(".item") == items
    # cache misses fall back to the document
    assert resolver.resolve("#go")[0].id == "go"


def test_class_collections_namespace(document):
    items = [Div()]
    collections = Mock()
    collections.ClassName = {"item": items}
    resolver = TargetResolver(document, class_collections=collections)
    assert resolver.resolve(".item") == items


def test_custom_query(document):
    found = [Div()]
    query_all = Mock(return_value=found)
    resolver = TargetResolver(document, query_all=query_all)
    assert resolver.resolve("ul li") == found
    query_all.assert_called_once_with("ul li")


def test_no_document():
    assert TargetResolver().resolve("#out") == []
    assert TargetResolver().resolve(".item") == []
    assert TargetResolver().resolve("div") == []


class KeyedCollection:
    """Index-addressable collection with no `__iter__` that raises KeyError past the end."""

    def __init__(self, items):
        self._items = dict(enumerate(items))
        self.length = len(items)

    def __getitem__(self, i):
        return self._items[i]


class ProxyLike:
    """Collection that answers every index, returning None past the end."""

    def __init__(self, items):
        self._items = items

    def __len__(self):
        return len(self._items)

    def __getitem__(self, i):
        return self._items[i] if 0 <= i < len(self._items) else None


def test_to_list_walks_keyed_collections():
    a, b = Div(), Div()
    assert to_list(KeyedCollection([a, b])) == [a, b]


def test_to_list_stops_at_length():
    a = Div()
    assert to_list(ProxyLike([a])) == [a]


def test_keyed_collection_as_target(static_engine):
    a, b = Div(), Div()
    static_engine.apply(1, {"1": {"title": "t", "-1": {"title": "last"}}}, KeyedCollection([a, b]))
    assert a.title == "t"
    assert b.title == "last"


def test_non_elements_are_filtered(document):
    el = Div()
    resolver = TargetResolver(document, elements={"out": "not an element"},
                              class_collections={"item": [el, None, 3]})
    assert resolver.resolve("#out") == []
    assert resolver.resolve(".item") == [el]
    assert resolver.resolve(ProxyLike([el, None])) == [el]
