"""
Target Resolver

Turns a selector argument (element, collection or selector string) into an
ordered list of concrete elements. Element caches supplied by the host are
preferred; the document's native lookups are the fallback.
"""

from collections.abc import Mapping
from typing import Any, Callable, List, Optional

from ..ui import Element


def is_element(obj: Any) -> bool:
    if isinstance(obj, Element):
        return True
    if obj is None or isinstance(obj, (str, bytes, Mapping, list, tuple)):
        return False
    return callable(getattr(obj, "setAttribute", None)) and not hasattr(obj, "__len__")


def _length(collection: Any) -> Optional[int]:
    length = getattr(collection, "length", None)
    if length is None:
        try:
            length = len(collection)
        except TypeError:
            return None
    try:
        return int(length)
    except (TypeError, ValueError):
        return None


def _walk(collection: Any, length: int) -> List[Any]:
    items = []
    for i in range(length):
        try:
            items.append(collection[i])
        except (IndexError, KeyError, TypeError):
            continue
    return items


def to_list(collection: Any) -> List[Any]:
    """
    Convert a collection to a list.

    Collections without `__iter__`, or whose iteration fails, are walked by
    index up to their `length` (or `len()`), skipping positions that cannot
    be read. Without a known length such a collection yields nothing.
    """
    if collection is None:
        return []
    if isinstance(collection, list):
        return collection
    length = _length(collection)
    if length is not None and not hasattr(collection, "__iter__"):
        return _walk(collection, length)
    try:
        return list(collection)
    except (TypeError, KeyError, IndexError):
        return _walk(collection, length) if length is not None else []


def _lookup(source: Any, key: str) -> Any:
    if source is None:
        return None
    if isinstance(source, Mapping):
        return source.get(key)
    try:
        return source[key]
    except (KeyError, IndexError, TypeError):
        return getattr(source, key, None)


class TargetResolver:
    """
    Resolve selectors against optional element caches and a document.

    Args:
        document: object with `getElementById`, `getElementsByClassName`
            and `querySelectorAll`
        elements: id -> element cache
        class_collections: class name -> collection cache, or an object
            exposing such a cache as `ClassName`
        query_all: selector -> collection query function
    """

    def __init__(self, document: Any = None, elements: Any = None, class_collections: Any = None,
                 query_all: Optional[Callable[[str], Any]] = None):
        self.document = document
        self.elements = elements
        self.class_collections = getattr(class_collections, "ClassName", class_collections)
        self.query_all = query_all

    def resolve(self, selector: Any) -> List[Any]:
        if is_element(selector):
            return [selector]
        if isinstance(selector, str):
            return [el for el in self._resolve_string(selector.strip()) if is_element(el)]
        if selector is None or isinstance(selector, Mapping):
            return []
        return [el for el in to_list(selector) if is_element(el)]

    def _resolve_string(self, selector: str) -> List[Any]:
        if not selector:
            return []
        if selector.startswith("#") and _is_simple(selector):
            element_id = selector[1:]
            cached = _lookup(self.elements, element_id)
            if cached is not None:
                return [cached]
            if self.document is not None:
                found = self.document.getElementById(element_id)
                return [found] if found is not None else []
            return []
        if selector.startswith(".") and _is_simple(selector):
            class_name = selector[1:]
            cached = _lookup(self.class_collections, class_name)
            if cached is not None:
                return to_list(cached)
            if self.document is not None:
                return to_list(self.document.getElementsByClassName(class_name))
            return []
        if self.query_all is not None:
            result = self.query_all(selector)
            return to_list(result) if result is not None else []
        if self.document is not None:
            return to_list(self.document.querySelectorAll(selector))
        return []


def _is_simple(selector: str) -> bool:
    "`#name` or `.name` with no further selector syntax"
    return all(ch not in selector[1:] for ch in " .#[>:,")
