from collections.abc import Sequence
from typing import Any, Iterable, Iterator, Optional

from .selectors import query_all


class NodeList(Sequence):
    """Static, ordered result of `querySelectorAll`."""

    def __init__(self, nodes: Iterable = ()):
        self._nodes = list(nodes)

    @property
    def length(self) -> int:
        return len(self._nodes)

    def item(self, index: int):
        return self._nodes[index] if 0 <= index < len(self._nodes) else None

    def __getitem__(self, index): return self._nodes[index]
    def __len__(self): return len(self._nodes)
    def __repr__(self): return f"{type(self).__name__}({self._nodes!r})"


class HTMLCollection(NodeList):
    """Result of `getElementsByClassName`; also addressable by element id."""

    def namedItem(self, name: str):
        return next((n for n in self._nodes if n.id == name or n.getAttribute('name') == name), None)


class Document:
    """
    Root of an element tree with the lookup surface the target resolver
    falls back to when no element cache is wired in.
    """

    def __init__(self, *children, body=None):
        if body is None:
            from . import Body
            body = Body()
        self.body = body
        self.body.append(*children)

    def iter(self) -> Iterator[Any]:
        yield self.body
        yield from self.body.iter()

    def append(self, *nodes) -> "Document":
        self.body.append(*nodes)
        return self

    def getElementById(self, element_id: str):
        return next((el for el in self.iter() if el.id == element_id), None)

    def getElementsByClassName(self, names: str) -> HTMLCollection:
        wanted = names.split()
        return HTMLCollection(el for el in self.iter() if all(c in el.className.split() for c in wanted))

    def getElementsByTagName(self, tag: str) -> HTMLCollection:
        tag = tag.lower()
        return HTMLCollection(el for el in self.iter() if tag == '*' or el.name == tag)

    def querySelectorAll(self, selector: str) -> NodeList:
        return NodeList(query_all(self, selector))

    def querySelector(self, selector: str) -> Optional[Any]:
        found = query_all(self, selector)
        return found[0] if found else None

    def render(self) -> str:
        return self.body.render()
