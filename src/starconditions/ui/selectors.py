"""Minimal CSS selector matching over element trees."""

import re
from functools import lru_cache
from typing import Any, List, Optional, Tuple

_TOKEN = re.compile(
    r"""\s*(?P<comb>>)\s*
      | (?P<ws>\s+)
      | (?P<tag>\*|[a-zA-Z][\w-]*)
      | \#(?P<id>[\w-]+)
      | \.(?P<cls>[\w-]+)
      | \[\s*(?P<attr>[\w:-]+)\s*(?:(?P<op>[~^$*]?=)\s*(?P<val>"[^"]*"|'[^']*'|[^\]\s]+)\s*)?\]
    """,
    re.VERBOSE,
)


class SelectorError(ValueError):
    pass


class Compound:
    def __init__(self):
        self.tag: Optional[str] = None
        self.ids: List[str] = []
        self.classes: List[str] = []
        self.attrs: List[Tuple[str, Optional[str], Optional[str]]] = []

    def matches(self, el) -> bool:
        if self.tag and self.tag != '*' and el.name != self.tag.lower():
            return False
        if any(el.id != i for i in self.ids):
            return False
        classes = el.className.split()
        if any(c not in classes for c in self.classes):
            return False
        for name, op, val in self.attrs:
            actual = el.getAttribute(name)
            if actual is None:
                return False
            if op is None:
                continue
            if op == '=' and actual != val: return False
            if op == '~=' and val not in actual.split(): return False
            if op == '^=' and not actual.startswith(val): return False
            if op == '$=' and not actual.endswith(val): return False
            if op == '*=' and val not in actual: return False
        return True


@lru_cache(maxsize=128)
def parse(selector: str) -> List[List[Tuple[str, Compound]]]:
    """
    Parse a selector group into chains of `(combinator, compound)` pairs.

    The combinator of the first compound is always `''`; later ones are
    `' '` (descendant) or `'>'` (child).
    """
    groups = []
    for part in selector.split(','):
        part = part.strip()
        if not part:
            raise SelectorError(f"Empty selector in {selector!r}")
        chain, current, comb, pos = [], None, '', 0
        while pos < len(part):
            m = _TOKEN.match(part, pos)
            if not m or m.end() == pos:
                raise SelectorError(f"Unsupported selector syntax: {part[pos:]!r}")
            pos = m.end()
            if m.group('comb') or m.group('ws'):
                if current is not None:
                    chain.append((comb, current))
                    current = None
                comb = '>' if m.group('comb') else ' '
                continue
            if current is None:
                current = Compound()
            if m.group('tag'):
                current.tag = m.group('tag')
            elif m.group('id'):
                current.ids.append(m.group('id'))
            elif m.group('cls'):
                current.classes.append(m.group('cls'))
            else:
                val = m.group('val')
                if val and val[0] in '"\'':
                    val = val[1:-1]
                current.attrs.append((m.group('attr').lower(), m.group('op'), val))
        if current is None:
            raise SelectorError(f"Selector ends with a combinator: {part!r}")
        chain.append((comb, current))
        chain[0] = ('', chain[0][1])
        groups.append(chain)
    return groups


def _matches_chain(el, chain) -> bool:
    comb, compound = chain[-1]
    if not compound.matches(el):
        return False
    if len(chain) == 1:
        return True
    rest = chain[:-1]
    parent = el.parent
    if comb == '>':
        return parent is not None and _matches_chain(parent, rest)
    while parent is not None:
        if _matches_chain(parent, rest):
            return True
        parent = parent.parent
    return False


def matches(el, selector: str) -> bool:
    return any(_matches_chain(el, chain) for chain in parse(selector))


def query_all(root: Any, selector: str) -> list:
    "Descendants of `root` matching `selector`, in document order"
    groups = parse(selector)
    return [el for el in root.iter() if any(_matches_chain(el, chain) for chain in groups)]
