import html
import re
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional

from fastcore.basics import partition, risinstance

from ..core.utils import js_string
from .selectors import query_all

html_tags = ['A', 'P', 'I', 'B', 'H1','H2','H3','H4','H5','H6','Div','Span','Pre','Blockquote','Q','Ul','Ol','Li','Dl','Dt','Dd','Table','Thead','Tbody','Tfoot','Tr','Th','Td','Caption','Form','Label','Select','Option','Textarea','Button','Fieldset','Legend','Article','Section','Nav','Aside','Header','Footer','Main','Figure','Figcaption','Strong','Em','Mark','Code','Small','Time','Details','Summary','Dialog','Template','Body']
self_closing_tags = ['Br','Hr','Img','Input','Link','Meta','Source','Wbr']

_specials = set('@.-!~:[](){}$%^&*+=|/?<>,`')
_camel = re.compile(r"(?<!^)(?=[A-Z])")

def attrmap(o):
    if _specials & set(o): return o
    o = dict(htmlClass='class', cls='class', _class='class', klass='class',
             _for='for', fr='for', htmlFor='for').get(o, o)
    return o if o=='_' else o.lstrip('_').replace('_', '-')

def kebab(name: str) -> str:
    "`backgroundColor` -> `background-color`"
    return _camel.sub("-", name).lower()

def camel(name: str) -> str:
    "`background-color` -> `backgroundColor`"
    head, *rest = name.split("-")
    return head + "".join(p[:1].upper() + p[1:] for p in rest)


class RawHTML(str):
    """Markup assigned through `innerHTML`; rendered without escaping."""


@dataclass
class Event:
    type: str
    target: Optional["Element"] = None
    detail: Any = None
    default_prevented: bool = False

    def preventDefault(self):
        self.default_prevented = True


class Style(MutableMapping):
    """Inline style declarations, keyed by camelCase property name."""

    def __init__(self, css_text: str = ""):
        self._props: Dict[str, str] = {}
        self.cssText = css_text

    @property
    def cssText(self) -> str:
        return "; ".join(f"{kebab(k)}: {v}" for k, v in self._props.items())

    @cssText.setter
    def cssText(self, text: str):
        self._props.clear()
        for decl in (text or "").split(";"):
            if ":" in decl:
                prop, value = decl.split(":", 1)
                self[prop.strip()] = value.strip()

    def __getitem__(self, prop): return self._props.get(camel(prop), "")
    def __contains__(self, prop): return camel(prop) in self._props
    def __setitem__(self, prop, value):
        value = js_string(value)
        if value == "": self._props.pop(camel(prop), None)
        else: self._props[camel(prop)] = value
    def __delitem__(self, prop): del self._props[camel(prop)]
    def __iter__(self): return iter(self._props)
    def __len__(self): return len(self._props)
    def __repr__(self): return f"Style({self.cssText!r})"


class ClassList:
    """Live token list over an element's `class` attribute."""

    def __init__(self, element: "Element"):
        self._element = element

    def _tokens(self) -> List[str]:
        return self._element.className.split()

    def _write(self, tokens: List[str]):
        self._element.className = " ".join(tokens)

    def add(self, *tokens):
        current = self._tokens()
        self._write(current + [t for t in tokens if t not in current])

    def remove(self, *tokens):
        self._write([t for t in self._tokens() if t not in tokens])

    def toggle(self, token: str, force: Optional[bool] = None) -> bool:
        present = token in self._tokens()
        wanted = (not present) if force is None else force
        if wanted and not present: self.add(token)
        elif not wanted and present: self.remove(token)
        return wanted

    def replace(self, old: str, new: str) -> bool:
        tokens = self._tokens()
        if old not in tokens: return False
        out = []
        for t in tokens:
            t = new if t == old else t
            if t not in out: out.append(t)
        self._write(out)
        return True

    def contains(self, token: str) -> bool: return token in self._tokens()
    def __contains__(self, token): return self.contains(token)
    def __iter__(self): return iter(self._tokens())
    def __len__(self): return len(self._tokens())
    def __repr__(self): return f"ClassList({self._tokens()!r})"


class Dataset(MutableMapping):
    """`data-*` attributes exposed by camelCase key."""

    def __init__(self, element: "Element"):
        self._element = element

    def _attrs(self):
        return self._element._attrs

    def __getitem__(self, key): return self._attrs()[f"data-{kebab(key)}"]
    def __setitem__(self, key, value): self._element.setAttribute(f"data-{kebab(key)}", js_string(value))
    def __delitem__(self, key): self._element.removeAttribute(f"data-{kebab(key)}")
    def __iter__(self): return (camel(k[5:]) for k in list(self._attrs()) if k.startswith("data-"))
    def __len__(self): return sum(1 for _ in self)


class Element:
    """
    Mutable server-side element with the DOM surface the conditions engine
    drives: attributes, `style`, `classList`, `dataset`, text and markup
    content, event listeners and `on*` event properties.
    """

    # reflected string attributes and boolean attributes exposed as properties
    _reflected = {'title', 'href', 'src', 'alt', 'type', 'placeholder', 'value', 'lang', 'dir', 'role'}
    _boolean = {'hidden', 'disabled', 'checked', 'selected', 'readonly', 'required'}
    _properties = {'id', 'className', 'classList', 'style', 'dataset', 'textContent', 'innerHTML', 'tagName'}
    # tree bookkeeping, not a DOM property
    _internal = {'parent'}

    def __init__(self, *args, **kwargs):
        self._name = getattr(self, '_name', None) or self.__class__.__name__
        self._attrs: Dict[str, str] = {}
        self._style = Style()
        self._listeners: Dict[str, List[tuple]] = {}
        self._children: List[Any] = []
        self.parent: Optional[Element] = None
        ds, c = partition(args, risinstance(Mapping))
        for d in ds: kwargs = {**kwargs, **d}
        for k, v in kwargs.items():
            if v is None or v is False: continue
            self.setAttribute(attrmap(k), "" if v is True else v)
        self.append(*c)

    @classmethod
    def create(cls, tag: str, *args, **kwargs) -> "Element":
        "Build an element for an arbitrary tag name"
        el = cls.__new__(cls)
        object.__setattr__(el, "_name", tag)
        el.__init__(*args, **kwargs)
        return el

    def __contains__(self, key) -> bool:
        if key in self._properties or key in self._reflected or key in self._boolean:
            return True
        return not key.startswith('_') and key not in self._internal and key in self.__dict__

    # --- attributes ------------------------------------------------------
    def setAttribute(self, name: str, value: Any) -> None:
        name = str(name).lower()
        if name == 'style':
            self._style.cssText = js_string(value)
            return
        self._attrs[name] = js_string(value)

    def getAttribute(self, name: str) -> Optional[str]:
        name = str(name).lower()
        if name == 'style':
            return self._style.cssText or None
        return self._attrs.get(name)

    def hasAttribute(self, name: str) -> bool:
        return self.getAttribute(name) is not None

    def removeAttribute(self, name: str) -> None:
        name = str(name).lower()
        if name == 'style':
            self._style.cssText = ""
        self._attrs.pop(name, None)

    @property
    def attributes(self) -> Dict[str, str]:
        attrs = dict(self._attrs)
        if self._style: attrs['style'] = self._style.cssText
        return attrs

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        if name in type(self)._reflected:
            return self._attrs.get(name.lower(), "")
        if name in type(self)._boolean:
            return name.lower() in self._attrs
        raise AttributeError(f"{type(self).__name__!s} has no attribute {name!r}")

    def __setattr__(self, name, value):
        if name in type(self)._reflected:
            self.setAttribute(name, value)
        elif name in type(self)._boolean:
            if value: self.setAttribute(name, "")
            else: self.removeAttribute(name)
        else:
            object.__setattr__(self, name, value)

    @property
    def tagName(self) -> str:
        return self._name.upper()

    @property
    def id(self) -> str:
        return self._attrs.get('id', "")

    @id.setter
    def id(self, value):
        self.setAttribute('id', value)

    @property
    def className(self) -> str:
        return self._attrs.get('class', "")

    @className.setter
    def className(self, value):
        value = js_string(value)
        if value: self._attrs['class'] = value
        else: self._attrs.pop('class', None)

    @property
    def classList(self) -> ClassList:
        return ClassList(self)

    @property
    def style(self) -> Style:
        return self._style

    @style.setter
    def style(self, value):
        self._style.cssText = js_string(value)

    @property
    def dataset(self) -> Dataset:
        return Dataset(self)

    # --- content ---------------------------------------------------------
    @property
    def children(self) -> List["Element"]:
        return [c for c in self._children if isinstance(c, Element)]

    @property
    def childNodes(self) -> List[Any]:
        return list(self._children)

    def append(self, *nodes) -> "Element":
        for node in nodes:
            if node is None: continue
            if isinstance(node, Element):
                node.parent = self
            elif not isinstance(node, str):
                node = js_string(node)
            self._children.append(node)
        return self

    def _clear(self):
        for c in self._children:
            if isinstance(c, Element): c.parent = None
        self._children = []

    @property
    def textContent(self) -> str:
        return "".join(c.textContent if isinstance(c, Element) else str(c) for c in self._children)

    @textContent.setter
    def textContent(self, value):
        self._clear()
        text = "" if value is None else js_string(value)
        if text: self._children.append(text)

    @property
    def innerHTML(self) -> str:
        return "".join(_render_node(c) for c in self._children)

    @innerHTML.setter
    def innerHTML(self, value):
        self._clear()
        markup = "" if value is None else js_string(value)
        if markup: self._children.append(RawHTML(markup))

    def iter(self) -> Iterator["Element"]:
        "Depth-first iteration over descendant elements, excluding `self`"
        for child in self.children:
            yield child
            yield from child.iter()

    def querySelectorAll(self, selector: str) -> List["Element"]:
        return query_all(self, selector)

    def querySelector(self, selector: str) -> Optional["Element"]:
        found = query_all(self, selector)
        return found[0] if found else None

    # --- events ----------------------------------------------------------
    @staticmethod
    def _capture(options) -> bool:
        if isinstance(options, Mapping): return bool(options.get('capture'))
        return bool(options)

    def addEventListener(self, event: str, handler: Callable, options: Any = None) -> None:
        entries = self._listeners.setdefault(event, [])
        capture = self._capture(options)
        if any(h is handler and c == capture for h, c, _ in entries): return
        entries.append((handler, capture, options))

    def removeEventListener(self, event: str, handler: Callable, options: Any = None) -> None:
        capture = self._capture(options)
        entries = self._listeners.get(event, [])
        self._listeners[event] = [e for e in entries if not (e[0] is handler and e[1] == capture)]

    def listenerCount(self, event: Optional[str] = None) -> int:
        if event is not None: return len(self._listeners.get(event, []))
        return sum(len(v) for v in self._listeners.values())

    def dispatchEvent(self, event) -> bool:
        if isinstance(event, str): event = Event(event)
        if event.target is None: event.target = self
        for handler, _, options in list(self._listeners.get(event.type, [])):
            handler(event)
            if isinstance(options, Mapping) and options.get('once'):
                self.removeEventListener(event.type, handler, options)
        prop = self.__dict__.get(f"on{event.type}")
        if callable(prop): prop(event)
        return not event.default_prevented

    # --- rendering -------------------------------------------------------
    @property
    def name(self) -> str:
        return self._name.lower()

    def render(self) -> str:
        attrs = "".join(f' {k}="{html.escape(v, quote=True)}"' if v != "" else f" {k}"
                        for k, v in self.attributes.items())
        if self._name in self_closing_tags:
            return f"<{self.name}{attrs}>"
        return f"<{self.name}{attrs}>{self.innerHTML}</{self.name}>"

    def __repr__(self):
        return self.render()

    def __str__(self):
        return self.render()

    def _repr_html_(self):
        return self.render()


def _render_node(node) -> str:
    if isinstance(node, Element): return node.render()
    if isinstance(node, RawHTML): return str(node)
    return html.escape(str(node), quote=False)


for class_name in html_tags + self_closing_tags:
    globals()[class_name] = type(class_name, (Element,), {
        '__doc__': f"""Object that represents `<{class_name.lower()}>` HTML element.""",
        '_name': class_name,
    })

from .document import Document, HTMLCollection, NodeList  # noqa: E402

__all__ = [
    'Element',
    'Event',
    'Style',
    'ClassList',
    'Dataset',
    'RawHTML',
    'Document',
    'NodeList',
    'HTMLCollection',
    'attrmap',
    *html_tags,
    *self_closing_tags,
]
