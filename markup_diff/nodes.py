"""
Document trees for diffing.

Parsed markup is converted from BeautifulSoup's objects into three small,
immutable node types: `Document`, `Element` and `Text`. Nothing else is
allowed into a tree (comments, doctypes, processing instructions and CDATA
are dropped), so code that walks a tree only ever has to handle those three.
"""

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString
import sys

# BeautifulSoup can sometimes exceed the default Python recursion limit (1000).
sys.setrecursionlimit(10000)

DOCUMENT = 'document'
ELEMENT = 'element'
TEXT = 'text'


class Node:
    """
    Base class for the nodes of a document tree. Use one of the subclasses;
    `kind` identifies which one a node is.
    """
    kind = None

    def __init__(self, children=()):
        self.children = tuple(children)

    @property
    def identity(self):
        "The name used to check whether two nodes are the same kind of thing."
        raise NotImplementedError()

    @property
    def signature(self):
        "A hashable summary of the node, used to align lists of siblings."
        return (self.kind, self.identity)

    def to_dict(self):
        raise NotImplementedError()

    def __eq__(self, other):
        return type(self) is type(other) and self.to_dict() == other.to_dict()


class Document(Node):
    kind = DOCUMENT

    @property
    def identity(self):
        return '#document'

    def to_dict(self):
        return {'kind': self.kind,
                'children': [child.to_dict() for child in self.children]}

    def __repr__(self):
        return f'<Document children={len(self.children)}>'


class Element(Node):
    """
    An HTML element.

    Parameters
    ----------
    tag : string
        The element's tag name, e.g. `'p'`.
    attributes : sequence of (string, string) tuples, optional
        The element's attributes as name/value pairs, in source order. Names
        are unique.
    children : sequence of Node, optional
    """
    kind = ELEMENT

    def __init__(self, tag, attributes=(), children=()):
        super().__init__(children)
        self.tag = tag
        self.attributes = tuple((name, value) for name, value in attributes)

    @property
    def identity(self):
        return self.tag

    @property
    def attribute_map(self):
        "Attributes as a `dict`, which preserves their source order."
        return dict(self.attributes)

    def to_dict(self):
        return {'kind': self.kind,
                'tag': self.tag,
                'attributes': [list(pair) for pair in self.attributes],
                'children': [child.to_dict() for child in self.children]}

    def __repr__(self):
        return f'<Element {self.tag} children={len(self.children)}>'


class Text(Node):
    kind = TEXT

    def __init__(self, value):
        super().__init__()
        self.value = value

    @property
    def identity(self):
        return '#text'

    @property
    def signature(self):
        return (self.kind, self.value.strip())

    def to_dict(self):
        return {'kind': self.kind, 'value': self.value}

    def __repr__(self):
        return f'<Text {self.value!r}>'


def parse_html(html):
    """
    Parse an HTML string into a `Document`.

    Parsing is lenient; malformed markup always produces *some* tree. Note that
    the parser wraps content in `<html>` and `<body>` elements if they are
    missing.

    Parameters
    ----------
    html : string

    Returns
    -------
    document : Document
    """
    # Keep attributes like `class` as plain strings instead of lists so they
    # compare the same way as every other attribute.
    soup = BeautifulSoup(html, 'lxml', multi_valued_attributes=None)
    return Document(_convert_children(soup))


def _convert_children(parent):
    for child in parent.children:
        if isinstance(child, Tag):
            yield Element(child.name,
                          ((name, _attribute_value(value))
                           for name, value in child.attrs.items()),
                          _convert_children(child))
        # Comments, doctypes, etc. are all `PreformattedString`s.
        elif isinstance(child, PreformattedString):
            continue
        elif isinstance(child, NavigableString):
            yield Text(str(child))


def _attribute_value(value):
    if value is None:
        return ''
    elif isinstance(value, (list, tuple)):
        return ' '.join(value)
    return str(value)


def child_path(path, index):
    "The path of the child at `index` of the node at `path`."
    return f'{path}/{index}' if path else str(index)
