"""HTML trees for the compiler, backed by ``lxml.html``.

Two shapes of source are handled:

- Full documents (anything with an ``<html>`` tag) round-trip with their
  doctype.
- Fragments (partials such as a ``nav.html`` pulled in with
  ``compile_dyn``) are parsed into a throwaway container and serialized
  back without a document wrapper, so they can be spliced into a page.

"""

from __future__ import annotations

import html
import re
from collections.abc import Iterable
from typing import Any

from lxml import etree
from lxml import html as lxml_html

from mews._errors import CompileError
from mews._types import RenamedOutput

_FULL_DOCUMENT = re.compile(r"<html[\s>]|<!doctype", re.IGNORECASE)

# Documents keep their own doctype; none is invented when the source has none.
_DOCUMENT_PARSER = lxml_html.HTMLParser(default_doctype=False)

type Node = str | lxml_html.HtmlElement


class HtmlDocument:
    """A parsed HTML source, mutable in place and serializable back to text.

    Use :meth:`parse` rather than the constructor.

    """

    __slots__ = ("_fragment", "_root")

    def __init__(self, root: lxml_html.HtmlElement, *, fragment: bool) -> None:
        self._root = root
        self._fragment = fragment

    @classmethod
    def parse(cls, text: str) -> HtmlDocument:
        """Parse *text* as a full document or a fragment."""
        if _FULL_DOCUMENT.search(text):
            try:
                root = lxml_html.document_fromstring(text, parser=_DOCUMENT_PARSER)
            except etree.ParserError as exc:
                msg = f"cannot parse HTML document: {exc}"
                raise CompileError(msg) from exc
            return cls(root, fragment=False)
        container = lxml_html.Element("div")
        _splice(container, None, fragment_nodes(text))
        return cls(container, fragment=True)

    @property
    def root(self) -> lxml_html.HtmlElement:
        """Root element (``<html>``, or the fragment container)."""
        return self._root

    @property
    def is_fragment(self) -> bool:
        return self._fragment

    def xpath(self, expr: str) -> list[Any]:
        """Evaluate an XPath expression against the tree."""
        return self._root.xpath(expr)

    def contains(self, element: lxml_html.HtmlElement) -> bool:
        """True if *element* is still attached beneath the root."""
        node = element
        while node is not None:
            if node is self._root:
                return True
            node = node.getparent()
        return False

    def serialize(self) -> str:
        """Render the tree back to HTML text."""
        if not self._fragment:
            return lxml_html.tostring(
                self._root.getroottree(), encoding="unicode", method="html",
            )
        parts = [html.escape(self._root.text or "", quote=False)]
        parts.extend(
            lxml_html.tostring(child, encoding="unicode", method="html")
            for child in self._root
        )
        return "".join(parts)


class DomQuery:
    """The ``dom`` capability exposed to build scripts.

    Calling it evaluates XPath against the bound document::

        dom("//h2")                  # list of elements
        dom.first("//title")         # element or None

    ``fragment`` and ``element`` build new nodes and work without a bound
    document.

    """

    __slots__ = ("_document",)

    def __init__(self, document: HtmlDocument | None = None) -> None:
        self._document = document

    def __call__(self, expr: str) -> list[Any]:
        if self._document is None:
            msg = "dom() is only bound while compiling an HTML page"
            raise CompileError(msg)
        return self._document.xpath(expr)

    def first(self, expr: str) -> Any:
        found = self(expr)
        return found[0] if found else None

    @staticmethod
    def text(element: lxml_html.HtmlElement) -> str:
        return element.text_content()

    @staticmethod
    def fragment(markup: str) -> list[Node]:
        return fragment_nodes(markup)

    @staticmethod
    def element(
        tag: str,
        text: str | None = None,
        attrs: dict[str, str] | None = None,
    ) -> lxml_html.HtmlElement:
        """Create a detached element, e.g. ``dom.element("a", "Home", {"href": "/"})``."""
        element = lxml_html.Element(tag)
        element.text = text
        for key, value in (attrs or {}).items():
            element.set(key, str(value))
        return element


def fragment_nodes(markup: str) -> list[Node]:
    """Parse *markup* into a list of leading text and elements."""
    if not markup.strip():
        return [markup] if markup else []
    try:
        return list(lxml_html.fragments_fromstring(markup))
    except etree.ParserError as exc:
        msg = f"cannot parse HTML fragment: {exc}"
        raise CompileError(msg) from exc


def to_nodes(value: object) -> list[Node]:
    """Convert a script result into nodes for splicing.

    ``None`` yields nothing; strings are parsed as markup; elements pass
    through; lists and tuples are flattened.
    """
    if value is None:
        return []
    if isinstance(value, lxml_html.HtmlElement):
        return [value]
    if isinstance(value, RenamedOutput):
        return fragment_nodes(value.text)
    if isinstance(value, bytes):
        return fragment_nodes(value.decode("utf-8"))
    if isinstance(value, str):
        return fragment_nodes(value)
    if isinstance(value, (list, tuple)):
        nodes: list[Node] = []
        for item in value:
            nodes.extend(to_nodes(item))
        return nodes
    return fragment_nodes(str(value))


def replace_element(element: lxml_html.HtmlElement, value: object) -> None:
    """Replace *element* in its parent with the nodes for *value*.

    The element's tail text is kept in place after the new nodes.
    """
    parent = element.getparent()
    if parent is None:
        msg = f"cannot replace detached <{element.tag}> element"
        raise CompileError(msg)
    nodes = to_nodes(value)
    index = parent.index(element)
    tail = element.tail
    previous = parent[index - 1] if index > 0 else None
    parent.remove(element)
    if tail:
        nodes.append(tail)
    _splice(parent, previous, nodes, index=index)


def _splice(
    parent: lxml_html.HtmlElement,
    previous: lxml_html.HtmlElement | None,
    nodes: Iterable[Node],
    *,
    index: int = 0,
) -> None:
    """Insert *nodes* into *parent* starting at *index*.

    Text nodes are appended to the preceding sibling's tail, or to the
    parent's text when nothing precedes them.
    """
    for node in nodes:
        if isinstance(node, str):
            if previous is None:
                parent.text = (parent.text or "") + node
            else:
                previous.tail = (previous.tail or "") + node
            continue
        parent.insert(index, node)
        index += 1
        previous = node
