"""Markdown rendering with Patitas.

Headings come out bare (``# Hi`` -> ``<h1>Hi</h1>``).  Patitas slugs every
heading into an ``id``; here only an explicit id from the source is kept.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from patitas import (
    HtmlRenderer,
    Markdown,
    create_default_registry,
    create_default_role_registry,
)

if TYPE_CHECKING:
    from patitas.nodes import Heading
    from patitas.renderers.html import RenderContext
    from patitas.stringbuilder import StringBuilder


class _BareHeadingRenderer(HtmlRenderer):
    __slots__ = ()

    def _render_heading(self, heading: Heading, sb: StringBuilder, ctx: RenderContext) -> None:
        if heading.explicit_id:
            super()._render_heading(heading, sb, ctx)
            return
        sb.append(f"<h{heading.level}>")
        self._render_inlines(heading.children, sb, ctx)
        sb.append(f"</h{heading.level}>\n")


class MarkdownRenderer:
    """Callable Markdown -> HTML renderer used by the content store.

    Args:
        plugins: Patitas plugin names to enable.

    """

    __slots__ = ("_directives", "_md", "_roles")

    def __init__(self, plugins: tuple[str, ...] = ("table",)) -> None:
        self._directives = create_default_registry()
        self._roles = create_default_role_registry()
        self._md = Markdown(
            plugins=list(plugins),
            directive_registry=self._directives,
            role_registry=self._roles,
        )

    def __call__(self, source: str) -> str:
        doc = self._md.parse(source)
        renderer = _BareHeadingRenderer(
            source=source,
            directive_registry=self._directives,
            role_registry=self._roles,
        )
        return renderer.render(doc)
