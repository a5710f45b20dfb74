"""Markdown to HTML rendering.

The parsed token stream flows through three stages before serialization:
heading IDs are added, the table of contents is collected, and relative links
to notes are rewritten. Each stage is a generator over the previous one, so
document order is preserved end to end.
"""

from markdown_it import MarkdownIt
from mdit_py_plugins.footnote import footnote_plugin

from notesite.core.markdown.add_ids import NestedHeadingError, add_heading_ids, slugify
from notesite.core.markdown.attrs import heading_attrs_plugin
from notesite.core.markdown.rel_links import is_absolute_url, rewrite_relative_links
from notesite.core.markdown.toc import TocEntry, collect_toc, page_title

__all__ = [
    "NestedHeadingError",
    "TocEntry",
    "create_parser",
    "is_absolute_url",
    "page_title",
    "render",
    "slugify",
]


def create_parser() -> MarkdownIt:
    """Create the Markdown parser with tables, footnotes and smart punctuation."""
    md = MarkdownIt("commonmark", {"typographer": True})
    md.enable(["table", "strikethrough", "replacements", "smartquotes"])
    md.use(footnote_plugin)
    md.use(heading_attrs_plugin)
    return md


_parser = create_parser()


def render(source: str) -> tuple[str, list[TocEntry]]:
    """Render Markdown source to HTML.

    Args:
        source: Markdown text

    Returns:
        Tuple of (HTML body, table of contents in document order)

    Raises:
        NestedHeadingError: If heading tokens are malformed (a programming error)
    """
    env: dict = {}
    tokens = _parser.parse(source, env)

    toc: list[TocEntry] = []
    stream = rewrite_relative_links(collect_toc(add_heading_ids(tokens), toc))
    html = _parser.renderer.render(list(stream), _parser.options, env)
    return html, toc
