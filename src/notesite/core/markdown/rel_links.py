"""Rewrite relative links to notes so they point at rendered pages.

A link to ``./foo.md`` becomes ``./foo.html``; absolute URLs and links to
anything other than ``.md`` files are left alone.
"""

from collections.abc import Iterable, Iterator

from markdown_it.token import Token


def is_absolute_url(url: str) -> bool:
    """Check whether a URL is absolute, i.e., starts with a protocol.

    A ``:`` before the first ``/`` marks a scheme. Otherwise a ``//`` that
    begins at or before the first ``/`` is a protocol-relative URL, so
    ``//host/x`` is absolute but ``foo/bar//baz`` is not.
    """
    colon = url.find(":")
    slash = url.find("/")
    if colon != -1 and (slash == -1 or colon < slash):
        return True
    if slash == -1:
        return False
    double_slash = url.find("//")
    return double_slash != -1 and double_slash <= slash


def rewrite_url(url: str) -> str:
    """Swap an ``.md`` extension for ``.html``, leaving other URLs unchanged."""
    base, dot, ext = url.rpartition(".")
    if dot and ext == "md":
        return f"{base}.html"
    return url


def rewrite_relative_links(tokens: Iterable[Token]) -> Iterator[Token]:
    """Rewrite relative ``.md`` link targets in a token stream.

    Reference-style links are resolved by the parser, so they arrive here as
    ordinary ``link_open`` tokens and get the same treatment.
    """
    for token in tokens:
        if token.type == "inline" and token.children:
            for child in token.children:
                if child.type == "link_open":
                    _rewrite_link(child)
        yield token


def _rewrite_link(token: Token) -> None:
    href = token.attrGet("href")
    if not isinstance(href, str) or is_absolute_url(href):
        return
    token.attrSet("href", rewrite_url(href))
