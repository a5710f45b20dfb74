"""Heading anchor injection.

Adds an ``id`` to every heading that doesn't already carry one, derived by
slugifying the heading's text.
"""

from collections.abc import Iterable, Iterator

from markdown_it.token import Token


class NestedHeadingError(AssertionError):
    """Heading tokens arrived out of order.

    The parser never nests headings, so this indicates a bug in a transform
    stage rather than bad input.
    """


def slugify(text: str) -> str:
    """Turn heading text into an anchor slug.

    Alphanumeric characters are kept (ASCII letters lowercased) and every run
    of anything else becomes a single hyphen. Leading and trailing hyphens
    are kept, so punctuation-only text yields "-" and empty text yields "".
    """
    chars: list[str] = []
    last_is_dash = False
    for char in text:
        if char.isalnum():
            last_is_dash = False
            chars.append(char.lower() if char.isascii() else char)
        elif not last_is_dash:
            last_is_dash = True
            chars.append("-")
    return "".join(chars)


def heading_text(inline: Token) -> str:
    """Concatenate the plain text inside an inline token, skipping markup.

    Image alt text counts as text.
    """
    return "".join(_plain_text(inline.children or []))


def _plain_text(tokens: list[Token]) -> Iterator[str]:
    for token in tokens:
        if token.type == "text":
            yield token.content
        elif token.type == "image" and token.children:
            yield from _plain_text(token.children)


def add_heading_ids(tokens: Iterable[Token]) -> Iterator[Token]:
    """Add slug IDs to headings that lack an explicit one.

    Only one heading's tokens are buffered at a time.

    Args:
        tokens: Parsed block-level token stream

    Yields:
        The same tokens in the same order, with heading IDs filled in
    """
    stream = iter(tokens)
    for token in stream:
        if token.type != "heading_open" or token.attrGet("id") is not None:
            yield token
            continue

        buffered, text = _consume_heading(stream)
        token.attrSet("id", slugify(text))
        yield token
        yield from buffered


def _consume_heading(stream: Iterator[Token]) -> tuple[list[Token], str]:
    """Buffer tokens up to and including the end of the current heading."""
    buffered: list[Token] = []
    texts: list[str] = []
    for token in stream:
        if token.type == "heading_open":
            raise NestedHeadingError("nested headings are not allowed")
        if token.type == "inline":
            texts.append(heading_text(token))
        buffered.append(token)
        if token.type == "heading_close":
            break
    return buffered, "".join(texts)
