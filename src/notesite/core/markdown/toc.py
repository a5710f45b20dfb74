"""Table of contents extraction."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from markdown_it.token import Token

from notesite.core.markdown.add_ids import NestedHeadingError, heading_text


@dataclass
class TocEntry:
    """A heading in document order."""

    level: int
    id: str | None
    title: str

    def to_dict(self) -> dict[str, str | int | None]:
        """Convert to dictionary for template rendering."""
        return {"level": self.level, "id": self.id, "title": self.title}


def collect_toc(tokens: Iterable[Token], entries: list[TocEntry]) -> Iterator[Token]:
    """Record every heading into ``entries`` while passing tokens through.

    Args:
        tokens: Token stream, ideally after heading IDs have been added
        entries: List the finished entries are appended to

    Yields:
        Every input token, unchanged
    """
    current: TocEntry | None = None
    for token in tokens:
        if token.type == "heading_open":
            if current is not None:
                raise NestedHeadingError("nested headings are not allowed")
            anchor = token.attrGet("id")
            current = TocEntry(
                level=int(token.tag[1:]),
                id=None if anchor is None else str(anchor),
                title="",
            )
        elif token.type == "heading_close":
            if current is None:
                raise NestedHeadingError("heading ended without starting")
            entries.append(current)
            current = None
        elif token.type == "inline" and current is not None:
            current.title += heading_text(token)
        yield token


def page_title(entries: list[TocEntry]) -> str | None:
    """Return the document title: the first heading, if it is a level-1 heading."""
    if entries and entries[0].level == 1:
        return entries[0].title
    return None
