"""Trailing attribute blocks on headings.

Supports ``# Title {#anchor .class key=value}``. The attribute block is
stripped from the heading text and applied to the ``heading_open`` token
before inline parsing runs.
"""

import re

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore

_ATTR_BLOCK = re.compile(r"\s*\{([^{}]*)\}\s*$")


def heading_attrs_plugin(md: MarkdownIt) -> None:
    md.core.ruler.after("block", "heading_attrs", _heading_attrs)


def _heading_attrs(state: StateCore) -> None:
    tokens = state.tokens
    for idx, token in enumerate(tokens[:-1]):
        if token.type != "heading_open":
            continue
        inline = tokens[idx + 1]
        match = _ATTR_BLOCK.search(inline.content)
        if match is None:
            continue
        attrs = parse_attrs(match.group(1))
        if attrs is None:
            continue
        inline.content = inline.content[: match.start()]
        for key, value in attrs.items():
            token.attrSet(key, value)


def parse_attrs(text: str) -> dict[str, str] | None:
    """Parse the inside of an attribute block.

    Returns:
        Attribute mapping, or None if any item is malformed (the block is
        then left as ordinary heading text)
    """
    attrs: dict[str, str] = {}
    classes: list[str] = []
    for item in text.split():
        if item.startswith("#") and len(item) > 1:
            attrs["id"] = item[1:]
        elif item.startswith(".") and len(item) > 1:
            classes.append(item[1:])
        elif "=" in item and not item.startswith("="):
            key, value = item.split("=", 1)
            attrs[key] = value.strip("\"'")
        else:
            return None
    if not attrs and not classes:
        return None
    if classes:
        attrs["class"] = " ".join(classes)
    return attrs
