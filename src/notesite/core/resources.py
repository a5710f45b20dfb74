"""Resource resolution for requested paths and source tree walks.

A resource is the concrete thing a rendered path maps back to in the source
directory: a static file copied verbatim, a directory, or a Markdown note that
renders to HTML.
"""

import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from notesite.core.paths import is_ignored_name, sanitize_path

NOTE_SUFFIX = ".md"
HTML_SUFFIX = ".html"


@dataclass(frozen=True)
class Static:
    """A file served or copied byte-for-byte."""

    path: Path


@dataclass(frozen=True)
class Note:
    """A Markdown note rendered to HTML."""

    path: Path


@dataclass(frozen=True)
class Directory:
    """A directory in the source tree."""

    path: Path


Resource = Static | Note | Directory


def resolve_resource(source_dir: Path, rel_path: str) -> Resource | None:
    """Map a rendered path back to its source resource.

    Verbatim existence wins over the note fallback, so a real ``foo.html``
    in the source tree shadows ``foo.md``.

    Args:
        source_dir: Root directory containing note sources
        rel_path: Requested path relative to the rendered site

    Returns:
        Resolved Resource, or None if the path is disallowed or not found
    """
    sanitized = sanitize_path(rel_path)
    if sanitized is None:
        return None

    src_path = source_dir / sanitized
    if src_path.is_file():
        return Static(src_path)
    if src_path.is_dir():
        return Directory(src_path)

    if sanitized.suffix == HTML_SUFFIX:
        note_path = src_path.with_suffix(NOTE_SUFFIX)
        if note_path.is_file():
            return Note(note_path)

    return None


def classify_file(path: Path) -> Static | Note:
    """Classify a source file as a note or a static file."""
    if path.suffix == NOTE_SUFFIX:
        return Note(path)
    return Static(path)


def walk_resources(source_dir: Path) -> Iterator[Resource]:
    """Walk the source tree, yielding every renderable resource.

    Ignored names are skipped, and an ignored directory's whole subtree is
    pruned. Directories are always yielded before their contents.

    Args:
        source_dir: Root directory to walk

    Yields:
        Directory, Note and Static resources in sorted, depth-first order
    """
    yield Directory(source_dir)

    for dirpath, dirnames, filenames in os.walk(source_dir):
        dirnames[:] = sorted(d for d in dirnames if not is_ignored_name(d))
        current = Path(dirpath)

        for name in sorted(filenames):
            if is_ignored_name(name):
                continue
            path = current / name
            if path.is_file():
                yield classify_file(path)

        for name in dirnames:
            yield Directory(current / name)
