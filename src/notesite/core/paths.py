"""Path validation for requested resources.

The sanitizer here is the only thing standing between a request path and the
filesystem, so every path that reaches the source directory passes through it.
"""

import re
from pathlib import Path, PurePosixPath

_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:")


def is_ignored_name(name: str) -> bool:
    """Check whether a file or directory name is private by convention.

    Hidden names (leading ``.``) and names with a leading ``_`` are never
    rendered or served. A lone ``.`` is the current directory, not hidden.
    """
    return (name != "." and name.startswith(".")) or name.startswith("_")


def sanitize_path(path: str) -> PurePosixPath | None:
    """Validate and relative-ize a requested path.

    Args:
        path: User-supplied path fragment (e.g., a URL path)

    Returns:
        Normalized relative path that is safe to join under a base directory,
        or None if the path is disallowed
    """
    if "\\" in path or _DRIVE_PATTERN.match(path):
        return None

    parts: list[str] = []
    for component in path.split("/"):
        if component in ("", "."):
            continue
        if component == "..":
            return None
        if is_ignored_name(component):
            return None
        parts.append(component)

    return PurePosixPath(*parts)


def is_ignored_path(path: Path, roots: list[Path]) -> bool:
    """Check whether an absolute path should be ignored relative to some roots.

    A path is kept when some root contains it with no ignored name among the
    components below that root. Roots may nest, so a `_templates` root inside
    the source root still sees its own files.

    Args:
        path: Path to check
        roots: Directories the path is expected to live under

    Returns:
        True if the path should be ignored
    """
    for root in roots:
        try:
            relative = path.relative_to(root)
        except ValueError:
            continue
        if not any(is_ignored_name(part) for part in relative.parts):
            return False
    return True
