"""Site rendering: batch builds and single-resource rendering.

A batch build mirrors the source tree into a destination directory. Notes are
rendered on a worker pool; directories and static files are placed on the
calling thread first so a note's parent directory always exists before its
task runs.
"""

import errno
import logging
import os
import shutil
import threading
from dataclasses import dataclass
from functools import partial
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from notesite.core import markdown
from notesite.core.pool import WorkerPool
from notesite.core.resources import (
    HTML_SUFFIX,
    Directory,
    Note,
    Resource,
    Static,
    walk_resources,
)
from notesite.core.templates import NOTE_TEMPLATE, STYLESHEET, TemplateRegistry

logger = logging.getLogger(__name__)


@dataclass
class BuildStats:
    """Counts from a batch build.

    Note counts are final only once the pool passed to ``render_site`` has
    been closed.
    """

    directories: int = 0
    static_files: int = 0
    notes: int = 0
    failures: int = 0

    @property
    def ok(self) -> bool:
        return self.failures == 0


class SiteRenderer:
    """Renders notes and static files from a source directory.

    Args:
        source_dir: Root directory containing note sources
        templates: Template registry used for note pages
        edit_url: Prefix for per-note "view source" links; no link when None
        live_reload: Include the live reload script in rendered notes
    """

    def __init__(
        self,
        source_dir: Path,
        templates: TemplateRegistry,
        *,
        edit_url: str | None = None,
        live_reload: bool = False,
    ) -> None:
        self._source_dir = source_dir
        self._templates = templates
        self._edit_url = edit_url
        self._live_reload = live_reload

    @property
    def source_dir(self) -> Path:
        return self._source_dir

    @property
    def templates(self) -> TemplateRegistry:
        return self._templates

    def render_note(self, src_path: Path) -> str:
        """Render a single note to a complete HTML page.

        Args:
            src_path: Path to the Markdown source, inside ``source_dir``

        Returns:
            Rendered page

        Raises:
            OSError: If the source can't be read
            jinja2.TemplateError: If the page template fails
            NestedHeadingError: If the Markdown pipeline breaks its invariants
        """
        source = src_path.read_text(encoding="utf-8")
        body, toc = markdown.render(source)

        rel_path = self._relative(src_path)
        return self._templates.render(
            NOTE_TEMPLATE,
            title=markdown.page_title(toc),
            body=body,
            toc=[entry.to_dict() for entry in toc],
            edit_link=self._edit_link(rel_path),
            live_reload=self._live_reload,
            root="../" * (len(rel_path.parts) - 1),
        )

    def render_resource(self, resource: Resource, sink: BinaryIO) -> None:
        """Write a resolved resource to a byte sink.

        Static files are copied verbatim, notes are rendered, and directories
        produce a short placeholder.
        """
        if isinstance(resource, Static):
            with resource.path.open("rb") as f:
                shutil.copyfileobj(f, sink)
        elif isinstance(resource, Note):
            sink.write(self.render_note(resource.path).encode("utf-8"))
        else:
            sink.write(f"directory: {resource.path}\n".encode())

    def render_site(self, pool: WorkerPool, dest_dir: Path) -> BuildStats:
        """Render the whole source tree into ``dest_dir``.

        The destination is removed first. Individual note failures are logged
        and counted; they don't stop the build.

        Args:
            pool: Running worker pool that note renders are submitted to
            dest_dir: Destination root, mirrored from ``source_dir``

        Returns:
            BuildStats, complete once ``pool`` has been closed

        Raises:
            OSError: If the destination can't be cleared or a directory or
                static file can't be placed
        """
        remove_dir_force(dest_dir)

        stats = BuildStats()
        lock = threading.Lock()

        def note_task(src_path: Path, dest_path: Path) -> None:
            try:
                self.render_note_to_file(src_path, dest_path)
            except Exception as e:
                logger.error("Error rendering note %s: %s", src_path, e)
                with lock:
                    stats.failures += 1

        for resource in walk_resources(self._source_dir):
            dest_path = self.mirrored_path(resource.path, dest_dir)
            if isinstance(resource, Directory):
                dest_path.mkdir(parents=True, exist_ok=True)
                stats.directories += 1
            elif isinstance(resource, Note):
                if resource.path.with_suffix(HTML_SUFFIX).is_file():
                    logger.warning("Skipping %s: shadowed by a static HTML file", resource.path)
                    continue
                stats.notes += 1
                pool.submit(partial(note_task, resource.path, dest_path))
            else:
                hard_link_or_copy(resource.path, dest_path)
                stats.static_files += 1

        self._write_stylesheet(dest_dir)
        return stats

    def render_note_to_file(self, src_path: Path, dest_path: Path) -> None:
        """Render a note and write it to ``dest_path`` with an ``.html`` suffix."""
        html = self.render_note(src_path)
        dest_path.with_suffix(HTML_SUFFIX).write_text(html, encoding="utf-8")
        logger.debug("Rendered %s", src_path)

    def mirrored_path(self, src_path: Path, dest_dir: Path) -> Path:
        """Map a path inside ``source_dir`` to the same place inside ``dest_dir``.

        Raises:
            ValueError: If ``src_path`` is not inside ``source_dir``
        """
        return dest_dir / src_path.relative_to(self._source_dir)

    def _relative(self, src_path: Path) -> PurePosixPath:
        return PurePosixPath(src_path.relative_to(self._source_dir).as_posix())

    def _edit_link(self, rel_path: PurePosixPath) -> str | None:
        if self._edit_url is None:
            return None
        return f"{self._edit_url}{rel_path}"

    def _write_stylesheet(self, dest_dir: Path) -> None:
        # A stylesheet in the source tree has already been copied over.
        dest = dest_dir / STYLESHEET
        if dest.exists():
            return
        dest.write_text(self._templates.read_asset(STYLESHEET), encoding="utf-8")


def hard_link_or_copy(src: Path, dest: Path) -> None:
    """Hard-link ``src`` at ``dest``, copying if linking fails.

    Linking fails across filesystems, for example. Any existing file at
    ``dest`` is replaced.
    """
    dest.unlink(missing_ok=True)
    try:
        os.link(src, dest)
    except OSError:
        shutil.copy2(src, dest)


def remove_dir_force(path: Path) -> None:
    """Remove a directory tree, succeeding if it doesn't exist."""
    try:
        shutil.rmtree(path)
    except OSError as e:
        if e.errno != errno.ENOENT:
            raise
