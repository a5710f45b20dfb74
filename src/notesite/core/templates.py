"""Template loading for rendered pages.

Templates come either from the copies packaged with notesite or from a
directory on disk. The source is chosen once at startup. With a directory
source, ``reload()`` swaps in a fresh environment so template edits show up
without restarting the server.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from importlib.resources import files
from pathlib import Path
from typing import Any

import jinja2

NOTE_TEMPLATE = "note.html"
STYLESHEET = "style.css"


class ReadWriteLock:
    """Many concurrent readers or a single writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._readers = 0
        self._writing = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class TemplateRegistry:
    """Jinja2 environment guarded for concurrent renders and reloads.

    Args:
        template_dir: Directory to load templates from. If None, the
            templates packaged with notesite are used.
    """

    def __init__(self, template_dir: Path | None = None) -> None:
        self._template_dir = template_dir
        self._lock = ReadWriteLock()
        self._env = self._create_environment()

    @property
    def template_dir(self) -> Path | None:
        return self._template_dir

    @property
    def reloadable(self) -> bool:
        """Whether templates are loaded from disk and can change at runtime."""
        return self._template_dir is not None

    def render(self, name: str, **context: Any) -> str:
        """Render a template by name.

        Raises:
            jinja2.TemplateNotFound: If the template doesn't exist
            jinja2.TemplateError: If the template fails to compile or render
        """
        with self._lock.read():
            return self._env.get_template(name).render(**context)

    def read_asset(self, name: str) -> str:
        """Return the raw source of a template-directory asset (e.g., CSS).

        A template directory without the asset falls back to the packaged copy.
        """
        if self._template_dir is not None:
            path = self._template_dir / name
            if path.is_file():
                return path.read_text(encoding="utf-8")
        return files("notesite").joinpath("templates", name).read_text(encoding="utf-8")

    def reload(self) -> None:
        """Discard compiled templates so the next render reads them from disk."""
        if not self.reloadable:
            return
        with self._lock.write():
            self._env = self._create_environment()

    def _create_environment(self) -> jinja2.Environment:
        loader: jinja2.BaseLoader
        if self._template_dir is None:
            loader = jinja2.PackageLoader("notesite", "templates")
        else:
            loader = jinja2.FileSystemLoader(self._template_dir)
        return jinja2.Environment(
            loader=loader,
            autoescape=jinja2.select_autoescape(["html"]),
            auto_reload=False,
            keep_trailing_newline=True,
        )
