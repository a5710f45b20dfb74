"""Filesystem watching for live reload.

Monitors the source tree for content changes and publishes a single reload
event per burst of changes to a ReloadChannel.
"""

import asyncio
import contextlib
import logging
import os
import time
from collections.abc import Callable, Iterable
from pathlib import Path

from watchfiles import Change, awatch

from notesite.core.paths import is_ignored_name, is_ignored_path
from notesite.live.channel import ReloadChannel, ReloadEvent

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE = 0.1


class Debouncer:
    """Swallow events that arrive too soon after the last accepted one.

    The window is measured from the last accepted event. There is no trailing
    emission, so an event dropped inside the window is lost.
    """

    def __init__(self, window: float, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the debouncer.

        Args:
            window: Suppression window in seconds after each accepted event
            clock: Monotonic time source
        """
        self._window = window
        self._clock = clock
        self._last: float | None = None

    @property
    def window(self) -> float:
        return self._window

    def suppressing(self) -> bool:
        """Whether an event arriving now would be dropped."""
        return self._last is not None and self._clock() - self._last < self._window

    def accept(self) -> bool:
        """Register an event, returning True if it should be emitted."""
        if self.suppressing():
            return False
        self._last = self._clock()
        return True


class Watch:
    """Watches directories and broadcasts reload events on content changes.

    A modification only counts when the file's size or mtime differs from
    the last one seen, so permission and ownership changes are dropped. Files
    present at ``start()`` are recorded up front; others are recorded the
    first time they change.

    Args:
        roots: Directories to watch recursively
        channel: Channel reload events are sent on
        debounce: Seconds to suppress further reloads after one is sent
        on_reload: Called before each reload is broadcast (e.g., to drop
            compiled templates)
        force_polling: Poll instead of using native notifications
        clock: Monotonic time source for the debounce window
    """

    def __init__(
        self,
        roots: Iterable[Path],
        channel: ReloadChannel,
        *,
        debounce: float = DEFAULT_DEBOUNCE,
        on_reload: Callable[[], None] | None = None,
        force_polling: bool | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._roots = [root.resolve() for root in roots]
        self._channel = channel
        self._debouncer = Debouncer(debounce, clock)
        self._on_reload = on_reload
        self._force_polling = force_polling
        self._task: asyncio.Task[None] | None = None
        self._stamps: dict[Path, tuple[int, int]] = {}

    @property
    def roots(self) -> list[Path]:
        return list(self._roots)

    @property
    def debouncer(self) -> Debouncer:
        return self._debouncer

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start watching in a background task."""
        if self._task is not None:
            return
        await asyncio.to_thread(self._record_existing)
        self._task = asyncio.create_task(self._watch_files())

    async def stop(self) -> None:
        """Stop watching."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    def handle_changes(self, changes: Iterable[tuple[Change, str]]) -> bool:
        """Filter a batch of raw changes and broadcast a reload if warranted.

        Args:
            changes: (change type, absolute path) pairs from the watcher

        Returns:
            True if a reload event was sent
        """
        # Every path is checked so each one's stamp stays current
        relevant = [self._is_relevant(change, path) for change, path in changes]
        if not any(relevant):
            return False
        if not self._debouncer.accept():
            logger.debug("Change inside debounce window, suppressed")
            return False

        if self._on_reload is not None:
            self._on_reload()
        delivered = self._channel.send(ReloadEvent.RELOAD)
        logger.info("Change detected, reloading %d client(s)", delivered)
        return True

    def _is_relevant(self, change: Change, path: str) -> bool:
        if change != Change.modified:
            return False
        changed = Path(path)
        if is_ignored_path(changed, self._roots):
            return False
        return self._content_changed(changed)

    def _content_changed(self, path: Path) -> bool:
        try:
            stat = path.stat()
        except OSError:
            self._stamps.pop(path, None)
            return True
        stamp = (stat.st_size, stat.st_mtime_ns)
        previous = self._stamps.get(path)
        self._stamps[path] = stamp
        return previous != stamp

    def _record_existing(self) -> None:
        for root in self._roots:
            for dirpath, dirnames, filenames in os.walk(root):
                dirnames[:] = [d for d in dirnames if not is_ignored_name(d)]
                for name in filenames:
                    if not is_ignored_name(name):
                        self._content_changed(Path(dirpath, name))

    async def _watch_files(self) -> None:
        window_ms = max(1, int(self._debouncer.window * 1000))
        try:
            async for changes in awatch(
                *self._roots,
                debounce=window_ms,
                step=min(50, window_ms),
                force_polling=self._force_polling,
            ):
                self.handle_changes(changes)
        except Exception:
            logger.exception("File watch stopped, live reload is off")
