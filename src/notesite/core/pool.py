"""Bounded thread pool for batch rendering.

Workers pull tasks from a bounded queue, so producers block instead of
queuing unbounded work. Leaving the pool's ``with`` block waits for every
submitted task to finish.
"""

import logging
import os
import queue
import threading
from collections.abc import Callable
from types import TracebackType

logger = logging.getLogger(__name__)

Task = Callable[[], object]

_STOP = object()


def default_thread_count() -> int:
    """Number of hardware threads available, at least 1."""
    return os.cpu_count() or 1


class WorkerPool:
    """Fixed-size pool of worker threads fed from a bounded queue.

    Usage:
        with WorkerPool() as pool:
            for item in items:
                pool.submit(functools.partial(process, item))
        # every submitted task has completed here

    Task return values are discarded. A task that raises is logged and the
    worker moves on to the next task.
    """

    def __init__(self, threads: int | None = None, queue_size: int | None = None) -> None:
        """Initialize the pool without starting any threads.

        Args:
            threads: Number of worker threads (default: hardware thread count)
            queue_size: Task buffer capacity (default: twice the thread count)

        Raises:
            ValueError: If either size is not positive
        """
        self._thread_count = threads if threads is not None else default_thread_count()
        self._queue_size = queue_size if queue_size is not None else self._thread_count * 2
        if self._thread_count < 1:
            raise ValueError("thread count must be positive")
        if self._queue_size < 1:
            raise ValueError("queue size must be positive")

        self._queue: queue.Queue[object] = queue.Queue(maxsize=self._queue_size)
        self._workers: list[threading.Thread] = []
        self._closed = False

    @property
    def thread_count(self) -> int:
        return self._thread_count

    @property
    def queue_size(self) -> int:
        return self._queue_size

    def __enter__(self) -> "WorkerPool":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def start(self) -> None:
        """Start the worker threads."""
        if self._workers:
            return
        for i in range(self._thread_count):
            worker = threading.Thread(
                target=self._run,
                name=f"notesite-worker-{i}",
                daemon=True,
            )
            worker.start()
            self._workers.append(worker)

    def submit(self, task: Task) -> None:
        """Queue a task, blocking while the queue is full.

        Raises:
            RuntimeError: If the pool has been closed
        """
        if self._closed:
            raise RuntimeError("cannot submit to a closed pool")
        self._queue.put(task)

    def close(self) -> None:
        """Stop accepting work and wait for every queued task to finish."""
        if self._closed:
            return
        self._closed = True
        for _ in self._workers:
            self._queue.put(_STOP)
        for worker in self._workers:
            worker.join()
        self._workers.clear()

    def _run(self) -> None:
        while True:
            task = self._queue.get()
            if task is _STOP:
                return
            try:
                task()  # type: ignore[operator]
            except Exception:
                logger.exception("Worker task failed")
