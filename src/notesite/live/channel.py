"""Broadcast channel for reload events.

Each subscriber gets its own bounded queue. There is no history: a subscriber
only sees events sent after it subscribed, and one that falls behind loses
events rather than slowing down the sender.
"""

import asyncio
import enum
import logging
from types import TracebackType

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 16


class ReloadEvent(enum.Enum):
    """Something changed; connected pages should reload.

    A single member for now. Per-page reloads would add variants here.
    """

    RELOAD = "reload"


class Subscription:
    """Receiving end of a ReloadChannel.

    Iterate with ``async for`` until the channel closes. Use as an async
    context manager to unsubscribe on exit.
    """

    def __init__(self, channel: "ReloadChannel", capacity: int) -> None:
        self._channel = channel
        self._queue: asyncio.Queue[ReloadEvent | None] = asyncio.Queue(maxsize=capacity)
        self._closed = False

    async def recv(self) -> ReloadEvent | None:
        """Wait for the next event, or None once the channel is closed."""
        if self._closed and self._queue.empty():
            return None
        event = await self._queue.get()
        if event is None:
            self._closed = True
        return event

    def close(self) -> None:
        """Unsubscribe from the channel."""
        self._channel._unsubscribe(self)

    def _deliver(self, event: ReloadEvent) -> bool:
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            return False
        return True

    def _shutdown(self) -> None:
        # Make room for the end-of-stream marker if the subscriber lagged.
        while self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(None)

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> ReloadEvent:
        event = await self.recv()
        if event is None:
            raise StopAsyncIteration
        return event

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class ReloadChannel:
    """One-to-many broadcast of ReloadEvents with no replay."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        self._capacity = capacity
        self._subscribers: set[Subscription] = set()
        self._closed = False

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> Subscription:
        """Start receiving events sent from now on."""
        subscription = Subscription(self, self._capacity)
        if self._closed:
            subscription._shutdown()
        else:
            self._subscribers.add(subscription)
        return subscription

    def send(self, event: ReloadEvent = ReloadEvent.RELOAD) -> int:
        """Deliver an event to every current subscriber.

        Sending with no subscribers does nothing. A subscriber whose queue is
        full misses this event.

        Returns:
            Number of subscribers the event was delivered to
        """
        delivered = 0
        for subscription in list(self._subscribers):
            if subscription._deliver(event):
                delivered += 1
            else:
                logger.debug("Subscriber lagging, dropped %s", event.value)
        return delivered

    def close(self) -> None:
        """End every subscription; later subscribers see a closed channel."""
        self._closed = True
        for subscription in list(self._subscribers):
            subscription._shutdown()
        self._subscribers.clear()

    def _unsubscribe(self, subscription: Subscription) -> None:
        self._subscribers.discard(subscription)
