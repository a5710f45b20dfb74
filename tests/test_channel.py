"""Tests for the reload broadcast channel."""

import asyncio

import pytest
from notesite.live.channel import ReloadChannel, ReloadEvent


class TestReloadChannel:
    """Tests for ReloadChannel."""

    @pytest.mark.asyncio
    async def test__no_subscribers__send_is_noop(self) -> None:
        channel = ReloadChannel()

        assert channel.send() == 0

    @pytest.mark.asyncio
    async def test__every_subscriber__receives_event(self) -> None:
        channel = ReloadChannel()
        first = channel.subscribe()
        second = channel.subscribe()

        delivered = channel.send(ReloadEvent.RELOAD)

        assert delivered == 2
        assert await first.recv() is ReloadEvent.RELOAD
        assert await second.recv() is ReloadEvent.RELOAD

    @pytest.mark.asyncio
    async def test__late_subscriber__misses_earlier_events(self) -> None:
        channel = ReloadChannel()
        early = channel.subscribe()
        channel.send()

        late = channel.subscribe()
        channel.send()

        assert await early.recv() is ReloadEvent.RELOAD
        assert await early.recv() is ReloadEvent.RELOAD
        assert await late.recv() is ReloadEvent.RELOAD
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(late.recv(), 0.05)

    @pytest.mark.asyncio
    async def test__lagging_subscriber__drops_overflow(self) -> None:
        channel = ReloadChannel(capacity=2)
        channel.subscribe()

        results = [channel.send() for _ in range(3)]

        assert results == [1, 1, 0]

    @pytest.mark.asyncio
    async def test__unsubscribed__no_longer_counted(self) -> None:
        channel = ReloadChannel()
        async with channel.subscribe():
            assert channel.subscriber_count == 1

        assert channel.subscriber_count == 0
        assert channel.send() == 0

    @pytest.mark.asyncio
    async def test__close__ends_iteration(self) -> None:
        channel = ReloadChannel()
        subscription = channel.subscribe()
        channel.send()
        channel.close()

        received = [event async for event in subscription]

        assert received == [ReloadEvent.RELOAD]

    @pytest.mark.asyncio
    async def test__close_with_full_queue__still_ends(self) -> None:
        channel = ReloadChannel(capacity=1)
        subscription = channel.subscribe()
        channel.send()
        channel.close()

        received = [event async for event in subscription]

        assert received == []

    @pytest.mark.asyncio
    async def test__subscribe_after_close__ends_immediately(self) -> None:
        channel = ReloadChannel()
        channel.close()

        subscription = channel.subscribe()

        assert await subscription.recv() is None
        assert channel.send() == 0

    @pytest.mark.asyncio
    async def test__waiting_subscriber__woken_by_send(self) -> None:
        channel = ReloadChannel()
        subscription = channel.subscribe()

        waiter = asyncio.create_task(subscription.recv())
        await asyncio.sleep(0)
        channel.send()

        assert await asyncio.wait_for(waiter, 1) is ReloadEvent.RELOAD
