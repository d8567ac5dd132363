"""Tests for the closable queue."""

import asyncio

import pytest

from app.features.importer.streams import ClosableQueue


@pytest.mark.asyncio
async def test_consumer_drains_items_before_stopping():
    """Items put before close are all delivered, in order."""
    queue: ClosableQueue[int] = ClosableQueue(10)
    for i in range(3):
        await queue.put(i)
    await queue.close()

    assert [item async for item in queue] == [0, 1, 2]


@pytest.mark.asyncio
async def test_every_consumer_stops_after_close():
    """Closing releases every consumer, however many there are."""
    queue: ClosableQueue[int] = ClosableQueue(1)
    seen: list[int] = []

    async def consume() -> None:
        async for item in queue:
            seen.append(item)

    consumers = [asyncio.create_task(consume()) for _ in range(5)]
    for i in range(10):
        await queue.put(i)
    await queue.close()

    await asyncio.wait_for(asyncio.gather(*consumers), timeout=1)

    assert sorted(seen) == list(range(10))


@pytest.mark.asyncio
async def test_put_after_close_raises():
    """Nothing can be put once the queue is closed."""
    queue: ClosableQueue[int] = ClosableQueue()
    await queue.close()

    assert queue.closed is True
    with pytest.raises(RuntimeError, match="closed"):
        await queue.put(1)


@pytest.mark.asyncio
async def test_close_is_idempotent():
    """Closing twice does not block or duplicate the end marker."""
    queue: ClosableQueue[int] = ClosableQueue(1)
    await queue.close()
    await asyncio.wait_for(queue.close(), timeout=1)

    assert [item async for item in queue] == []


@pytest.mark.asyncio
async def test_put_waits_while_full():
    """A bounded queue applies backpressure to the producer."""
    queue: ClosableQueue[int] = ClosableQueue(1)
    await queue.put(1)

    blocked = asyncio.create_task(queue.put(2))
    await asyncio.sleep(0)
    assert not blocked.done()

    assert await anext(queue) == 1
    await asyncio.wait_for(blocked, timeout=1)
    assert await anext(queue) == 2
