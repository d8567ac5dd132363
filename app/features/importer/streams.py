"""Closable asyncio queue used between the CSV producer and its consumers."""

import asyncio
from typing import Final

_CLOSED: Final = object()


class ClosableQueue[T]:
    """Bounded FIFO that consumers drain with ``async for`` until it is closed.

    Closing enqueues a marker behind every item already queued, so consumers
    only stop once the queue is drained. The first consumer to see the
    marker puts it back for the others.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def put(self, item: T) -> None:
        """Enqueue an item, waiting while the queue is full.

        Raises:
            RuntimeError: If the queue was already closed.
        """
        if self._closed:
            raise RuntimeError("put on a closed queue")
        await self._queue.put(item)

    async def close(self) -> None:
        """Signal that no more items will be put. Idempotent."""
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_CLOSED)

    def __aiter__(self) -> "ClosableQueue[T]":
        return self

    async def __anext__(self) -> T:
        item = await self._queue.get()
        if item is _CLOSED:
            # Only one marker is ever in flight and nothing else is put after
            # close, so the slot just freed is still free.
            self._queue.put_nowait(_CLOSED)
            raise StopAsyncIteration
        return item  # type: ignore[return-value]
