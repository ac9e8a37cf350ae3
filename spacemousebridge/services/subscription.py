"""Queue-backed subscriber handle."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

from ..events import SessionEvent


class Subscription:
    """Collects session events in an unbounded queue.

    Instances are callables, so they can be passed straight to
    ``DeviceSession.subscribe``. Identity is used for hashing, which keeps
    each instance a distinct subscriber.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[SessionEvent] = asyncio.Queue()

    def __call__(self, event: SessionEvent) -> None:
        self._queue.put_nowait(event)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def get(self) -> SessionEvent:
        return await self._queue.get()

    def get_nowait(self) -> SessionEvent:
        return self._queue.get_nowait()

    def drain(self) -> list[SessionEvent]:
        """Return and remove every queued event."""
        events: list[SessionEvent] = []
        while not self._queue.empty():
            events.append(self._queue.get_nowait())
        return events

    def __aiter__(self) -> AsyncIterator[SessionEvent]:
        return self

    async def __anext__(self) -> SessionEvent:
        return await self._queue.get()


__all__ = ["Subscription"]
