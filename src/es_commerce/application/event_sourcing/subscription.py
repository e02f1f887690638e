"""Application event sourcing – live subscription feed over the event log.

A subscriber first receives every event already committed (after its
resume point), then every event committed later, each exactly once and in
id order::

    async with app.subscribe() as feed:
        async for event in feed:
            send(event.to_wire())
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import AsyncIterator

from es_commerce.application.event_sourcing.store import EventLog
from es_commerce.application.event_sourcing.stored_event import Event
from es_commerce.observability.logging import get_logger

logger = get_logger(__name__)


class Subscription:
    """Cancellable async iterator fed by the log's committed notifications.

    Committed batches land in a bounded queue.  When the queue is full the
    subscription marks itself lagging and later backfills from the log, so
    nothing is lost and memory stays bounded.  ``cancel()``, an external
    *signal* being set, or leaving the ``async with`` block stops the feed
    and unregisters its listener, and so does cancelling the consuming task
    or leaving an ``async for`` over it.
    """

    def __init__(
        self,
        log: EventLog,
        *,
        after: int = -1,
        signal: asyncio.Event | None = None,
        maxsize: int = 100,
    ) -> None:
        self._log = log
        self._last_id = after
        self._signal = signal
        self._queue: asyncio.Queue[list[Event]] = asyncio.Queue(maxsize)
        self._pending: deque[Event] = deque()
        self._stop = asyncio.Event()
        self._started = False
        self._listening = False
        self._lagging = False

    # Lifecycle -------------------------------------------------------------

    def _start(self) -> None:
        self._started = True
        # listen before replaying so nothing committed in between is missed
        self._log.on_committed(self._on_committed)
        self._listening = True
        self._pending.extend(self._log.query(after=self._last_id))
        logger.debug("subscription.started", after=self._last_id, replay=len(self._pending))

    def _on_committed(self, events: list[Event]) -> None:
        if self.stopped:
            return
        try:
            self._queue.put_nowait(events)
        except asyncio.QueueFull:
            self._lagging = True

    def cancel(self) -> None:
        self._stop.set()
        self._release()

    def _release(self) -> None:
        if self._listening:
            self._log.off_committed(self._on_committed)
            self._listening = False
            logger.debug("subscription.closed", last_id=self._last_id)

    @property
    def stopped(self) -> bool:
        return self._stop.is_set() or (self._signal is not None and self._signal.is_set())

    @property
    def last_id(self) -> int:
        """Id of the last event delivered (the resume point)."""
        return self._last_id

    async def __aenter__(self) -> Subscription:
        return self

    async def __aexit__(self, *exc: object) -> None:
        self.cancel()

    async def aclose(self) -> None:
        self.cancel()

    # Iteration -------------------------------------------------------------

    def __aiter__(self) -> AsyncIterator[Event]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[Event]:
        # the generator is closed on break or garbage collection
        try:
            while True:
                try:
                    event = await self.__anext__()
                except StopAsyncIteration:
                    return
                yield event
        finally:
            self.cancel()

    async def __anext__(self) -> Event:
        if not self._started:
            self._start()
        while True:
            if self.stopped:
                self._release()
                raise StopAsyncIteration
            while self._pending:
                event = self._pending.popleft()
                if event.id > self._last_id:
                    self._last_id = event.id
                    return event
            batch = await self._next_batch()
            if batch is None:
                continue
            if self._lagging or (batch and batch[0].id > self._last_id + 1):
                self._backfill()
            else:
                self._pending.extend(batch)

    def _backfill(self) -> None:
        self._lagging = False
        while not self._queue.empty():
            self._queue.get_nowait()
        self._pending.extend(self._log.query(after=self._last_id))

    async def _next_batch(self) -> list[Event] | None:
        if not self._queue.empty():
            return self._queue.get_nowait()
        getter = asyncio.ensure_future(self._queue.get())
        waiters: set[asyncio.Future[object]] = {getter, asyncio.ensure_future(self._stop.wait())}
        if self._signal is not None:
            waiters.add(asyncio.ensure_future(self._signal.wait()))
        try:
            await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            self.cancel()
            raise
        finally:
            for waiter in waiters:
                if not waiter.done():
                    waiter.cancel()
        if self.stopped or not getter.done() or getter.cancelled():
            return None
        return getter.result()


__all__ = ["Subscription"]
