"""Application event sourcing – correlate/drain loop over reactions and projections.

``correlate`` finds pending work without running it: for every consumer
(reaction or projection) and every stream it keys work by, the events past
that pair's watermark.  ``drain`` runs the leased work and advances the
watermarks.  Callers repeat both until ``correlate`` leases nothing.
"""

from __future__ import annotations

import dataclasses
from typing import Callable, Protocol, Sequence

from es_commerce.application.event_sourcing.store import EventLog
from es_commerce.application.event_sourcing.stored_event import Event
from es_commerce.kernel.errors import HandlerError
from es_commerce.observability.logging import get_logger

logger = get_logger(__name__)

#: ``(consumer name, stream)``
LeaseKey = tuple[str, str]


class Consumer(Protocol):
    name: str
    kind: str

    def matches(self, event: Event) -> bool: ...

    def target(self, event: Event) -> str | None: ...

    async def handle(self, event: Event, stream: str) -> None: ...


@dataclasses.dataclass(frozen=True)
class Lease:
    """Pending events of one consumer for one stream, in commit order."""

    consumer: str
    stream: str
    events: tuple[Event, ...]
    watermark: int
    """Last event id this consumer processed for the stream when leased."""

    retry: int = 0

    @property
    def key(self) -> LeaseKey:
        return (self.consumer, self.stream)

    @property
    def at(self) -> int:
        return self.events[-1].id


@dataclasses.dataclass(frozen=True)
class Correlation:
    leased: list[Lease]
    last_id: int
    """Id of the last event scanned (``after`` when nothing was scanned)."""


@dataclasses.dataclass(frozen=True)
class Ack:
    consumer: str
    stream: str
    at: int
    handled: int


@dataclasses.dataclass(frozen=True)
class LeaseFailure:
    consumer: str
    stream: str
    event_id: int
    retry: int
    error: HandlerError


@dataclasses.dataclass(frozen=True)
class Drained:
    acked: list[Ack] = dataclasses.field(default_factory=list)
    failed: list[LeaseFailure] = dataclasses.field(default_factory=list)
    blocked: list[LeaseFailure] = dataclasses.field(default_factory=list)


class Drainer:
    """Owns the per-(consumer, stream) watermarks and the held leases."""

    def __init__(
        self,
        log: EventLog,
        consumers: Callable[[], Sequence[Consumer]],
        *,
        max_retries: int = 3,
        correlate_limit: int | None = None,
    ) -> None:
        self._log = log
        self._consumers = consumers
        self._max_retries = max_retries
        self._correlate_limit = correlate_limit
        self._watermarks: dict[LeaseKey, int] = {}
        self._retries: dict[LeaseKey, int] = {}
        self._blocked: dict[LeaseKey, LeaseFailure] = {}
        self._leases: dict[LeaseKey, Lease] = {}

    # Correlate -------------------------------------------------------------

    def correlate(self, after: int = -1, limit: int | None = None) -> Correlation:
        """Lease pending work for events after *after*.

        *limit* caps the number of events leased in total.
        """
        consumers = list(self._consumers())
        grouped: dict[LeaseKey, list[Event]] = {}
        leased_count = 0
        last_id = after
        for event in self._log.query(after=after):
            if limit is not None and leased_count >= limit:
                break
            last_id = event.id
            for consumer in consumers:
                if not consumer.matches(event):
                    continue
                stream = consumer.target(event)
                if not stream:
                    continue
                key = (consumer.name, stream)
                if key in self._blocked or event.id <= self._watermarks.get(key, -1):
                    continue
                grouped.setdefault(key, []).append(event)
                leased_count += 1

        self._leases = {
            key: Lease(
                consumer=key[0],
                stream=key[1],
                events=tuple(events),
                watermark=self._watermarks.get(key, -1),
                retry=self._retries.get(key, 0),
            )
            for key, events in grouped.items()
        }
        return Correlation(leased=list(self._leases.values()), last_id=last_id)

    # Drain -----------------------------------------------------------------

    async def drain(self, stream_limit: int = 10, event_limit: int = 100) -> Drained:
        """Run at most *stream_limit* held leases, *event_limit* events each."""
        if not self._leases:
            self.correlate(limit=self._correlate_limit)
        by_name = {c.name: c for c in self._consumers()}
        result = Drained()
        for lease in list(self._leases.values())[:stream_limit]:
            del self._leases[lease.key]
            consumer = by_name.get(lease.consumer)
            if consumer is None:
                continue
            handled = await self._run(consumer, lease, event_limit, result)
            if handled:
                result.acked.append(
                    Ack(lease.consumer, lease.stream, self._watermarks[lease.key], handled)
                )
        return result

    async def _run(self, consumer: Consumer, lease: Lease, event_limit: int, result: Drained) -> int:
        handled = 0
        for event in lease.events[:event_limit]:
            if event.id <= self._watermarks.get(lease.key, -1):
                continue
            try:
                await consumer.handle(event, lease.stream)
            except HandlerError as exc:
                self._fail(consumer, lease, event, exc, result)
                break
            self._watermarks[lease.key] = event.id
            self._retries.pop(lease.key, None)
            handled += 1
        return handled

    def _fail(
        self,
        consumer: Consumer,
        lease: Lease,
        event: Event,
        error: HandlerError,
        result: Drained,
    ) -> None:
        retry = self._retries.get(lease.key, 0) + 1
        self._retries[lease.key] = retry
        failure = LeaseFailure(lease.consumer, lease.stream, event.id, retry, error)
        result.failed.append(failure)
        logger.error(
            f"{consumer.kind}.failed",
            consumer=lease.consumer,
            stream=lease.stream,
            event_id=event.id,
            event_name=event.name,
            retry=retry,
            exc_info=error.cause or error,
        )
        if retry >= self._max_retries:
            self._blocked[lease.key] = failure
            result.blocked.append(failure)
            logger.warning(
                "lease.blocked",
                consumer=lease.consumer,
                stream=lease.stream,
                event_id=event.id,
                retries=retry,
            )

    # Bookkeeping -----------------------------------------------------------

    @property
    def leased(self) -> list[Lease]:
        return list(self._leases.values())

    def watermark(self, consumer: str, stream: str) -> int:
        return self._watermarks.get((consumer, stream), -1)

    def blocked(self) -> list[LeaseFailure]:
        return list(self._blocked.values())

    def unblock(self, consumer: str, stream: str) -> bool:
        """Release a blocked lease so the next correlate retries it."""
        key = (consumer, stream)
        self._retries.pop(key, None)
        return self._blocked.pop(key, None) is not None

    def reset(self, consumer: str) -> None:
        """Forget every watermark of *consumer* so its events are replayed."""
        for mapping in (self._watermarks, self._retries, self._blocked, self._leases):
            for key in [k for k in mapping if k[0] == consumer]:
                del mapping[key]


__all__ = [
    "Ack",
    "Consumer",
    "Correlation",
    "Drained",
    "Drainer",
    "Lease",
    "LeaseFailure",
    "LeaseKey",
]
