"""Application event sourcing – EventLog port and InMemoryEventLog."""

from __future__ import annotations

import abc
import asyncio
import copy
import fnmatch
from typing import Any, Callable, Iterable, Sequence

from es_commerce.application.event_sourcing.stored_event import Event, EventMeta
from es_commerce.kernel.errors import ConcurrencyConflictError
from es_commerce.kernel.time import Clock, SystemClock
from es_commerce.observability.logging import get_logger

logger = get_logger(__name__)

#: ``(event_name, event_data)`` pair produced by a command handler.
Draft = tuple[str, dict[str, Any]]

#: Receives every batch of events right after it is committed.
CommittedListener = Callable[[list[Event]], None]


def matches(pattern: str, name: str) -> bool:
    """Match an event name against an exact name or a shell-style glob."""
    return pattern == name or fnmatch.fnmatchcase(name, pattern)


class EventLog(abc.ABC):
    """Port – append-only, globally ordered event log.

    ``expected_version`` is used for **optimistic concurrency control**:

    - Pass ``0`` when creating a new stream (no events exist yet).
    - Pass the version observed when the command was decided.
    - The log raises :class:`ConcurrencyConflictError` if the stream's
      actual version differs from *expected_version*.
    """

    @abc.abstractmethod
    async def append(
        self,
        stream: str,
        expected_version: int,
        drafts: Sequence[Draft],
        meta: EventMeta,
    ) -> list[Event]:
        """Commit *drafts* to *stream* atomically, returning the stored events."""

    @abc.abstractmethod
    def query(
        self,
        after: int = -1,
        limit: int | None = None,
        *,
        stream: str | None = None,
        names: Iterable[str] | None = None,
    ) -> list[Event]:
        """Return events with ``id > after`` in ascending id order."""

    @abc.abstractmethod
    def load(self, stream: str) -> list[Event]:
        """Return every event of *stream* in version order."""

    @abc.abstractmethod
    def stream_version(self, stream: str) -> int:
        """Return the number of events committed to *stream*."""

    @abc.abstractmethod
    def on_committed(self, listener: CommittedListener) -> None: ...

    @abc.abstractmethod
    def off_committed(self, listener: CommittedListener) -> None: ...


class InMemoryEventLog(EventLog):
    """In-memory :class:`EventLog` for tests and local development.

    Rules enforced:

    - append-only: events are never modified or removed;
    - global ids start at ``0`` and are consecutive across all streams;
    - stream versions are 1-based and consecutive;
    - a batch is committed entirely or not at all.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._events: list[Event] = []
        # stream id → ordered list of Event
        self._streams: dict[str, list[Event]] = {}
        self._listeners: list[CommittedListener] = []

    async def append(
        self,
        stream: str,
        expected_version: int,
        drafts: Sequence[Draft],
        meta: EventMeta,
    ) -> list[Event]:
        if not drafts:
            return []
        # The write is the only suspension point of a command.
        await asyncio.sleep(0)

        committed = self._streams.get(stream, [])
        actual_version = len(committed)
        if actual_version != expected_version:
            raise ConcurrencyConflictError(stream, expected_version, actual_version)

        created = self._clock.now()
        next_id = len(self._events)
        events = [
            Event(
                id=next_id + i,
                stream=stream,
                name=name,
                data=copy.deepcopy(data),
                version=actual_version + i + 1,
                created=created,
                meta=meta,
            )
            for i, (name, data) in enumerate(drafts)
        ]
        self._events.extend(events)
        self._streams.setdefault(stream, []).extend(events)
        logger.debug(
            "log.committed",
            stream=stream,
            version=events[-1].version,
            ids=[e.id for e in events],
        )
        self._notify(events)
        return events

    def _notify(self, events: list[Event]) -> None:
        for listener in list(self._listeners):
            try:
                listener(events)
            except Exception:  # noqa: BLE001
                logger.exception("log.listener_failed", listener=repr(listener))

    def query(
        self,
        after: int = -1,
        limit: int | None = None,
        *,
        stream: str | None = None,
        names: Iterable[str] | None = None,
    ) -> list[Event]:
        # ids are list positions, so the lower bound is a slice
        candidates = self._events[max(after + 1, 0):]
        patterns = list(names) if names is not None else None
        result: list[Event] = []
        for event in candidates:
            if stream is not None and event.stream != stream:
                continue
            if patterns is not None and not any(matches(p, event.name) for p in patterns):
                continue
            result.append(event)
            if limit is not None and len(result) >= limit:
                break
        return result

    def load(self, stream: str) -> list[Event]:
        return list(self._streams.get(stream, []))

    def stream_version(self, stream: str) -> int:
        return len(self._streams.get(stream, []))

    @property
    def last_id(self) -> int:
        """Id of the most recent event, ``-1`` when the log is empty."""
        return len(self._events) - 1

    def __len__(self) -> int:
        return len(self._events)

    def on_committed(self, listener: CommittedListener) -> None:
        self._listeners.append(listener)

    def off_committed(self, listener: CommittedListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    @property
    def listener_count(self) -> int:
        return len(self._listeners)


__all__ = [
    "CommittedListener",
    "Draft",
    "EventLog",
    "InMemoryEventLog",
    "matches",
]
