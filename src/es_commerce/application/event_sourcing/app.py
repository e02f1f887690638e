"""Application event sourcing – App: the explicit runtime context.

One ``App`` owns one event log, the aggregate registry, the reaction and
projection engines and the correlate/drain bookkeeping.  Nothing is global:
build a fresh ``App`` (for instance per test) to start from an empty log.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Iterable, Literal

from es_commerce.application.event_sourcing.aggregate import AggregateDefinition, Snapshot
from es_commerce.application.event_sourcing.drain import (
    Consumer,
    Correlation,
    Drained,
    Drainer,
    LeaseFailure,
)
from es_commerce.application.event_sourcing.executor import (
    AggregateRegistry,
    CommandExecutor,
    CommandResult,
    Target,
)
from es_commerce.application.event_sourcing.projector import Projection, ProjectionEngine
from es_commerce.application.event_sourcing.reactions import ReactionEngine
from es_commerce.application.event_sourcing.slice import Slice
from es_commerce.application.event_sourcing.store import (
    CommittedListener,
    InMemoryEventLog,
)
from es_commerce.application.event_sourcing.stored_event import Event
from es_commerce.application.event_sourcing.subscription import Subscription
from es_commerce.config.settings import EngineSettings
from es_commerce.kernel.time import Clock
from es_commerce.observability.logging import get_logger

logger = get_logger(__name__)

SettledListener = Callable[[int], None]


class App:
    """Command and query surface of the runtime.

    Parameters
    ----------
    slices:
        Feature slices whose aggregates, projections and reactions are
        registered at construction.
    settings:
        Drain/settle bounds; defaults to :class:`EngineSettings()`.
    clock:
        Source of event timestamps.
    auto_settle:
        When true, every commit that some reaction or projection cares
        about schedules a debounced :meth:`settle_soon`.
    """

    def __init__(
        self,
        slices: Iterable[Slice] = (),
        *,
        settings: EngineSettings | None = None,
        clock: Clock | None = None,
        log: InMemoryEventLog | None = None,
        auto_settle: bool = False,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.log = log or InMemoryEventLog(clock)
        self.registry = AggregateRegistry()
        self.executor = CommandExecutor(self.log, self.registry)
        self.reactions = ReactionEngine(self.executor)
        self.projections = ProjectionEngine()
        self.drainer = Drainer(
            self.log,
            self._consumers,
            max_retries=self.settings.reaction_max_retries,
            correlate_limit=self.settings.correlate_limit,
        )
        self._settled_listeners: list[SettledListener] = []
        self._settle_task: asyncio.Task[int] | None = None
        self._settle_requested = False

        for item in slices:
            self.add_slice(item)
        if auto_settle:
            self.log.on_committed(self._schedule)

    def add_slice(self, item: Slice) -> None:
        for aggregate in item.aggregates:
            self.registry.register(aggregate)
        for projection in item.projections:
            self.projections.register(projection)
        for reaction in item.reactions:
            self.reactions.register(reaction)

    def _consumers(self) -> list[Consumer]:
        return [*self.reactions.consumers(), *self.projections.consumers()]

    # Commands and queries ---------------------------------------------------

    async def do(
        self,
        command: str,
        target: Target,
        payload: Any = None,
        *,
        reacting_to: Event | None = None,
    ) -> CommandResult:
        return await self.executor.execute(command, target, payload, reacting_to=reacting_to)

    def load(self, aggregate: AggregateDefinition | str, stream: str) -> Snapshot:
        return self.executor.load(aggregate, stream)

    def query(
        self,
        after: int = -1,
        limit: int | None = None,
        *,
        stream: str | None = None,
        names: Iterable[str] | None = None,
    ) -> list[Event]:
        return self.log.query(after, limit, stream=stream, names=names)

    def subscribe(
        self,
        after: int = -1,
        *,
        signal: asyncio.Event | None = None,
        maxsize: int | None = None,
    ) -> Subscription:
        return Subscription(
            self.log,
            after=after,
            signal=signal,
            maxsize=self.settings.subscription_queue_size if maxsize is None else maxsize,
        )

    # Correlate / drain ------------------------------------------------------

    def correlate(self, after: int = -1, limit: int | None = None) -> Correlation:
        return self.drainer.correlate(after, limit)

    async def drain(
        self,
        stream_limit: int | None = None,
        event_limit: int | None = None,
    ) -> Drained:
        return await self.drainer.drain(
            self.settings.drain_stream_limit if stream_limit is None else stream_limit,
            self.settings.drain_event_limit if event_limit is None else event_limit,
        )

    async def settle(self, max_passes: int | None = None) -> int:
        """Correlate and drain until nothing is leased; return the passes run.

        *max_passes* is a backstop against reaction cycles, not a
        correctness mechanism.
        """
        bound = self.settings.settle_max_passes if max_passes is None else max_passes
        passes = 0
        while passes < bound:
            correlation = self.correlate(limit=self.settings.correlate_limit)
            if not correlation.leased:
                break
            await self.drain()
            passes += 1
        else:
            if self.correlate(limit=self.settings.correlate_limit).leased:
                logger.warning("settle.exhausted", passes=passes)
        for listener in list(self._settled_listeners):
            listener(passes)
        return passes

    def settle_soon(self) -> asyncio.Task[int]:
        """Schedule a debounced settle on the running loop (fire and forget).

        Calls arriving while one is pending coalesce into it.
        """
        self._settle_requested = True
        if self._settle_task is None or self._settle_task.done():
            self._settle_task = asyncio.get_running_loop().create_task(self._settle_loop())
        return self._settle_task

    async def _settle_loop(self) -> int:
        passes = 0
        while self._settle_requested:
            self._settle_requested = False
            await asyncio.sleep(self.settings.settle_debounce_ms / 1000)
            passes += await self.settle()
        return passes

    def _schedule(self, events: list[Event]) -> None:
        if any(self.reactions.interested(e) or self.projections.interested(e) for e in events):
            self.settle_soon()

    def blocked(self) -> list[LeaseFailure]:
        return self.drainer.blocked()

    def unblock(self, consumer: str, stream: str) -> bool:
        return self.drainer.unblock(consumer, stream)

    def rebuild(self, projection: Projection | str) -> None:
        """Clear a projection and rewind it so the next drain replays the log."""
        found = self.projections.get(projection if isinstance(projection, str) else projection.name)
        found.clear()
        self.drainer.reset(f"projection:{found.name}")

    # Notifications ----------------------------------------------------------

    def on(self, kind: Literal["committed", "settled"], listener: Callable[..., None]) -> None:
        if kind == "committed":
            self.log.on_committed(listener)
        elif kind == "settled":
            self._settled_listeners.append(listener)
        else:
            raise ValueError(f"Unknown notification {kind!r}")

    def off(self, kind: Literal["committed", "settled"], listener: Callable[..., None]) -> None:
        if kind == "committed":
            self.log.off_committed(listener)
        elif kind == "settled":
            if listener in self._settled_listeners:
                self._settled_listeners.remove(listener)
        else:
            raise ValueError(f"Unknown notification {kind!r}")


__all__ = ["App", "CommittedListener", "SettledListener"]
