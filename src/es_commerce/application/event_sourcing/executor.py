"""Application event sourcing – CommandExecutor and the aggregate registry."""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable
from uuid import uuid4

from es_commerce.application.event_sourcing.aggregate import (
    AggregateDefinition,
    CommandContext,
    Snapshot,
    State,
    validate_payload,
)
from es_commerce.application.event_sourcing.store import EventLog
from es_commerce.application.event_sourcing.stored_event import (
    ActionCausation,
    Causation,
    Event,
    EventCausation,
    EventMeta,
)
from es_commerce.kernel.errors import (
    ConcurrencyConflictError,
    InvariantViolationError,
    UnknownCommandError,
    UnknownStreamError,
    ValidationError,
)
from es_commerce.kernel.security import Actor
from es_commerce.observability.correlation import CorrelationContext
from es_commerce.observability.logging import get_logger

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True)
class Target:
    """Where a command goes and who sends it.

    ``expected_version`` lets a caller pin the version it decided on; the
    command fails with :class:`ConcurrencyConflictError` if the stream has
    moved since.
    """

    stream: str
    actor: Actor
    expected_version: int | None = None


@dataclasses.dataclass(frozen=True)
class CommandResult:
    command: str
    stream: str
    events: tuple[Event, ...]
    state: State
    version: int
    accepted: bool = True


class AggregateRegistry:
    """Name → aggregate and command → aggregate lookups, built at startup."""

    def __init__(self, aggregates: Iterable[AggregateDefinition] = ()) -> None:
        self._aggregates: dict[str, AggregateDefinition] = {}
        self._by_command: dict[str, AggregateDefinition] = {}
        for aggregate in aggregates:
            self.register(aggregate)

    def register(self, aggregate: AggregateDefinition) -> None:
        existing = self._aggregates.get(aggregate.name)
        if existing is aggregate:
            return
        if existing is not None:
            raise ValueError(f"Aggregate {aggregate.name!r} is already registered")
        for command in aggregate.commands:
            owner = self._by_command.get(command)
            if owner is not None:
                raise ValueError(
                    f"Command {command!r} is handled by both {owner.name!r} and {aggregate.name!r}"
                )
        self._aggregates[aggregate.name] = aggregate
        for command in aggregate.commands:
            self._by_command[command] = aggregate

    def aggregate_for(self, command: str) -> AggregateDefinition:
        aggregate = self._by_command.get(command)
        if aggregate is None:
            raise UnknownCommandError(command)
        return aggregate

    def get(self, aggregate: AggregateDefinition | str) -> AggregateDefinition:
        name = aggregate if isinstance(aggregate, str) else aggregate.name
        found = self._aggregates.get(name)
        if found is None:
            raise UnknownStreamError(name)
        return found

    @property
    def commands(self) -> list[str]:
        return sorted(self._by_command)

    def __iter__(self):
        return iter(self._aggregates.values())


class CommandExecutor:
    """Validate → load → guard → decide → append, all or nothing."""

    def __init__(self, log: EventLog, registry: AggregateRegistry) -> None:
        self._log = log
        self._registry = registry

    def load(self, aggregate: AggregateDefinition | str, stream: str) -> Snapshot:
        """Fold *stream* under *aggregate*; an empty stream yields ``init()`` at version 0."""
        definition = self._registry.get(aggregate)
        events = self._log.load(stream)
        return Snapshot(
            state=definition.fold(events),
            version=len(events),
            event=events[-1] if events else None,
        )

    async def execute(
        self,
        command: str,
        target: Target,
        payload: Any,
        *,
        reacting_to: Event | None = None,
    ) -> CommandResult:
        aggregate = self._registry.aggregate_for(command)
        spec = aggregate.commands[command]
        if not target.stream:
            raise ValidationError(f"Command {command} needs a target stream")
        data = validate_payload(spec.schema, payload, what=f"command {command}")

        snapshot = self.load(aggregate, target.stream)
        log = logger.bind(command=command, stream=target.stream, version=snapshot.version)
        if target.expected_version is not None and target.expected_version != snapshot.version:
            log.info("command.conflict", expected=target.expected_version)
            raise ConcurrencyConflictError(target.stream, target.expected_version, snapshot.version)

        try:
            for invariant in spec.given:
                invariant.check(snapshot.state, target.actor)
        except InvariantViolationError as exc:
            log.info("command.rejected", reason=exc.description)
            raise

        ctx = CommandContext(
            state=snapshot.state,
            actor=target.actor,
            stream=target.stream,
            version=snapshot.version,
        )
        drafts = [
            (name, aggregate.validate_event(name, event_data))
            for name, event_data in spec.decide(data, ctx)
        ]
        if not drafts:
            log.debug("command.noop")
            return CommandResult(command, target.stream, (), snapshot.state, snapshot.version)

        meta = self._meta(command, target, reacting_to)
        try:
            events = await self._log.append(target.stream, snapshot.version, drafts, meta)
        except ConcurrencyConflictError as exc:
            log.info("command.conflict", actual=exc.actual)
            raise

        log.debug(
            "command.executed",
            correlation=meta.correlation,
            events=[e.name for e in events],
        )
        return CommandResult(
            command=command,
            stream=target.stream,
            events=tuple(events),
            state=aggregate.fold(events, snapshot.state),
            version=events[-1].version,
        )

    @staticmethod
    def _meta(command: str, target: Target, reacting_to: Event | None) -> EventMeta:
        action = ActionCausation(stream=target.stream, actor=target.actor, name=command)
        if reacting_to is not None:
            return EventMeta(
                correlation=reacting_to.meta.correlation,
                causation=Causation(
                    action=action,
                    event=EventCausation(
                        id=reacting_to.id,
                        name=reacting_to.name,
                        stream=reacting_to.stream,
                    ),
                ),
            )
        ctx = CorrelationContext.get()
        correlation = ctx.correlation_id if ctx is not None else uuid4().hex
        return EventMeta(correlation=correlation, causation=Causation(action=action))


__all__ = ["AggregateRegistry", "CommandExecutor", "CommandResult", "Target"]
