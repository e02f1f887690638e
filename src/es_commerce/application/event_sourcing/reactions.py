"""Application event sourcing – reactions (event → async handler → new commands)."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol

from es_commerce.application.event_sourcing.store import matches
from es_commerce.application.event_sourcing.stored_event import Event
from es_commerce.kernel.errors import ReactionHandlerError

if TYPE_CHECKING:
    from es_commerce.application.event_sourcing.executor import (
        CommandExecutor,
        CommandResult,
        Target,
    )


class Dispatcher(Protocol):
    """What a reaction handler uses to issue follow-up commands."""

    async def do(self, command: str, target: "Target", payload: Any) -> "CommandResult": ...


ReactionHandler = Callable[[Event, str, Dispatcher], Awaitable[None]]

#: Maps a triggering event to the stream its lease is keyed by (``None`` skips it).
Resolver = Callable[[Event], "str | None"]


@dataclasses.dataclass(frozen=True)
class Reaction:
    """``pattern`` is an event name or a shell-style glob."""

    name: str
    pattern: str
    handler: ReactionHandler
    resolver: Resolver | None = None

    def matches(self, event: Event) -> bool:
        return matches(self.pattern, event.name)

    def target(self, event: Event) -> str | None:
        if self.resolver is None:
            return event.stream
        return self.resolver(event)


class CausalDispatcher:
    """Dispatcher whose commands are all caused by one triggering event.

    The executor copies the event's correlation id and records it as
    ``meta.causation.event`` on everything these commands emit.
    """

    def __init__(self, executor: CommandExecutor, event: Event) -> None:
        self._executor = executor
        self._event = event

    @property
    def event(self) -> Event:
        return self._event

    async def do(self, command: str, target: Target, payload: Any) -> CommandResult:
        return await self._executor.execute(command, target, payload, reacting_to=self._event)


class ReactionConsumer:
    """Drain-loop adapter for a single :class:`Reaction`."""

    kind = "reaction"

    def __init__(self, reaction: Reaction, executor: CommandExecutor) -> None:
        self.reaction = reaction
        self.name = f"reaction:{reaction.name}"
        self._executor = executor

    def matches(self, event: Event) -> bool:
        return self.reaction.matches(event)

    def target(self, event: Event) -> str | None:
        return self.reaction.target(event)

    async def handle(self, event: Event, stream: str) -> None:
        try:
            await self.reaction.handler(event, stream, CausalDispatcher(self._executor, event))
        except Exception as exc:  # noqa: BLE001
            raise ReactionHandlerError(self.name, event.id, event.name, cause=exc) from exc


class ReactionEngine:
    """Registry of reactions; hands out their drain-loop consumers."""

    def __init__(self, executor: CommandExecutor) -> None:
        self._executor = executor
        self._consumers: dict[str, ReactionConsumer] = {}

    def register(self, reaction: Reaction) -> None:
        if reaction.name in {c.reaction.name for c in self._consumers.values()}:
            raise ValueError(f"Reaction {reaction.name!r} is already registered")
        consumer = ReactionConsumer(reaction, self._executor)
        self._consumers[consumer.name] = consumer

    def consumers(self) -> list[ReactionConsumer]:
        return list(self._consumers.values())

    def interested(self, event: Event) -> bool:
        return any(c.matches(event) for c in self._consumers.values())

    @property
    def reactions(self) -> list[Reaction]:
        return [c.reaction for c in self._consumers.values()]


__all__ = [
    "CausalDispatcher",
    "Dispatcher",
    "Reaction",
    "ReactionConsumer",
    "ReactionEngine",
    "ReactionHandler",
    "Resolver",
]
