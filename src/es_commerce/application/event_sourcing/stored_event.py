"""Application event sourcing – committed Event envelope and its metadata."""

from __future__ import annotations

import copy
import dataclasses
from datetime import datetime
from typing import Any, Iterable

from es_commerce.kernel.security import Actor
from es_commerce.kernel.time import to_iso


@dataclasses.dataclass(frozen=True)
class ActionCausation:
    """The command that produced an event."""

    stream: str
    actor: Actor
    name: str | None = None

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {"stream": self.stream, "actor": self.actor.to_wire()}
        if self.name is not None:
            wire["name"] = self.name
        return wire


@dataclasses.dataclass(frozen=True)
class EventCausation:
    """The committed event whose reaction issued the command."""

    id: int
    name: str
    stream: str

    def to_wire(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "stream": self.stream}


@dataclasses.dataclass(frozen=True)
class Causation:
    action: ActionCausation | None = None
    event: EventCausation | None = None

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {}
        if self.action is not None:
            wire["action"] = self.action.to_wire()
        if self.event is not None:
            wire["event"] = self.event.to_wire()
        return wire


@dataclasses.dataclass(frozen=True)
class EventMeta:
    """``correlation`` is shared by every event of one causal chain."""

    correlation: str
    causation: Causation = dataclasses.field(default_factory=Causation)

    def to_wire(self) -> dict[str, Any]:
        return {"correlation": self.correlation, "causation": self.causation.to_wire()}


@dataclasses.dataclass(frozen=True)
class Event:
    """An event as committed to the log.

    Instances are owned by the log and shared read-only with every reaction,
    projection and subscriber; nobody may mutate ``data``.
    """

    id: int
    """Global position in the log (0-based, gap-free)."""

    stream: str

    name: str

    data: dict[str, Any]
    """Payload validated against the event schema (camelCase keys)."""

    version: int
    """1-based position of the event within its stream."""

    created: datetime

    meta: EventMeta

    @property
    def actor(self) -> Actor | None:
        action = self.meta.causation.action
        return action.actor if action is not None else None

    def to_wire(self) -> dict[str, Any]:
        """Render the envelope shape delivered to external consumers."""
        return {
            "id": self.id,
            "name": self.name,
            "data": copy.deepcopy(self.data),
            "stream": self.stream,
            "version": self.version,
            "created": to_iso(self.created),
            "meta": self.meta.to_wire(),
        }


def serialize_events(events: Iterable[Event]) -> list[dict[str, Any]]:
    return [e.to_wire() for e in events]


__all__ = [
    "ActionCausation",
    "Causation",
    "Event",
    "EventCausation",
    "EventMeta",
    "serialize_events",
]
