"""Application event sourcing – Projection base class and ProjectionEngine."""

from __future__ import annotations

from typing import Callable

from es_commerce.application.event_sourcing.store import matches
from es_commerce.application.event_sourcing.stored_event import Event
from es_commerce.kernel.errors import ProjectionHandlerError

ProjectionHandler = Callable[[Event], None]


class Projection:
    """A named read model folded from committed events.

    Subclass, keep the store on the instance, and register synchronous
    handlers with :meth:`on`.  The engine feeds events in commit order and
    never runs two handlers of the same projection at once.

    Example::

        class OrderCount(Projection):
            def __init__(self) -> None:
                super().__init__("order-count")
                self.count = 0
                self.on("CartSubmitted")(self._submitted)

            def _submitted(self, event: Event) -> None:
                self.count += 1

            def clear(self) -> None:
                self.count = 0
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: list[tuple[str, ProjectionHandler]] = []

    def on(self, *patterns: str) -> Callable[[ProjectionHandler], ProjectionHandler]:
        def decorator(handler: ProjectionHandler) -> ProjectionHandler:
            for pattern in patterns:
                self._handlers.append((pattern, handler))
            return handler

        return decorator

    def handles(self, event: Event) -> bool:
        return any(matches(pattern, event.name) for pattern, _ in self._handlers)

    def apply(self, event: Event) -> None:
        for pattern, handler in self._handlers:
            if matches(pattern, event.name):
                handler(event)

    def clear(self) -> None:
        """Reset the store; subclasses with state must override."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class ProjectionConsumer:
    """Drain-loop adapter; one lease per projection keeps commit order."""

    kind = "projection"

    def __init__(self, projection: Projection) -> None:
        self.projection = projection
        self.name = f"projection:{projection.name}"

    def matches(self, event: Event) -> bool:
        return self.projection.handles(event)

    def target(self, event: Event) -> str:  # noqa: ARG002
        return self.projection.name

    async def handle(self, event: Event, stream: str) -> None:  # noqa: ARG002
        try:
            self.projection.apply(event)
        except Exception as exc:  # noqa: BLE001
            raise ProjectionHandlerError(self.name, event.id, event.name, cause=exc) from exc


class ProjectionEngine:
    def __init__(self) -> None:
        self._consumers: dict[str, ProjectionConsumer] = {}

    def register(self, projection: Projection) -> None:
        consumer = ProjectionConsumer(projection)
        existing = self._consumers.get(consumer.name)
        if existing is not None and existing.projection is not projection:
            raise ValueError(f"Projection {projection.name!r} is already registered")
        self._consumers[consumer.name] = consumer

    def consumers(self) -> list[ProjectionConsumer]:
        return list(self._consumers.values())

    def get(self, name: str) -> Projection:
        return self._consumers[f"projection:{name}"].projection

    def interested(self, event: Event) -> bool:
        return any(c.matches(event) for c in self._consumers.values())

    @property
    def projections(self) -> list[Projection]:
        return [c.projection for c in self._consumers.values()]


__all__ = [
    "Projection",
    "ProjectionConsumer",
    "ProjectionEngine",
    "ProjectionHandler",
]
