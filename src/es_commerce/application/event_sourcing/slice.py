"""Application event sourcing – Slice: aggregates, projections and reactions shipped together."""

from __future__ import annotations

from typing import Callable

from es_commerce.application.event_sourcing.aggregate import AggregateDefinition
from es_commerce.application.event_sourcing.projector import Projection
from es_commerce.application.event_sourcing.reactions import (
    Reaction,
    ReactionHandler,
    Resolver,
)


class Slice:
    """A vertical feature: the write models it needs plus its read side.

    Example::

        cart = (
            Slice("cart")
            .with_state(Cart)
            .with_projection(orders)
            .react("CartSubmitted", publish_cart)
        )
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.aggregates: list[AggregateDefinition] = []
        self.projections: list[Projection] = []
        self.reactions: list[Reaction] = []

    def with_state(self, *aggregates: AggregateDefinition) -> Slice:
        self.aggregates.extend(a for a in aggregates if a not in self.aggregates)
        return self

    def with_projection(self, *projections: Projection) -> Slice:
        self.projections.extend(p for p in projections if p not in self.projections)
        return self

    def react(
        self,
        pattern: str,
        handler: ReactionHandler,
        *,
        to: Resolver | None = None,
        name: str | None = None,
    ) -> Slice:
        """Register *handler* for events matching *pattern*.

        *to* resolves the stream the work is keyed by (defaults to the
        event's own stream); *name* defaults to the handler's ``__name__``.
        """
        self.reactions.append(
            Reaction(
                name=name or getattr(handler, "__name__", pattern),
                pattern=pattern,
                handler=handler,
                resolver=to,
            )
        )
        return self

    def on(
        self,
        pattern: str,
        *,
        to: Resolver | None = None,
        name: str | None = None,
    ) -> Callable[[ReactionHandler], ReactionHandler]:
        """Decorator form of :meth:`react`."""

        def decorator(handler: ReactionHandler) -> ReactionHandler:
            self.react(pattern, handler, to=to, name=name)
            return handler

        return decorator

    def __repr__(self) -> str:
        return f"Slice({self.name!r})"


__all__ = ["Slice"]
