"""Orders read model, keyed by cart stream."""
from __future__ import annotations

import dataclasses

from es_commerce.application.event_sourcing import Event, Projection
from es_commerce.domain.schemas import CartItem, CartSubmitted
from es_commerce.kernel.time import to_iso


@dataclasses.dataclass
class OrderSummary:
    id: str
    status: str
    items: list[CartItem]
    total_price: float
    actor_id: str
    submitted_at: str | None = None
    published_at: str | None = None


class OrdersProjection(Projection):
    def __init__(self) -> None:
        super().__init__("orders")
        self._orders: dict[str, OrderSummary] = {}
        self.on("CartSubmitted")(self._submitted)
        self.on("CartPublished")(self._published)

    def _submitted(self, event: Event) -> None:
        data = CartSubmitted.model_validate(event.data)
        actor = event.actor
        self._orders[event.stream] = OrderSummary(
            id=event.stream,
            status="Submitted",
            items=list(data.ordered_products),
            total_price=data.total_price,
            actor_id=actor.id if actor is not None else "anonymous",
            submitted_at=to_iso(event.created),
        )

    def _published(self, event: Event) -> None:
        existing = self._orders.get(event.stream)
        if existing is not None:
            existing.status = "Published"
            existing.published_at = to_iso(event.created)

    def orders(self) -> list[OrderSummary]:
        return [dataclasses.replace(o, items=list(o.items)) for o in self._orders.values()]

    def orders_by_actor(self, actor_id: str) -> list[OrderSummary]:
        return [o for o in self.orders() if o.actor_id == actor_id]

    def get(self, order_id: str) -> OrderSummary | None:
        order = self._orders.get(order_id)
        return dataclasses.replace(order, items=list(order.items)) if order is not None else None

    def clear(self) -> None:
        self._orders.clear()


__all__ = ["OrderSummary", "OrdersProjection"]
