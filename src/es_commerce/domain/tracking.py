"""Cart activity tracking: append-only stream per browser session."""
from __future__ import annotations

import dataclasses

from es_commerce.application.event_sourcing import AggregateDefinition, Event, Projection, Slice
from es_commerce.domain import schemas
from es_commerce.kernel.time import to_iso

CartTracking = (
    AggregateDefinition("CartTracking", lambda: {"eventCount": 0})
    .emits(CartActivityTracked=schemas.CartActivityTracked)
    .patch(CartActivityTracked=lambda event, state: {"eventCount": state["eventCount"] + 1})
    .on("TrackCartActivity", schemas.TrackCartActivity, emit="CartActivityTracked")
)


@dataclasses.dataclass(frozen=True)
class CartActivity:
    session_id: str
    action: schemas.CartAction
    product_id: str
    quantity: int
    timestamp: str


class CartTrackingProjection(Projection):
    def __init__(self) -> None:
        super().__init__("cart-tracking")
        self._activities: list[CartActivity] = []
        self.on("CartActivityTracked")(self._tracked)

    def _tracked(self, event: Event) -> None:
        data = schemas.CartActivityTracked.model_validate(event.data)
        self._activities.append(
            CartActivity(
                session_id=event.stream,
                action=data.action,
                product_id=data.product_id,
                quantity=data.quantity,
                timestamp=to_iso(event.created),
            )
        )

    def activities(self) -> list[CartActivity]:
        return list(self._activities)

    def clear(self) -> None:
        self._activities.clear()


def tracking_slice(activity: CartTrackingProjection) -> Slice:
    return Slice("cart-tracking").with_state(CartTracking).with_projection(activity)


__all__ = ["CartActivity", "CartTracking", "CartTrackingProjection", "tracking_slice"]
