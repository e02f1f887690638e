"""Cart aggregate: an order goes Open → Submitted → Published.

``PlaceOrder`` is what shoppers send.  ``PublishCart`` is only ever issued
by the ``publish_cart`` reaction once ``CartSubmitted`` is committed.
"""
from __future__ import annotations

import math
from decimal import Decimal
from typing import Any

from es_commerce.application.event_sourcing import (
    AggregateDefinition,
    CommandContext,
    Dispatcher,
    Event,
    Slice,
    Target,
)
from es_commerce.domain import schemas
from es_commerce.domain.invariants import must_be_open, must_be_submitted
from es_commerce.domain.orders import OrdersProjection
from es_commerce.kernel.errors import InvariantViolationError, ValidationError
from es_commerce.kernel.security import Actor
from es_commerce.observability.logging import get_logger

logger = get_logger(__name__)

CART_PUBLISHER = Actor(id="system", name="CartPublisher")


def _place_order(data: dict[str, Any], ctx: CommandContext) -> tuple[str, dict[str, Any]]:  # noqa: ARG001
    order = schemas.PlaceOrder.model_validate(data)
    # prices are snapshotted into the event
    total = float(sum((item.amount for item in order.items), Decimal("0")))
    if not math.isfinite(total):
        raise ValidationError(
            "Order total is too large", detail={"itemCount": len(order.items)}
        )
    return "CartSubmitted", {"orderedProducts": data["items"], "totalPrice": total}


Cart = (
    AggregateDefinition("Cart", lambda: {"status": "Open", "totalPrice": 0})
    .emits(CartSubmitted=schemas.CartSubmitted, CartPublished=schemas.CartPublished)
    .patch(
        CartSubmitted=lambda event, state: {
            "status": "Submitted",
            "totalPrice": event.data["totalPrice"],
        },
        CartPublished=lambda event, state: {
            "status": "Published",
            "totalPrice": event.data["totalPrice"],
        },
    )
    .on("PlaceOrder", schemas.PlaceOrder, given=[must_be_open], emit=_place_order)
    .on("PublishCart", schemas.PublishCart, given=[must_be_submitted], emit="CartPublished")
)


async def publish_cart(event: Event, stream: str, app: Dispatcher) -> None:
    try:
        await app.do(
            "PublishCart",
            Target(stream=stream, actor=CART_PUBLISHER),
            {
                "orderedProducts": event.data["orderedProducts"],
                "totalPrice": event.data["totalPrice"],
            },
        )
    except InvariantViolationError:
        # redelivery after the cart was already published
        logger.info("cart.already_published", stream=stream, event_id=event.id)


def cart_slice(orders: OrdersProjection) -> Slice:
    return (
        Slice("cart")
        .with_state(Cart)
        .with_projection(orders)
        .react("CartSubmitted", publish_cart, to=lambda event: event.stream)
    )


__all__ = ["CART_PUBLISHER", "Cart", "cart_slice", "publish_cart"]
