"""Inventory: per-product aggregate (write side) and stock projection (read side)."""
from __future__ import annotations

import dataclasses
from collections import Counter

from es_commerce.application.event_sourcing import AggregateDefinition, Event, Projection, Slice
from es_commerce.domain import schemas
from es_commerce.domain.cart import Cart
from es_commerce.domain.price import Price

Inventory = (
    AggregateDefinition(
        "Inventory", lambda: {"name": "", "price": 0, "quantity": 0, "productId": ""}
    )
    .emits(
        InventoryImported=schemas.InventoryImported,
        InventoryAdjusted=schemas.InventoryAdjusted,
        InventoryDecommissioned=schemas.InventoryDecommissioned,
    )
    .patch(InventoryDecommissioned=lambda event, state: {"quantity": 0})
    .on("ImportInventory", schemas.ImportInventory, emit="InventoryImported")
    .on("AdjustInventory", schemas.AdjustInventory, emit="InventoryAdjusted")
    .on("DecommissionInventory", schemas.DecommissionInventory, emit="InventoryDecommissioned")
)


@dataclasses.dataclass
class InventoryItem:
    name: str
    price: float
    quantity: int


class InventoryProjection(Projection):
    """``productId → {name, price, quantity}``; decommissioned products disappear."""

    def __init__(self) -> None:
        super().__init__("inventory")
        self._items: dict[str, InventoryItem] = {}
        self.on("InventoryImported")(self._imported)
        self.on("InventoryAdjusted")(self._adjusted)
        self.on("InventoryDecommissioned")(self._decommissioned)
        self.on("CartPublished")(self._fulfilled)

    def _imported(self, event: Event) -> None:
        data = schemas.InventoryImported.model_validate(event.data)
        self._items[data.product_id] = InventoryItem(
            name=data.name, price=data.price, quantity=data.quantity
        )

    def _adjusted(self, event: Event) -> None:
        data = schemas.InventoryAdjusted.model_validate(event.data)
        existing = self._items.get(data.product_id)
        if existing is not None:
            existing.quantity = data.quantity
            existing.price = data.price

    def _decommissioned(self, event: Event) -> None:
        data = schemas.InventoryDecommissioned.model_validate(event.data)
        self._items.pop(data.product_id, None)

    def _fulfilled(self, event: Event) -> None:
        data = schemas.CartPublished.model_validate(event.data)
        # one decrement per product, by its combined count in the order
        counts = Counter(item.product_id for item in data.ordered_products)
        for product_id, count in counts.items():
            existing = self._items.get(product_id)
            if existing is not None:
                existing.quantity = max(0, existing.quantity - count)

    def items(self) -> dict[str, InventoryItem]:
        return {pid: dataclasses.replace(item) for pid, item in self._items.items()}

    def get(self, product_id: str) -> InventoryItem | None:
        item = self._items.get(product_id)
        return dataclasses.replace(item) if item is not None else None

    def products(self) -> list[dict[str, object]]:
        """Catalog view: ``{productId, price, inventory}`` per live product."""
        return [
            {"productId": pid, "price": item.price, "inventory": item.quantity}
            for pid, item in self._items.items()
        ]

    def clear(self) -> None:
        self._items.clear()


def inventory_slice(inventory: InventoryProjection) -> Slice:
    return (
        Slice("inventory")
        .with_state(Cart, Inventory, Price)
        .with_projection(inventory)
    )


__all__ = ["Inventory", "InventoryItem", "InventoryProjection", "inventory_slice"]
