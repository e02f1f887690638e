"""Unit tests for the Hypothesis strategies."""

from __future__ import annotations

from hypothesis import given, settings

from es_commerce.domain.schemas import CartItem, PlaceOrder
from es_commerce.testing.generators import (
    cart_item_strategy,
    inventory_history_strategy,
    place_order_strategy,
)


class TestStrategies:
    @given(cart_item_strategy())
    @settings(max_examples=30)
    def test_cart_items_validate(self, item: dict) -> None:
        assert CartItem.model_validate(item).amount >= 0

    @given(place_order_strategy(max_items=3))
    @settings(max_examples=30)
    def test_orders_are_non_empty(self, payload: dict) -> None:
        assert 1 <= len(PlaceOrder.model_validate(payload).items) <= 3

    @given(inventory_history_strategy("prod-x"))
    @settings(max_examples=30)
    def test_history_starts_with_import(self, history: list) -> None:
        assert history[0][0] == "ImportInventory"
        assert all(payload["productId"] == "prod-x" for _, payload in history)
