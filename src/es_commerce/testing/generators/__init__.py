"""Testing generators – Hypothesis strategies for shop payloads."""
from es_commerce.testing.generators.strategies import (
    cart_item_strategy,
    inventory_history_strategy,
    place_order_strategy,
    product_id_strategy,
)

__all__ = [
    "cart_item_strategy",
    "inventory_history_strategy",
    "place_order_strategy",
    "product_id_strategy",
]
