"""Testing generators – Hypothesis property-based testing strategies.

Requires the ``hypothesis`` package (``pip install "es-commerce[test]"``).
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any

import hypothesis.strategies as st
from hypothesis.strategies import SearchStrategy

_PRODUCTS: tuple[str, ...] = ("prod-a", "prod-b", "prod-c", "prod-d")


def product_id_strategy(products: tuple[str, ...] = _PRODUCTS) -> SearchStrategy[str]:
    return st.sampled_from(products)


def cart_item_strategy(products: tuple[str, ...] = _PRODUCTS) -> SearchStrategy[dict[str, Any]]:
    """Wire-shaped cart line: decimal-string price with two places.

    Example::

        @given(cart_item_strategy())
        def test_item_validates(item):
            CartItem.model_validate(item)
    """
    price = st.decimals(
        min_value=Decimal("0"),
        max_value=Decimal("999.99"),
        places=2,
        allow_nan=False,
        allow_infinity=False,
    ).map(str)
    return st.builds(
        lambda item_id, product_id, amount: {
            "itemId": item_id,
            "name": product_id.title(),
            "description": "",
            "price": amount,
            "productId": product_id,
        },
        st.uuids().map(lambda u: u.hex),
        st.sampled_from(products),
        price,
    )


def place_order_strategy(max_items: int = 8) -> SearchStrategy[dict[str, Any]]:
    return st.lists(cart_item_strategy(), min_size=1, max_size=max_items).map(
        lambda items: {"items": items}
    )


def inventory_history_strategy(
    product_id: str = "prod-a",
    max_size: int = 20,
) -> SearchStrategy[list[tuple[str, dict[str, Any]]]]:
    """Sequences of inventory commands for one product stream.

    The first command always imports the product.
    """
    quantity = st.integers(min_value=0, max_value=500)
    price = st.floats(min_value=0, max_value=1000, allow_nan=False, allow_infinity=False)
    imported = st.builds(
        lambda q, p: ("ImportInventory", {"productId": product_id, "name": "A", "price": p, "quantity": q}),
        quantity,
        price,
    )
    adjusted = st.builds(
        lambda q, p: ("AdjustInventory", {"productId": product_id, "quantity": q, "price": p}),
        quantity,
        price,
    )
    decommissioned = st.just(("DecommissionInventory", {"productId": product_id}))
    return st.tuples(imported, st.lists(st.one_of(imported, adjusted, decommissioned), max_size=max_size)).map(
        lambda pair: [pair[0], *pair[1]]
    )


__all__ = [
    "cart_item_strategy",
    "inventory_history_strategy",
    "place_order_strategy",
    "product_id_strategy",
]
