"""Domain – the shop's aggregates, invariants, reactions and read models.

Each feature is a :class:`~es_commerce.application.event_sourcing.Slice`;
:func:`build_shop` wires them into one runtime::

    shop = build_shop()
    await shop.app.do("PlaceOrder", Target("cart-1", actor), {"items": [...]})
    await shop.app.settle()
    shop.orders.get("cart-1").status  # "Published"
"""

from es_commerce.domain import schemas
from es_commerce.domain.invariants import (
    must_be_open,
    must_be_registered,
    must_be_submitted,
    must_not_be_registered,
)
from es_commerce.domain.orders import OrderSummary, OrdersProjection
from es_commerce.domain.price import Price
from es_commerce.domain.cart import CART_PUBLISHER, Cart, cart_slice, publish_cart
from es_commerce.domain.inventory import (
    Inventory,
    InventoryItem,
    InventoryProjection,
    inventory_slice,
)
from es_commerce.domain.tracking import (
    CartActivity,
    CartTracking,
    CartTrackingProjection,
    tracking_slice,
)
from es_commerce.domain.user import (
    User,
    UserProfile,
    UserProjection,
    register_user,
    user_slice,
)
from es_commerce.domain.bootstrap import Shop, build_shop
from es_commerce.domain.seed import CATALOG, CatalogEntry, seed

__all__ = [
    "CART_PUBLISHER",
    "CATALOG",
    "Cart",
    "CartActivity",
    "CartTracking",
    "CartTrackingProjection",
    "CatalogEntry",
    "Inventory",
    "InventoryItem",
    "InventoryProjection",
    "OrderSummary",
    "OrdersProjection",
    "Price",
    "Shop",
    "User",
    "UserProfile",
    "UserProjection",
    "build_shop",
    "cart_slice",
    "inventory_slice",
    "must_be_open",
    "must_be_registered",
    "must_be_submitted",
    "must_not_be_registered",
    "publish_cart",
    "register_user",
    "schemas",
    "seed",
    "tracking_slice",
    "user_slice",
]
