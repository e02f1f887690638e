"""Wire every shop slice into one :class:`App`."""
from __future__ import annotations

import dataclasses

from es_commerce.application.event_sourcing import App
from es_commerce.config.settings import EngineSettings
from es_commerce.domain.cart import cart_slice
from es_commerce.domain.inventory import InventoryProjection, inventory_slice
from es_commerce.domain.orders import OrdersProjection
from es_commerce.domain.tracking import CartTrackingProjection, tracking_slice
from es_commerce.domain.user import UserProjection, user_slice
from es_commerce.kernel.time import Clock


@dataclasses.dataclass
class Shop:
    """The runtime plus its read models."""

    app: App
    orders: OrdersProjection
    inventory: InventoryProjection
    users: UserProjection
    activity: CartTrackingProjection

    def clear(self) -> None:
        """Empty every read model (the log and watermarks are untouched)."""
        for projection in (self.orders, self.inventory, self.users, self.activity):
            projection.clear()


def build_shop(
    *,
    settings: EngineSettings | None = None,
    clock: Clock | None = None,
    auto_settle: bool = False,
) -> Shop:
    """Wire the shop's slices into one App.

    Without *settings* the bounds come from ``ESHOP_*`` environment variables.
    """
    settings = settings or EngineSettings.from_env()
    orders = OrdersProjection()
    inventory = InventoryProjection()
    users = UserProjection()
    activity = CartTrackingProjection()
    app = App(
        [
            cart_slice(orders),
            inventory_slice(inventory),
            tracking_slice(activity),
            user_slice(users),
        ],
        settings=settings,
        clock=clock,
        auto_settle=auto_settle,
    )
    return Shop(app=app, orders=orders, inventory=inventory, users=users, activity=activity)


__all__ = ["Shop", "build_shop"]
