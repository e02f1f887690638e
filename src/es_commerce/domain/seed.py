"""Demo catalog and admin account for a fresh shop."""
from __future__ import annotations

import dataclasses

from es_commerce.application.event_sourcing import Target
from es_commerce.domain.bootstrap import Shop
from es_commerce.kernel.security import SYSTEM_ACTOR, Actor
from es_commerce.observability.logging import get_logger

logger = get_logger(__name__)

SEED_ACTOR = dataclasses.replace(SYSTEM_ACTOR, name="Seed Script")


@dataclasses.dataclass(frozen=True)
class CatalogEntry:
    product_id: str
    name: str
    price: float
    quantity: int


CATALOG: tuple[CatalogEntry, ...] = (
    # Espresso
    CatalogEntry("prod-espresso", "Espresso Machine", 299.99, 12),
    CatalogEntry("prod-espresso-compact", "Compact Espresso Maker", 149.99, 18),
    CatalogEntry("prod-portafilter", "Bottomless Portafilter", 45.0, 30),
    CatalogEntry("prod-tamper", "Calibrated Tamper", 39.95, 35),
    # Brewing
    CatalogEntry("prod-v60", "V60 Dripper", 28.0, 50),
    CatalogEntry("prod-chemex", "Chemex Classic", 47.5, 20),
    CatalogEntry("prod-aeropress", "AeroPress Original", 34.95, 45),
    CatalogEntry("prod-french-press", "French Press", 32.0, 30),
    CatalogEntry("prod-siphon", "Siphon Brewer", 89.0, 8),
    # Grinders
    CatalogEntry("prod-grinder", "Burr Grinder", 89.5, 25),
    CatalogEntry("prod-hand-grinder", "Hand Grinder", 64.0, 30),
    # Kettles
    CatalogEntry("prod-kettle", "Gooseneck Kettle", 54.0, 40),
    # Accessories
    CatalogEntry("prod-scale", "Precision Scale", 34.95, 60),
    CatalogEntry("prod-filters", "Paper Filters (100pk)", 12.0, 200),
    # Beans
    CatalogEntry("prod-beans-ethiopia", "Ethiopian Yirgacheffe", 19.99, 80),
    CatalogEntry("prod-beans-colombia", "Colombian Supremo", 17.5, 90),
    CatalogEntry("prod-beans-espresso-blend", "Espresso Blend", 18.0, 75),
    # Cups & Mugs
    CatalogEntry("prod-latte-mug", "Latte Mug", 16.0, 40),
    CatalogEntry("prod-travel-mug", "Insulated Travel Mug", 28.5, 35),
)


async def seed(
    shop: Shop,
    *,
    catalog: tuple[CatalogEntry, ...] = CATALOG,
    admin_password_hash: str | None = None,
    actor: Actor = SEED_ACTOR,
) -> int:
    """Import *catalog*, register an ``admin`` account and settle the read models.

    Returns the number of products imported.
    """
    app = shop.app
    for entry in catalog:
        await app.do(
            "ImportInventory",
            Target(stream=entry.product_id, actor=actor),
            {
                "productId": entry.product_id,
                "name": entry.name,
                "price": entry.price,
                "quantity": entry.quantity,
            },
        )

    admin = Target(stream="admin", actor=actor)
    await app.do(
        "RegisterUser",
        admin,
        {
            "email": "admin",
            "name": "Admin",
            "provider": "local",
            "providerId": "admin",
            "passwordHash": admin_password_hash,
        },
    )
    await app.do("AssignRole", admin, {"role": "admin"})

    await app.settle()
    logger.info("shop.seeded", products=len(catalog))
    return len(catalog)


__all__ = ["CATALOG", "CatalogEntry", "SEED_ACTOR", "seed"]
