"""Domain schemas – pydantic models for every command, event and shared type.

Field names are snake_case in Python and camelCase on the wire (the alias);
both spellings are accepted on input.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, allow_inf_nan=False
    )


# === Shared ===


class CartItem(Schema):
    item_id: str
    name: str
    description: str
    price: str
    """Decimal string as shown in the shop (``"9.99"``); empty counts as zero."""
    product_id: str

    @field_validator("price")
    @classmethod
    def _price_is_decimal(cls, value: str) -> str:
        if value:
            try:
                amount = Decimal(value)
            except InvalidOperation as exc:
                raise ValueError(f"price {value!r} is not a decimal number") from exc
            # totals are published as JSON floats
            if not amount.is_finite() or not math.isfinite(float(amount)):
                raise ValueError(f"price {value!r} is not a finite number")
        return value

    @property
    def amount(self) -> Decimal:
        return Decimal(self.price or "0")


# === Cart ===


class PlaceOrder(Schema):
    items: list[CartItem] = Field(min_length=1)


class PublishCart(Schema):
    ordered_products: list[CartItem]
    total_price: float


class CartSubmitted(Schema):
    ordered_products: list[CartItem]
    total_price: float


class CartPublished(Schema):
    ordered_products: list[CartItem]
    total_price: float


# === Price ===


class ChangePrice(Schema):
    price: float
    product_id: str


class PriceChanged(Schema):
    price: float
    product_id: str


# === Inventory ===


class ImportInventory(Schema):
    product_id: str
    name: str
    price: float
    quantity: int


class InventoryImported(Schema):
    product_id: str
    name: str
    price: float
    quantity: int


class AdjustInventory(Schema):
    product_id: str
    quantity: int
    price: float


class InventoryAdjusted(Schema):
    product_id: str
    quantity: int
    price: float


class DecommissionInventory(Schema):
    product_id: str


class InventoryDecommissioned(Schema):
    product_id: str


# === Cart tracking ===

CartAction = Literal["add", "remove", "clear"]


class TrackCartActivity(Schema):
    action: CartAction
    product_id: str
    quantity: int


class CartActivityTracked(Schema):
    action: CartAction
    product_id: str
    quantity: int


# === User ===

Role = Literal["admin", "user"]
Provider = Literal["local", "google"]


class RegisterUser(Schema):
    email: str
    name: str
    picture: str | None = None
    provider: Provider
    provider_id: str
    password_hash: str | None = None


class UserRegistered(Schema):
    email: str
    name: str
    picture: str | None = None
    provider: Provider
    provider_id: str
    password_hash: str | None = None


class AssignRole(Schema):
    role: Role


class RoleAssigned(Schema):
    role: Role


__all__ = [
    "AdjustInventory",
    "AssignRole",
    "CartAction",
    "CartActivityTracked",
    "CartItem",
    "CartPublished",
    "CartSubmitted",
    "ChangePrice",
    "DecommissionInventory",
    "ImportInventory",
    "InventoryAdjusted",
    "InventoryDecommissioned",
    "InventoryImported",
    "PlaceOrder",
    "PriceChanged",
    "Provider",
    "PublishCart",
    "RegisterUser",
    "Role",
    "RoleAssigned",
    "Schema",
    "TrackCartActivity",
    "UserRegistered",
]
