"""Price aggregate: the list price of one product."""
from __future__ import annotations

from es_commerce.application.event_sourcing import AggregateDefinition
from es_commerce.domain import schemas

Price = (
    AggregateDefinition("Price", lambda: {"price": 0, "productId": ""})
    .emits(PriceChanged=schemas.PriceChanged)
    .on("ChangePrice", schemas.ChangePrice, emit="PriceChanged")
)

__all__ = ["Price"]
