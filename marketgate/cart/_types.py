"""
Cart types — lines and add outcomes.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from marketgate._types import ProductId, SellerId
from marketgate._wire import parse_decimal

if TYPE_CHECKING:
    from marketgate.catalog import Product


@dataclass(frozen=True, slots=True)
class CartItem:
    """
    One cart line.

    unit_price_snapshot is the price seen when the line was added. It is
    for display only and never sent with an order.
    """

    product_id: ProductId
    seller_id: SellerId
    unit_price_snapshot: Decimal
    quantity: int = 1
    name: str = ""
    unit: str = ""

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price_snapshot * self.quantity

    @classmethod
    def from_product(cls, product: "Product", quantity: int = 1) -> "CartItem":
        return cls(
            product_id=product.id,
            seller_id=product.seller_id,
            unit_price_snapshot=product.price,
            quantity=quantity,
            name=product.name,
            unit=product.unit,
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "seller_id": self.seller_id,
            "unit_price_snapshot": str(self.unit_price_snapshot),
            "quantity": self.quantity,
            "name": self.name,
            "unit": self.unit,
        }

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "CartItem":
        quantity = int(data["quantity"])
        if quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {quantity}")
        return cls(
            product_id=int(data["product_id"]),
            seller_id=int(data["seller_id"]),
            unit_price_snapshot=parse_decimal(data.get("unit_price_snapshot")),
            quantity=quantity,
            name=data.get("name") or "",
            unit=data.get("unit") or "",
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Add Outcome
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Added:
    """Line as it stands after the add (merged or appended)."""

    item: CartItem


@dataclass(frozen=True, slots=True)
class Conflict:
    """Cart holds another seller's items; nothing changed."""

    current_seller: SellerId
    requested_seller: SellerId


type AddOutcome = Added | Conflict


__all__ = ("CartItem", "Added", "Conflict", "AddOutcome")
