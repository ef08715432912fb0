"""
Order records and the submission context.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from marketgate._types import LocationId, OrderId, ProductId, SellerId
from marketgate._wire import parse_coordinate, parse_datetime, parse_decimal, parse_int


class OrderStatus(Enum):
    """Order lifecycle. Values the client does not know map to UNKNOWN."""

    NEW = "new"
    PROCESSING = "processing"
    DONE = "done"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> "OrderStatus":
        return cls.UNKNOWN

    @property
    def is_final(self) -> bool:
        return self in (OrderStatus.DONE, OrderStatus.CANCELLED)


@dataclass(frozen=True, slots=True)
class OrderLine:
    product_id: ProductId
    quantity: int
    price_at_order: Decimal
    product_name: str = ""
    product_unit: str = ""
    id: int | None = None

    @property
    def subtotal(self) -> Decimal:
        return self.price_at_order * self.quantity

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "OrderLine":
        return cls(
            id=parse_int(data.get("id")),
            product_id=data["product"],
            quantity=int(data["quantity"]),
            price_at_order=parse_decimal(data.get("price_at_order")),
            product_name=data.get("product_name") or "",
            product_unit=data.get("product_unit") or "",
        )


@dataclass(frozen=True, slots=True)
class DeliveryLocation:
    name: str
    address: str
    latitude: float | None = None
    longitude: float | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "DeliveryLocation":
        return cls(
            name=data.get("name") or "",
            address=data.get("address") or "",
            latitude=parse_coordinate(data.get("latitude")),
            longitude=parse_coordinate(data.get("longitude")),
        )


@dataclass(frozen=True, slots=True)
class Order:
    """Server-side order. Never mutated locally; re-fetch for status."""

    id: OrderId
    seller_id: SellerId
    status: OrderStatus
    items: tuple[OrderLine, ...]
    created_at: datetime | None = None
    updated_at: datetime | None = None
    seller_name: str = ""
    customer_id: int | None = None
    customer_name: str = ""
    customer_phone: str | None = None
    location: DeliveryLocation | None = None

    @property
    def total(self) -> Decimal:
        return sum((line.subtotal for line in self.items), Decimal("0"))

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Order":
        location = data.get("location")
        return cls(
            id=data["id"],
            seller_id=data["store"],
            status=OrderStatus(data.get("status") or "new"),
            items=tuple(OrderLine.from_json(line) for line in data.get("items") or ()),
            created_at=parse_datetime(data.get("created_at")),
            updated_at=parse_datetime(data.get("updated_at")),
            seller_name=data.get("store_name") or "",
            customer_id=parse_int(data.get("customer")),
            customer_name=data.get("customer_name") or "",
            customer_phone=data.get("customer_phone"),
            location=DeliveryLocation.from_json(location) if isinstance(location, Mapping) else None,
        )


@dataclass(frozen=True, slots=True)
class SellerContext:
    """Checkout context: the seller being ordered from, optional delivery location."""

    seller_id: SellerId
    location_id: LocationId | None = None


__all__ = ("OrderStatus", "OrderLine", "DeliveryLocation", "Order", "SellerContext")
