"""
Catalog records as the backend sends them.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from marketgate._types import NoContent, ProductId, SellerId
from marketgate._wire import parse_datetime, parse_decimal, parse_int, pick


@dataclass(frozen=True, slots=True)
class Store:
    id: SellerId
    name: str
    image: str | None = None
    is_active: bool = True
    created_at: datetime | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Store":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            image=data.get("image"),
            is_active=bool(data.get("is_active", True)),
            created_at=parse_datetime(data.get("created_at")),
        )


@dataclass(frozen=True, slots=True)
class Category:
    id: int
    name: str
    store_id: SellerId | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Category":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            store_id=parse_int(data.get("store")),
        )


@dataclass(frozen=True, slots=True)
class Product:
    """
    A product listing.

    price is a Decimal parsed from the backend's decimal string;
    quantity is the seller's stock, not a cart quantity.
    """

    id: ProductId
    seller_id: SellerId
    name: str
    price: Decimal
    unit: str = "dona"
    store_name: str = ""
    category_id: int | None = None
    category_name: str | None = None
    description: str | None = None
    quantity: int = 0
    image: str | None = None
    is_available: bool = True
    created_at: datetime | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Product":
        return cls(
            id=data["id"],
            seller_id=data["store"],
            name=data.get("name") or "",
            price=parse_decimal(data.get("price")),
            unit=data.get("unit") or "dona",
            store_name=pick(data, "store_name", default=""),
            category_id=parse_int(data.get("category")),
            category_name=data.get("category_name"),
            description=data.get("description"),
            quantity=parse_int(data.get("quantity"), 0) or 0,
            image=data.get("image"),
            is_available=bool(data.get("is_available", True)),
            created_at=parse_datetime(data.get("created_at")),
        )


@dataclass(frozen=True, slots=True)
class Page[T]:
    """
    One page of a list endpoint.

    Bare arrays (some endpoints skip pagination) load as a single page.
    """

    results: tuple[T, ...]
    count: int = 0
    next: str | None = None
    previous: str | None = None

    @property
    def has_next(self) -> bool:
        return self.next is not None

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self):
        return iter(self.results)

    @classmethod
    def empty(cls) -> "Page[T]":
        return cls(results=())

    @classmethod
    def from_json(cls, data: Any, item: Callable[[Mapping[str, Any]], T]) -> "Page[T]":
        if isinstance(data, NoContent) or data is None:
            return cls.empty()
        if isinstance(data, Sequence) and not isinstance(data, str):
            results = tuple(item(entry) for entry in data)
            return cls(results=results, count=len(results))
        if isinstance(data, Mapping):
            results = tuple(item(entry) for entry in data.get("results") or ())
            return cls(
                results=results,
                count=parse_int(data.get("count"), len(results)) or 0,
                next=data.get("next"),
                previous=data.get("previous"),
            )
        raise TypeError(f"Expected a list or a page envelope, got {type(data).__name__}")


__all__ = ("Store", "Category", "Product", "Page")
