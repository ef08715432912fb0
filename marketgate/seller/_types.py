from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from marketgate._wire import parse_datetime, parse_int
from marketgate.catalog import Store


@dataclass(frozen=True, slots=True)
class SellerProfile:
    """Answer of the seller bootstrap check. Non-sellers get is_seller=False only."""

    is_seller: bool
    id: int | None = None
    telegram_id: int | None = None
    name: str = ""
    store: Store | None = None
    is_active: bool = False
    created_at: datetime | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "SellerProfile":
        seller = data.get("seller")
        if not data.get("is_seller") or not isinstance(seller, Mapping):
            return cls(is_seller=False)
        store = seller.get("store")
        return cls(
            is_seller=True,
            id=parse_int(seller.get("id")),
            telegram_id=parse_int(seller.get("telegram_id")),
            name=seller.get("name") or "",
            store=Store.from_json(store) if isinstance(store, Mapping) else None,
            is_active=bool(seller.get("is_active", False)),
            created_at=parse_datetime(seller.get("created_at")),
        )


__all__ = ("SellerProfile",)
