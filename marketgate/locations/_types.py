from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from marketgate._types import LocationId, SellerId
from marketgate._wire import parse_coordinate, parse_datetime, parse_int


class LocationScope(Enum):
    """Whose locations: the signed-in buyer's, or the seller's store."""

    BUYER = "buyer"
    SELLER = "seller"


@dataclass(frozen=True, slots=True)
class Location:
    id: LocationId
    name: str
    address: str
    latitude: float | None = None
    longitude: float | None = None
    is_default: bool = False
    customer_id: int | None = None
    customer_name: str | None = None
    store_id: SellerId | None = None
    store_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Location":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            address=data.get("address") or "",
            latitude=parse_coordinate(data.get("latitude")),
            longitude=parse_coordinate(data.get("longitude")),
            is_default=bool(data.get("is_default", False)),
            customer_id=parse_int(data.get("customer")),
            customer_name=data.get("customer_name"),
            store_id=parse_int(data.get("store")),
            store_name=data.get("store_name"),
            created_at=parse_datetime(data.get("created_at")),
            updated_at=parse_datetime(data.get("updated_at")),
        )


__all__ = ("LocationScope", "Location")
