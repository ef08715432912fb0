"""
LocationsApi — CRUD over one scope's locations. All calls are authenticated.
"""

from __future__ import annotations

from typing import Any

from kungfu import Result

from marketgate._types import LocationId
from marketgate._wire import format_coordinate
from marketgate.catalog import Page
from marketgate.config import Endpoints
from marketgate.errors import ApiError
from marketgate.gateway import RequestGateway, expect, expect_empty
from marketgate.locations._types import Location, LocationScope


def location_payload(
    *,
    name: str | None = None,
    address: str | None = None,
    latitude: float | str | None = None,
    longitude: float | str | None = None,
    is_default: bool | None = None,
) -> dict[str, Any]:
    """Only the given fields; coordinates as 6-decimal strings."""
    payload: dict[str, Any] = {}
    if name is not None:
        payload["name"] = name
    if address is not None:
        payload["address"] = address
    if latitude is not None:
        payload["latitude"] = format_coordinate(latitude)
    if longitude is not None:
        payload["longitude"] = format_coordinate(longitude)
    if is_default is not None:
        payload["is_default"] = is_default
    return payload


class LocationsApi:
    def __init__(
        self,
        gateway: RequestGateway,
        scope: LocationScope = LocationScope.BUYER,
        endpoints: Endpoints | None = None,
    ) -> None:
        self._gateway = gateway
        self._scope = scope
        endpoints = endpoints or Endpoints()
        match scope:
            case LocationScope.BUYER:
                self._base = endpoints.locations
            case LocationScope.SELLER:
                self._base = f"{endpoints.seller.rstrip('/')}/locations/"

    @property
    def scope(self) -> LocationScope:
        return self._scope

    def _item(self, location_id: LocationId) -> str:
        return f"{self._base.rstrip('/')}/{location_id}/"

    async def list(self) -> Result[tuple[Location, ...], ApiError]:
        """Accepts both a bare array and a paginated envelope."""
        result = await self._gateway.call(self._base, requires_auth=True)
        return expect(result, lambda body: Page.from_json(body, Location.from_json).results)

    async def create(
        self,
        name: str,
        address: str,
        *,
        latitude: float | str | None = None,
        longitude: float | str | None = None,
        is_default: bool | None = None,
    ) -> Result[Location, ApiError]:
        payload = location_payload(
            name=name,
            address=address,
            latitude=latitude,
            longitude=longitude,
            is_default=is_default,
        )
        result = await self._gateway.call(self._base, "POST", payload, requires_auth=True)
        return expect(result, Location.from_json)

    async def update(
        self,
        location_id: LocationId,
        *,
        name: str | None = None,
        address: str | None = None,
        latitude: float | str | None = None,
        longitude: float | str | None = None,
        is_default: bool | None = None,
    ) -> Result[Location, ApiError]:
        payload = location_payload(
            name=name,
            address=address,
            latitude=latitude,
            longitude=longitude,
            is_default=is_default,
        )
        result = await self._gateway.call(
            self._item(location_id), "PATCH", payload, requires_auth=True
        )
        return expect(result, Location.from_json)

    async def delete(self, location_id: LocationId) -> Result[None, ApiError]:
        result = await self._gateway.call(self._item(location_id), "DELETE", requires_auth=True)
        return expect_empty(result)


__all__ = ("LocationsApi", "location_payload")
