"""
SellerApi — store management for signed-in sellers.

The backend assigns the store from the seller's profile, so no call here
takes a store id.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from kungfu import Result

from marketgate._types import OrderId, ProductId
from marketgate.catalog import Category, Page, Product
from marketgate.config import Endpoints
from marketgate.errors import ApiError
from marketgate.gateway import RequestGateway, expect, expect_empty
from marketgate.orders import Order, OrderStatus
from marketgate.seller._types import SellerProfile


def product_payload(**fields: Any) -> dict[str, Any]:
    """Drop unset fields; prices travel as decimal strings."""
    payload: dict[str, Any] = {}
    for name, value in fields.items():
        if value is None:
            continue
        if name == "category_id":
            name = "category"
        if isinstance(value, Decimal | float):
            value = str(value)
        payload[name] = value
    return payload


class SellerApi:
    """
    Example:
        seller = SellerApi(gateway)
        match await seller.update_order_status(42, OrderStatus.PROCESSING):
            case Ok(order):
                ...
    """

    def __init__(self, gateway: RequestGateway, endpoints: Endpoints | None = None) -> None:
        self._gateway = gateway
        self._base = (endpoints or Endpoints()).seller.rstrip("/")

    def _path(self, *parts: object) -> str:
        return "/".join((self._base, *(str(p) for p in parts))) + "/"

    # ───────────────────────────────────────────────────────────────────────────
    # Profile
    # ───────────────────────────────────────────────────────────────────────────

    async def profile(self) -> Result[SellerProfile, ApiError]:
        result = await self._gateway.call(self._path("profile"), requires_auth=True)
        return expect(result, SellerProfile.from_json)

    # ───────────────────────────────────────────────────────────────────────────
    # Orders
    # ───────────────────────────────────────────────────────────────────────────

    async def orders(self, page: int = 1) -> Result[Page[Order], ApiError]:
        result = await self._gateway.call(
            self._path("orders"), params={"page": page}, requires_auth=True
        )
        return expect(result, lambda body: Page.from_json(body, Order.from_json))

    async def update_order_status(
        self, order_id: OrderId, status: OrderStatus
    ) -> Result[Order, ApiError]:
        result = await self._gateway.call(
            self._path("orders", order_id), "PATCH", {"status": status.value}, requires_auth=True
        )
        return expect(result, Order.from_json)

    # ───────────────────────────────────────────────────────────────────────────
    # Categories
    # ───────────────────────────────────────────────────────────────────────────

    async def categories(self) -> Result[Page[Category], ApiError]:
        result = await self._gateway.call(self._path("categories"), requires_auth=True)
        return expect(result, lambda body: Page.from_json(body, Category.from_json))

    async def create_category(self, name: str) -> Result[Category, ApiError]:
        result = await self._gateway.call(
            self._path("categories"), "POST", {"name": name}, requires_auth=True
        )
        return expect(result, Category.from_json)

    # ───────────────────────────────────────────────────────────────────────────
    # Products
    # ───────────────────────────────────────────────────────────────────────────

    async def products(self, page: int = 1) -> Result[Page[Product], ApiError]:
        result = await self._gateway.call(
            self._path("products"), params={"page": page}, requires_auth=True
        )
        return expect(result, lambda body: Page.from_json(body, Product.from_json))

    async def create_product(
        self,
        *,
        category_id: int,
        name: str,
        price: Decimal | str,
        unit: str,
        quantity: int,
        description: str | None = None,
        is_available: bool | None = None,
    ) -> Result[Product, ApiError]:
        payload = product_payload(
            category_id=category_id,
            name=name,
            description=description,
            price=price,
            unit=unit,
            quantity=quantity,
            is_available=is_available,
        )
        result = await self._gateway.call(self._path("products"), "POST", payload, requires_auth=True)
        return expect(result, Product.from_json)

    async def update_product(
        self,
        product_id: ProductId,
        *,
        category_id: int | None = None,
        name: str | None = None,
        price: Decimal | str | None = None,
        unit: str | None = None,
        quantity: int | None = None,
        description: str | None = None,
        is_available: bool | None = None,
    ) -> Result[Product, ApiError]:
        payload = product_payload(
            category_id=category_id,
            name=name,
            description=description,
            price=price,
            unit=unit,
            quantity=quantity,
            is_available=is_available,
        )
        result = await self._gateway.call(
            self._path("products", product_id), "PATCH", payload, requires_auth=True
        )
        return expect(result, Product.from_json)

    async def delete_product(self, product_id: ProductId) -> Result[None, ApiError]:
        """Soft delete: the backend marks the product unavailable."""
        result = await self._gateway.call(
            self._path("products", product_id), "DELETE", requires_auth=True
        )
        return expect_empty(result)


__all__ = ("SellerApi", "product_payload")
