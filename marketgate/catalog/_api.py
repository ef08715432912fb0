"""
CatalogApi — public, unauthenticated browsing.
"""

from __future__ import annotations

from kungfu import Ok, Result

from marketgate._types import SellerId
from marketgate.catalog._types import Category, Page, Product, Store
from marketgate.config import Endpoints
from marketgate.errors import ApiError
from marketgate.gateway import RequestGateway, expect


class CatalogApi:
    """
    Example:
        catalog = CatalogApi(gateway)
        match await catalog.store_products(7, category_id=3):
            case Ok(page):
                for product in page:
                    ...
    """

    def __init__(self, gateway: RequestGateway, endpoints: Endpoints | None = None) -> None:
        self._gateway = gateway
        self._endpoints = endpoints or Endpoints()

    def _store_path(self, store_id: SellerId, leaf: str) -> str:
        return f"{self._endpoints.stores.rstrip('/')}/{store_id}/{leaf}/"

    async def stores(self, page: int = 1) -> Result[Page[Store], ApiError]:
        result = await self._gateway.call(self._endpoints.stores, params={"page": page})
        return expect(result, lambda body: Page.from_json(body, Store.from_json))

    async def store_categories(self, store_id: SellerId) -> Result[Page[Category], ApiError]:
        result = await self._gateway.call(self._store_path(store_id, "categories"))
        return expect(result, lambda body: Page.from_json(body, Category.from_json))

    async def store_products(
        self,
        store_id: SellerId,
        category_id: int | None = None,
        page: int = 1,
    ) -> Result[Page[Product], ApiError]:
        result = await self._gateway.call(
            self._store_path(store_id, "products"),
            params={"page": page, "category": category_id or None},
        )
        return expect(result, lambda body: Page.from_json(body, Product.from_json))

    async def search(self, query: str, page: int = 1) -> Result[Page[Product], ApiError]:
        """Blank queries short-circuit to an empty page."""
        query = query.strip()
        if not query:
            return Ok(Page.empty())
        result = await self._gateway.call(self._endpoints.search, params={"q": query, "page": page})
        return expect(result, lambda body: Page.from_json(body, Product.from_json))


__all__ = ("CatalogApi",)
