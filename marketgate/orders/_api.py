"""
OrdersApi — the buyer's order history.
"""

from __future__ import annotations

from kungfu import Result

from marketgate.catalog import Page
from marketgate.config import Endpoints
from marketgate.errors import ApiError
from marketgate.gateway import RequestGateway, expect
from marketgate.orders._types import Order


class OrdersApi:
    def __init__(self, gateway: RequestGateway, endpoints: Endpoints | None = None) -> None:
        self._gateway = gateway
        self._endpoints = endpoints or Endpoints()

    async def my_orders(self, page: int = 1) -> Result[Page[Order], ApiError]:
        result = await self._gateway.call(
            self._endpoints.my_orders, params={"page": page}, requires_auth=True
        )
        return expect(result, lambda body: Page.from_json(body, Order.from_json))


__all__ = ("OrdersApi",)
