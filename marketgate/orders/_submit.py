"""
OrderSubmission — turn the cart into an order, exactly once.

    submit(cart)
      ├─ empty / mixed sellers / wrong seller  → VALIDATION, no call
      ├─ POST /orders/ (authenticated, Idempotency-Key)
      ├─ 2xx   → ordered quantities taken out of the cart, Order returned
      └─ Error → cart untouched, key kept for the resubmission
"""

from __future__ import annotations

import hashlib
import json
import uuid
from typing import Any

import structlog
from kungfu import Error, Ok, Result

from marketgate._pending import Pending
from marketgate.cart import Cart
from marketgate.config import Endpoints
from marketgate.errors import ApiError, ApiErrors
from marketgate.gateway import RequestGateway, expect
from marketgate.orders._types import Order, SellerContext

logger = structlog.get_logger(__name__)

IDEMPOTENCY_HEADER = "Idempotency-Key"


def order_body(cart: Cart, context: SellerContext | None = None) -> Result[dict[str, Any], ApiError]:
    """Build the request body. Prices never leave the client."""
    if cart.is_empty:
        return Error(ApiErrors.validation("Cart is empty"))

    sellers = {item.seller_id for item in cart}
    if len(sellers) > 1:
        return Error(ApiErrors.validation("Cart mixes items from several sellers"))

    seller_id = cart.seller_id
    if context is not None and context.seller_id != seller_id:
        return Error(ApiErrors.validation("Cart belongs to another seller"))

    body: dict[str, Any] = {
        "store": seller_id,
        "items": [{"product": item.product_id, "quantity": item.quantity} for item in cart],
    }
    if context is not None and context.location_id is not None:
        body["location"] = context.location_id
    return Ok(body)


def fingerprint(body: dict[str, Any]) -> str:
    canonical = json.dumps(body, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()


class OrderSubmission:
    """
    One checkout at a time: a submit() of the same content attaches to the
    submission already in flight and receives its result. Different content
    while a submission is in flight is refused with VALIDATION.

    Example:
        orders = OrderSubmission(gateway)
        match await orders.submit(cart, SellerContext(seller_id=7, location_id=3)):
            case Ok(order):
                show_success(order.id)
            case Error(e):
                show_error(e.message)    # cart still holds the items
    """

    def __init__(self, gateway: RequestGateway, endpoints: Endpoints | None = None) -> None:
        self._gateway = gateway
        self._endpoints = endpoints or Endpoints()
        self._pending = Pending[Result[Order, ApiError]]("order")
        self._unconfirmed: tuple[str, str] | None = None  # (fingerprint, key)

    @property
    def in_flight(self) -> bool:
        return self._pending.in_flight

    async def submit(self, cart: Cart, context: SellerContext | None = None) -> Result[Order, ApiError]:
        match order_body(cart, context):
            case Error(e):
                logger.info("order.rejected_locally", reason=e.message)
                return Error(e)
            case Ok(body):
                digest = fingerprint(body)
                if self._pending.in_flight and self._pending.key != digest:
                    logger.info("order.busy")
                    return Error(ApiErrors.validation("Another order is being submitted"))
                return await self._pending.join(lambda: self._submit(cart, body, digest), key=digest)

    def _key_for(self, digest: str) -> str:
        if self._unconfirmed is not None and self._unconfirmed[0] == digest:
            return self._unconfirmed[1]
        key = f"{digest[:16]}-{uuid.uuid4().hex[:16]}"
        self._unconfirmed = (digest, key)
        return key

    async def _submit(self, cart: Cart, body: dict[str, Any], digest: str) -> Result[Order, ApiError]:
        key = self._key_for(digest)
        logger.info("order.submitting", seller_id=body["store"], lines=len(body["items"]))

        result = await self._gateway.call(
            self._endpoints.orders,
            "POST",
            body,
            requires_auth=True,
            headers={IDEMPOTENCY_HEADER: key},
        )

        match result:
            case Error(e):
                logger.warning("order.failed", kind=e.kind.name, status=e.http_status)
                return Error(e)
            case Ok(_):
                # The backend has accepted the order from here on.
                cart.settle({line["product"]: line["quantity"] for line in body["items"]})
                self._unconfirmed = None

        match expect(result, Order.from_json):
            case Ok(order):
                logger.info("order.submitted", order_id=order.id, seller_id=order.seller_id)
                return Ok(order)
            case Error(e):
                logger.warning("order.unreadable", seller_id=body["store"], message=e.message)
                return Error(e)


__all__ = ("OrderSubmission", "order_body", "fingerprint", "IDEMPOTENCY_HEADER")
