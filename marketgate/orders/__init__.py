"""
Orders — checkout and order history.

    from marketgate import orders as O

    submission = O.OrderSubmission(gateway)
    result = await submission.submit(cart, O.SellerContext(seller_id=7))
"""

from marketgate.orders._types import (
    OrderStatus,
    OrderLine,
    DeliveryLocation,
    Order,
    SellerContext,
)
from marketgate.orders._submit import (
    IDEMPOTENCY_HEADER,
    OrderSubmission,
    order_body,
    fingerprint,
)
from marketgate.orders._api import OrdersApi

__all__ = (
    # Types
    "OrderStatus",
    "OrderLine",
    "DeliveryLocation",
    "Order",
    "SellerContext",
    # Submission
    "IDEMPOTENCY_HEADER",
    "OrderSubmission",
    "order_body",
    "fingerprint",
    # History
    "OrdersApi",
)
