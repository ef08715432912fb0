"""Tests for checkout and order history."""

import asyncio
from decimal import Decimal

import httpx
import pytest
from conftest import body_of, err, ok

from marketgate.cart import Cart, CartItem
from marketgate.errors import ErrorKind
from marketgate.orders import (
    IDEMPOTENCY_HEADER,
    OrdersApi,
    OrderStatus,
    OrderSubmission,
    SellerContext,
    order_body,
)

ORDERS = "/api/orders/"

ORDER = {
    "id": 31,
    "customer": 1,
    "customer_name": "Aziz Karimov",
    "store": 7,
    "store_name": "Qurilish Market",
    "status": "new",
    "items": [
        {
            "id": 1,
            "product": 1,
            "product_name": "Cement",
            "product_unit": "qop",
            "quantity": 2,
            "price_at_order": "65000.00",
        }
    ],
    "location": None,
    "created_at": "2025-03-01T10:00:00Z",
    "updated_at": "2025-03-01T10:00:00Z",
}


@pytest.fixture
def cart(storage) -> Cart:
    cart = Cart(storage)
    cart.add_item(CartItem(1, 7, Decimal("65000.00")), quantity=2)
    cart.add_item(CartItem(2, 7, Decimal("1200.50")))
    return cart


@pytest.fixture
def submission(gateway) -> OrderSubmission:
    return OrderSubmission(gateway)


class FakeMixedCart:
    """Stands in for a cart whose contents were assembled outside Cart."""

    def __init__(self) -> None:
        self._items = [CartItem(1, 7, Decimal("1")), CartItem(2, 8, Decimal("1"))]

    @property
    def is_empty(self) -> bool:
        return False

    @property
    def seller_id(self) -> int:
        return 7

    def __iter__(self):
        return iter(self._items)


class TestLocalValidation:
    async def test_empty_cart_makes_no_call(self, signed_in, storage, submission, backend):
        error = err(await submission.submit(Cart(storage)))

        assert error.kind is ErrorKind.VALIDATION
        assert error.http_status == 0
        assert backend.requests == []

    async def test_mixed_sellers_make_no_call(self, signed_in, submission, backend):
        error = err(await submission.submit(FakeMixedCart()))

        assert error.kind is ErrorKind.VALIDATION
        assert backend.requests == []

    async def test_context_for_another_seller(self, signed_in, cart, submission, backend):
        error = err(await submission.submit(cart, SellerContext(seller_id=8)))

        assert error.kind is ErrorKind.VALIDATION
        assert backend.requests == []
        assert len(cart) == 2


class TestBody:
    def test_carries_ids_and_quantities_never_prices(self, cart):
        body = ok(order_body(cart))

        assert body == {
            "store": 7,
            "items": [{"product": 1, "quantity": 2}, {"product": 2, "quantity": 1}],
        }

    def test_location_from_context(self, cart):
        body = ok(order_body(cart, SellerContext(seller_id=7, location_id=3)))
        assert body["location"] == 3


class TestSubmit:
    async def test_success_clears_cart(self, signed_in, cart, submission, backend):
        backend.on("POST", ORDERS, httpx.Response(201, json=ORDER))

        order = ok(await submission.submit(cart))

        assert order.id == 31
        assert order.seller_id == 7
        assert order.status is OrderStatus.NEW
        assert order.total == Decimal("130000.00")
        assert cart.is_empty
        request = backend.requests[0]
        assert request.headers["Authorization"] == "Bearer access-0"
        assert "price" not in request.content.decode()
        assert body_of(request)["store"] == 7

    async def test_failure_leaves_cart_untouched(self, signed_in, cart, submission, backend):
        backend.on("POST", ORDERS, httpx.Response(400, json={"items": ["Product unavailable"]}))
        before = cart.items

        error = err(await submission.submit(cart))

        assert error.kind is ErrorKind.VALIDATION
        assert error.message == "items: Product unavailable"
        assert cart.items == before

    async def test_double_submit_posts_once(self, signed_in, cart, submission, backend):
        async def slow_create(request):
            await asyncio.sleep(0.02)
            return httpx.Response(201, json=ORDER)

        backend.on("POST", ORDERS, slow_create)

        first, second = await asyncio.gather(submission.submit(cart), submission.submit(cart))

        assert ok(first).id == ok(second).id == 31
        assert len(backend.calls("POST", ORDERS)) == 1
        assert cart.is_empty

    async def test_items_added_during_flight_survive(
        self, signed_in, cart, storage, submission, backend
    ):
        release = asyncio.Event()

        async def held(request):
            await release.wait()
            return httpx.Response(201, json=ORDER)

        backend.on("POST", ORDERS, held)

        pending = asyncio.create_task(submission.submit(cart))
        await asyncio.sleep(0.01)
        cart.add_item(CartItem(5, 7, Decimal("300.00")))
        cart.add_item(CartItem(1, 7, Decimal("65000.00")))
        release.set()

        ok(await pending)

        assert [(item.product_id, item.quantity) for item in cart] == [(1, 1), (5, 1)]
        assert [item.product_id for item in Cart(storage)] == [1, 5]

    async def test_changed_cart_during_flight_is_refused(self, signed_in, cart, submission, backend):
        release = asyncio.Event()

        async def held(request):
            await release.wait()
            return httpx.Response(201, json=ORDER)

        backend.on("POST", ORDERS, held)

        pending = asyncio.create_task(submission.submit(cart))
        await asyncio.sleep(0.01)
        cart.add_item(CartItem(5, 7, Decimal("300.00")))

        error = err(await submission.submit(cart))
        release.set()
        ok(await pending)

        assert error.kind is ErrorKind.VALIDATION
        assert len(backend.calls("POST", ORDERS)) == 1
        assert [item.product_id for item in cart] == [5]

    async def test_unknown_status_still_settles(self, signed_in, cart, submission, backend):
        backend.on("POST", ORDERS, httpx.Response(201, json={**ORDER, "status": "accepted"}))

        order = ok(await submission.submit(cart))

        assert order.status is OrderStatus.UNKNOWN
        assert not order.status.is_final
        assert cart.is_empty

    async def test_unreadable_success_body_still_settles(
        self, signed_in, cart, submission, backend
    ):
        body = {key: value for key, value in ORDER.items() if key != "store"}
        backend.on("POST", ORDERS, httpx.Response(201, json=body))

        error = err(await submission.submit(cart))

        assert error.kind is ErrorKind.SERVER
        assert cart.is_empty

    async def test_resubmission_reuses_idempotency_key(self, signed_in, cart, submission, backend):
        backend.on(
            "POST",
            ORDERS,
            [httpx.Response(502, text="Bad Gateway"), httpx.Response(201, json=ORDER)],
        )

        err(await submission.submit(cart))
        ok(await submission.submit(cart))

        first, second = backend.calls("POST", ORDERS)
        assert first.headers[IDEMPOTENCY_HEADER] == second.headers[IDEMPOTENCY_HEADER]

    async def test_changed_cart_gets_new_key(self, signed_in, cart, submission, backend):
        backend.on("POST", ORDERS, httpx.Response(503, text="down"))

        err(await submission.submit(cart))
        cart.update_quantity(2, 5)
        err(await submission.submit(cart))

        first, second = backend.calls("POST", ORDERS)
        assert first.headers[IDEMPOTENCY_HEADER] != second.headers[IDEMPOTENCY_HEADER]

    async def test_401_recovered_during_checkout(self, signed_in, cart, submission, backend):
        def create(request):
            if request.headers.get("Authorization") == "Bearer access-new":
                return httpx.Response(201, json=ORDER)
            return httpx.Response(401, json={"detail": "expired"})

        backend.on("POST", ORDERS, create)
        backend.on("POST", "/api/token/refresh/", httpx.Response(200, json={"access": "access-new"}))

        ok(await submission.submit(cart))

        posts = backend.calls("POST", ORDERS)
        assert len(posts) == 2
        assert posts[0].headers[IDEMPOTENCY_HEADER] == posts[1].headers[IDEMPOTENCY_HEADER]
        assert cart.is_empty


class TestHistory:
    async def test_my_orders(self, signed_in, gateway, backend):
        page = {"count": 1, "next": None, "previous": None, "results": [ORDER]}
        backend.on("GET", "/api/orders/my/", httpx.Response(200, json=page))

        orders = ok(await OrdersApi(gateway).my_orders(page=2))

        assert [o.id for o in orders] == [31]
        assert orders.count == 1
        assert backend.requests[0].url.params["page"] == "2"
        assert backend.requests[0].headers["Authorization"] == "Bearer access-0"
