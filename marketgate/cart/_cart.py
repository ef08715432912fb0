"""
Cart — persisted single-seller cart.

Invariant: every item of a non-empty cart has the same seller_id. The only
way in is add_item, which refuses a second seller with Conflict.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import replace
from decimal import Decimal

import structlog

from marketgate._types import ProductId, SellerId
from marketgate.cart._types import AddOutcome, Added, CartItem, Conflict
from marketgate.storage import KeyValueStorage, StorageError

logger = structlog.get_logger(__name__)

DEFAULT_CART_KEY = "buildgo_cart"


class Cart:
    """
    Example:
        cart = Cart(storage)

        match cart.add_item(CartItem.from_product(product), quantity=2):
            case Added(item):
                ...
            case Conflict(current, requested):
                ask_user_to_clear()
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_CART_KEY) -> None:
        self._storage = storage
        self._key = key
        self._items: list[CartItem] = self._load()

    # ───────────────────────────────────────────────────────────────────────────
    # Reads
    # ───────────────────────────────────────────────────────────────────────────

    @property
    def items(self) -> tuple[CartItem, ...]:
        return tuple(self._items)

    @property
    def seller_id(self) -> SellerId | None:
        return self._items[0].seller_id if self._items else None

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def item_count(self) -> int:
        """Total units across lines."""
        return sum(item.quantity for item in self._items)

    def total(self) -> Decimal:
        return sum((item.subtotal for item in self._items), Decimal("0"))

    def get(self, product_id: ProductId) -> CartItem | None:
        for item in self._items:
            if item.product_id == product_id:
                return item
        return None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CartItem]:
        return iter(tuple(self._items))

    def __contains__(self, product_id: object) -> bool:
        return any(item.product_id == product_id for item in self._items)

    # ───────────────────────────────────────────────────────────────────────────
    # Mutations
    # ───────────────────────────────────────────────────────────────────────────

    def add_item(self, item: CartItem, quantity: int = 1) -> AddOutcome:
        if quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {quantity}")

        current = self.seller_id
        if current is not None and current != item.seller_id:
            logger.info("cart.seller_conflict", current=current, requested=item.seller_id)
            return Conflict(current, item.seller_id)

        for index, existing in enumerate(self._items):
            if existing.product_id == item.product_id:
                merged = replace(existing, quantity=existing.quantity + quantity)
                self._items[index] = merged
                break
        else:
            merged = replace(item, quantity=quantity)
            self._items.append(merged)

        self._persist()
        return Added(merged)

    def update_quantity(self, product_id: ProductId, quantity: int) -> None:
        """quantity <= 0 removes the line."""
        if quantity <= 0:
            self.remove_item(product_id)
            return
        self._items = [
            replace(item, quantity=quantity) if item.product_id == product_id else item
            for item in self._items
        ]
        self._persist()

    def remove_item(self, product_id: ProductId) -> None:
        self._items = [item for item in self._items if item.product_id != product_id]
        self._persist()

    def settle(self, ordered: Mapping[ProductId, int]) -> None:
        """
        Take ordered quantities out of the cart.

        Lines added or raised after the order body was built keep the
        difference; a line with nothing left is removed.
        """
        remaining: list[CartItem] = []
        for item in self._items:
            left = item.quantity - ordered.get(item.product_id, 0)
            if left > 0:
                remaining.append(replace(item, quantity=left))
        if not remaining:
            self.clear()
            return
        self._items = remaining
        self._persist()

    def clear(self) -> None:
        self._items = []
        try:
            self._storage.delete(self._key)
        except StorageError as e:
            logger.warning("cart.persist_failed", op="clear", error=e.message)

    # ───────────────────────────────────────────────────────────────────────────
    # Persistence
    # ───────────────────────────────────────────────────────────────────────────

    def _persist(self) -> None:
        payload = json.dumps([item.to_json() for item in self._items])
        try:
            self._storage.set(self._key, payload)
        except StorageError as e:
            logger.warning("cart.persist_failed", op="set", error=e.message)

    def _load(self) -> list[CartItem]:
        try:
            raw = self._storage.get(self._key)
        except StorageError as e:
            logger.warning("cart.load_failed", error=e.message)
            return []
        if not raw:
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("cart payload is not an array")
            items = [CartItem.from_json(entry) for entry in data]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("cart.corrupt", error=str(e))
            return []

        if len({item.seller_id for item in items}) > 1:
            logger.warning("cart.corrupt", error="mixed sellers")
            return []
        return items


__all__ = ("Cart", "DEFAULT_CART_KEY")
