"""
Cart — local, persisted, one seller at a time.

    from marketgate import cart as C

    cart = C.Cart(storage)
    cart.add_item(C.CartItem.from_product(product))
    cart.total()    # Decimal
"""

from marketgate.cart._types import CartItem, Added, Conflict, AddOutcome
from marketgate.cart._cart import Cart, DEFAULT_CART_KEY

__all__ = ("CartItem", "Added", "Conflict", "AddOutcome", "Cart", "DEFAULT_CART_KEY")
