"""
marketgate — async client core for the marketplace backend.

    from marketgate import errors as X    # Closed error taxonomy
    from marketgate import auth as A      # Tokens and the session state machine
    from marketgate import gateway as G   # Authenticated calls, 401 recovery
    from marketgate import cart as C      # Single-seller persisted cart
    from marketgate import orders as O    # Checkout and order history
"""

from marketgate import errors
from marketgate import storage
from marketgate import transport
from marketgate import auth
from marketgate import gateway
from marketgate import catalog
from marketgate import cart
from marketgate import orders
from marketgate import locations
from marketgate import seller
from marketgate._types import (
    Result,
    Ok,
    Error,
    NoContent,
    NO_CONTENT,
    Body,
)
from marketgate.config import AuthMode, Settings, load_settings
from marketgate.client import MarketClient

__version__ = "0.1.0"

__all__ = (
    "errors",
    "storage",
    "transport",
    "auth",
    "gateway",
    "catalog",
    "cart",
    "orders",
    "locations",
    "seller",
    "Result",
    "Ok",
    "Error",
    "NoContent",
    "NO_CONTENT",
    "Body",
    "AuthMode",
    "Settings",
    "load_settings",
    "MarketClient",
)
