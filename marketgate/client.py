"""
MarketClient — composition root. One per process.

Usage:
    async with MarketClient.create(load_settings()) as client:
        await client.start()
        client.cart.add_item(CartItem.from_product(product))
        match await client.orders.submit(client.cart):
            case Ok(order):
                ...
"""

from __future__ import annotations

import httpx
import structlog
from kungfu import Error, Ok, Result

from marketgate.auth import AuthSession, IdentitySource, TokenStore, UserProfile, static_identity
from marketgate.cart import Cart
from marketgate.catalog import CatalogApi
from marketgate.config import AuthMode, Settings, load_settings
from marketgate.errors import ApiError
from marketgate.gateway import RequestGateway, expect, injection_for
from marketgate.locations import LocationScope, LocationsApi
from marketgate.orders import OrdersApi, OrderSubmission
from marketgate.seller import SellerApi
from marketgate.storage import KeyValueStorage, SQLAlchemyStorage
from marketgate.transport import HttpTransport

logger = structlog.get_logger(__name__)


class MarketClient:
    """
    Wires storage, session, gateway and the APIs together.

    Build with MarketClient.create(); the constructor takes already-built
    parts for hosts that assemble their own.
    """

    def __init__(
        self,
        settings: Settings,
        storage: KeyValueStorage,
        transport: HttpTransport,
        session: AuthSession,
        gateway: RequestGateway,
        *,
        owns_storage: bool = False,
    ) -> None:
        self.settings = settings
        self.storage = storage
        self.transport = transport
        self.session = session
        self.gateway = gateway
        self._owns_storage = owns_storage

        endpoints = settings.endpoints
        self.cart = Cart(storage, settings.keys.cart)
        self.orders = OrderSubmission(gateway, endpoints)
        self.order_history = OrdersApi(gateway, endpoints)
        self.catalog = CatalogApi(gateway, endpoints)
        self.locations = LocationsApi(gateway, LocationScope.BUYER, endpoints)
        self.seller = SellerApi(gateway, endpoints)
        self.seller_locations = LocationsApi(gateway, LocationScope.SELLER, endpoints)

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        *,
        storage: KeyValueStorage | None = None,
        identity: IdentitySource | None = None,
        http: httpx.AsyncBaseTransport | None = None,
    ) -> "MarketClient":
        """
        Build a client.

        Args:
            settings: defaults to load_settings()
            storage: defaults to SQLAlchemyStorage at settings.storage_url
            identity: defaults to the configured MARKETGATE_INIT_DATA
            http: httpx transport override (MockTransport, ASGITransport)
        """
        settings = settings or load_settings()
        owns_storage = storage is None
        if storage is None:
            storage = SQLAlchemyStorage.from_url(settings.storage_url)

        transport = HttpTransport(settings, transport=http)
        tokens = TokenStore(storage, settings.keys)
        session = AuthSession(
            transport,
            tokens,
            endpoints=settings.endpoints,
            identity=identity or static_identity(settings.init_data),
        )
        gateway = RequestGateway(transport, session, injection_for(settings, session))
        return cls(settings, storage, transport, session, gateway, owns_storage=owns_storage)

    # ───────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ───────────────────────────────────────────────────────────────────────────

    async def start(self) -> Result[UserProfile | None, ApiError]:
        """
        Bring the session up.

        Stored tokens are validated with /me/. A 401 there goes through the
        gateway's refresh and re-login, so no second login follows. Without
        an identity proof the client stays unauthenticated (Ok(None)) so
        public browsing still works.
        """
        if self.settings.auth_mode is AuthMode.INIT_DATA:
            if not self.session.forward_identity():
                logger.info("client.no_identity")
                return Ok(None)
            return await self.me()

        if self.session.restore():
            match await self.me():
                case Ok(user):
                    logger.info("client.session_restored", user_id=user.id)
                    return Ok(user)
                case Error(e) if not e.is_auth:
                    return Error(e)
                case Error(e) if self.session.identity_proof():
                    # The gateway's recovery already logged in with this proof.
                    logger.warning("client.relogin_failed", status=e.http_status)
                    return Error(e)
                case Error(_):
                    logger.info("client.stored_session_invalid")

        if not self.session.identity_proof():
            logger.info("client.no_identity")
            return Ok(None)

        match await self.session.login():
            case Ok(user):
                return Ok(user)
            case Error(e):
                return Error(e)

    async def me(self) -> Result[UserProfile, ApiError]:
        result = expect(
            await self.gateway.call(self.settings.endpoints.me, requires_auth=True),
            UserProfile.from_json,
        )
        match result:
            case Ok(user):
                self.session.bind_user(user)
        return result

    def logout(self) -> None:
        """Drop the session. The cart survives."""
        self.session.logout()
        logger.info("client.logged_out")

    async def aclose(self) -> None:
        await self.transport.aclose()
        if self._owns_storage and isinstance(self.storage, SQLAlchemyStorage):
            self.storage.close()

    async def __aenter__(self) -> "MarketClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ("MarketClient",)
