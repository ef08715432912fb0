"""
RequestGateway — the single entry point for backend calls.

One logical call may span up to three exchanges:

    attempt ──401──> refresh ──> retry ──401──> re-login ──> retry
       │                │          │                │          │
       └─ other ─> out  └─ fail ─> out  └─ other ─> out  └─ fail ─> out

Every exchange runs under the transport deadline. Only AUTH is recovered;
every other kind goes straight back to the caller.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import structlog
from kungfu import Error, Ok, Result

from marketgate._types import Body
from marketgate.auth import AuthSession
from marketgate.errors import ApiError
from marketgate.gateway._injection import Injection
from marketgate.transport import HttpTransport

logger = structlog.get_logger(__name__)

type Attempt = Callable[[], Awaitable[Result[Body, ApiError]]]


def _is_auth_failure(result: Result[Body, ApiError]) -> bool:
    match result:
        case Error(e):
            return e.is_auth
        case _:
            return False


class RequestGateway:
    """
    Example:
        gateway = RequestGateway(transport, session, injection_for(settings, session))

        result = await gateway.call("/orders/my/", requires_auth=True)
        result = await gateway.call("/orders/", "POST", {"store": 7, "items": [...]},
                                    requires_auth=True)
    """

    def __init__(
        self,
        transport: HttpTransport,
        session: AuthSession,
        injection: Injection,
    ) -> None:
        self._transport = transport
        self._session = session
        self._injection = injection

    @property
    def session(self) -> AuthSession:
        return self._session

    async def call(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        *,
        requires_auth: bool = False,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result[Body, ApiError]:
        async def attempt() -> Result[Body, ApiError]:
            merged = dict(headers or {})
            if requires_auth:
                merged.update(self._injection.headers())
            return await self._transport.exchange(
                method, path, json=body, params=params, headers=merged
            )

        first = await attempt()
        if not (requires_auth and self._injection.refreshable and _is_auth_failure(first)):
            return first
        return await self._recover(method, path, attempt)

    async def _recover(
        self,
        method: str,
        path: str,
        attempt: Attempt,
    ) -> Result[Body, ApiError]:
        match await self._session.refresh():
            case Error(e) if e.is_auth:
                return self._expire(method, path, e)
            case Error(e):
                # Credential kept; caller decides whether to retry later.
                return Error(e)
            case Ok(_):
                pass

        logger.info("gateway.retry", method=method, path=path, after="refresh")
        retry = await attempt()
        if not _is_auth_failure(retry):
            return retry

        if not self._session.identity_proof():
            return self._expire_with(method, path, retry)

        match await self._session.login():
            case Error(e) if e.is_auth:
                return self._expire(method, path, e)
            case Error(e):
                return Error(e)
            case Ok(_):
                pass

        logger.info("gateway.retry", method=method, path=path, after="relogin")
        final = await attempt()
        if _is_auth_failure(final):
            return self._expire_with(method, path, final)
        return final

    def _expire_with(
        self, method: str, path: str, result: Result[Body, ApiError]
    ) -> Result[Body, ApiError]:
        match result:
            case Error(e):
                return self._expire(method, path, e)
            case _:
                return result

    def _expire(self, method: str, path: str, error: ApiError) -> Result[Body, ApiError]:
        logger.warning("gateway.auth_expired", method=method, path=path, status=error.http_status)
        self._session.expire(error.message)
        return Error(error)


__all__ = ("RequestGateway",)
