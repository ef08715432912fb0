"""
HttpTransport — one JSON exchange with the backend, under a deadline.

Usage:
    transport = HttpTransport(settings)
    result = await transport.exchange("GET", "/stores/")

    match result:
        case Ok(body):
            ...
        case Error(e):
            print(e.kind, e.message)
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any

import httpx
import structlog
from combinators import lift as L
from kungfu import Error, LazyCoroResult, Ok, Result

from marketgate._types import NO_CONTENT, Body
from marketgate.config import Settings
from marketgate.errors import ApiError, ApiErrors, classify, classify_transport
from marketgate.transport._deadline import Deadline, deadline, within

logger = structlog.get_logger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Decoding
# ═══════════════════════════════════════════════════════════════════════════════


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


def decode(response: httpx.Response) -> Result[Body, ApiError]:
    """
    Turn a response into a Result.

    2xx with no content  -> Ok(NO_CONTENT)
    2xx with JSON        -> Ok(parsed)
    2xx with garbage     -> Error(SERVER)
    anything else        -> Error(classify(...))
    """
    if not response.is_success:
        return Error(classify(response.status_code, _error_body(response), response.headers))

    if response.status_code == 204 or not response.content.strip():
        return Ok(NO_CONTENT)

    try:
        return Ok(response.json())
    except ValueError:
        return Error(ApiErrors.server("Malformed response body", response.status_code))


# ═══════════════════════════════════════════════════════════════════════════════
# Transport
# ═══════════════════════════════════════════════════════════════════════════════


class HttpTransport:
    """
    httpx.AsyncClient bound to the API base URL.

    Pass `transport` to swap the network layer (httpx.MockTransport,
    httpx.ASGITransport) without touching anything above it.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._deadline: Deadline = deadline(seconds=settings.request_timeout)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=settings.base_url,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @property
    def deadline(self) -> Deadline:
        return self._deadline

    def send(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> LazyCoroResult[httpx.Response, ApiError]:
        """Raw exchange: transport failures and the deadline become errors, statuses do not."""

        async def do_send() -> httpx.Response:
            started = time.perf_counter()
            response = await self._client.request(
                method,
                path.lstrip("/"),
                json=json,
                params=_clean(params),
                headers=dict(headers or {}),
            )
            logger.debug(
                "transport.response",
                method=method,
                path=path,
                status=response.status_code,
                elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            return response

        return within(
            lambda: L.catching_async(do_send, on_error=classify_transport),
            self._deadline,
        )

    async def exchange(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result[Body, ApiError]:
        result = await self.send(method, path, json=json, params=params, headers=headers)
        match result:
            case Ok(response):
                return decode(response)
            case Error(e):
                logger.info("transport.failed", method=method, path=path, kind=e.kind.name)
                return Error(e)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _clean(params: Mapping[str, Any] | None) -> dict[str, Any] | None:
    if params is None:
        return None
    return {k: v for k, v in params.items() if v is not None}


__all__ = ("HttpTransport", "decode")
