"""Tests for the HTTP transport: decoding, deadlines, transport failures."""

import asyncio
from datetime import timedelta

import httpx
import pytest
from conftest import err, ok
from kungfu import Ok

from marketgate._types import NO_CONTENT
from marketgate.config import Settings
from marketgate.errors import ErrorKind
from marketgate.transport import HttpTransport, deadline, decode, within


class TestDecode:
    def test_json_body(self):
        assert ok(decode(httpx.Response(200, json={"id": 1}))) == {"id": 1}

    def test_204_is_no_content(self):
        assert ok(decode(httpx.Response(204))) is NO_CONTENT

    def test_empty_2xx_is_no_content(self):
        assert ok(decode(httpx.Response(200, content=b""))) is NO_CONTENT

    def test_malformed_json_is_server_error(self):
        error = err(decode(httpx.Response(200, content=b"<html>oops</html>")))
        assert error.kind is ErrorKind.SERVER
        assert error.http_status == 200

    def test_error_status_classified(self):
        error = err(decode(httpx.Response(404, json={"detail": "Not found."})))
        assert error.kind is ErrorKind.NOT_FOUND
        assert error.message == "Not found."

    def test_plain_text_error_body(self):
        error = err(decode(httpx.Response(500, text="Internal Server Error")))
        assert error.kind is ErrorKind.SERVER
        assert error.message == "Internal Server Error"


class TestDeadline:
    def test_builder(self):
        assert deadline(seconds=15).seconds == 15
        assert deadline(duration=timedelta(milliseconds=250)).seconds == 0.25
        with pytest.raises(ValueError):
            deadline()

    async def test_expiry_cancels_operation(self):
        cancelled = asyncio.Event()

        async def slow():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return Ok("late")

        error = err(await within(slow, deadline(seconds=0.05)))

        assert error.kind is ErrorKind.TIMEOUT
        assert error.http_status == 0
        assert cancelled.is_set()

    async def test_fast_operation_passes_through(self):
        async def fast():
            return Ok(1)

        assert ok(await within(fast, deadline(seconds=1))) == 1


class TestHttpTransport:
    async def test_base_url_and_prefix(self, backend, transport):
        backend.on("GET", "/api/stores/", httpx.Response(200, json=[]))

        assert ok(await transport.exchange("GET", "/stores/")) == []
        assert str(backend.requests[0].url) == "http://backend.test/api/stores/"

    async def test_none_params_dropped(self, backend, transport):
        backend.on("GET", "/api/search/", httpx.Response(200, json=[]))

        await transport.exchange("GET", "/search/", params={"q": "cement", "page": None})
        assert dict(backend.requests[0].url.params) == {"q": "cement"}

    async def test_network_error(self, settings):
        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        http = HttpTransport(settings, transport=httpx.MockTransport(refuse))
        error = err(await http.exchange("GET", "/stores/"))
        await http.aclose()

        assert error.kind is ErrorKind.NETWORK
        assert error.http_status == 0

    async def test_slow_backend_times_out(self, backend):
        handler_cancelled = asyncio.Event()

        async def stall(request):
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                handler_cancelled.set()
                raise
            return httpx.Response(200, json={})

        backend.on("GET", "/api/me/", stall)
        http = HttpTransport(
            Settings(api_url="http://backend.test", request_timeout=0.05),
            transport=httpx.MockTransport(backend),
        )

        error = err(await http.exchange("GET", "/me/"))
        await http.aclose()

        assert error.kind is ErrorKind.TIMEOUT
        assert handler_cancelled.is_set()
