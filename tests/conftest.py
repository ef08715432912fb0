import json
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
import pytest
from kungfu import Error, Ok

from marketgate.auth import AuthSession, Credential, TokenStore, static_identity
from marketgate.config import Settings
from marketgate.errors import ApiError
from marketgate.gateway import RequestGateway, injection_for
from marketgate.storage import MemoryStorage
from marketgate.transport import HttpTransport

type Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]

PROOF = "query_id=AAE&user=%7B%22id%22%3A42%7D&hash=abc"

USER = {
    "id": 1,
    "telegram_id": 42,
    "first_name": "Aziz",
    "last_name": "Karimov",
    "phone": "+998901234567",
    "role": "buyer",
    "created_at": "2025-01-10T09:30:00Z",
}


def login_body(access: str = "access-1", refresh: str = "refresh-1") -> dict[str, Any]:
    return {"access": access, "refresh": refresh, "user": USER}


def body_of(request: httpx.Request) -> Any:
    return json.loads(request.content) if request.content else None


def ok(result: Any) -> Any:
    """Unwrap an Ok, failing the test on Error."""
    match result:
        case Ok(value):
            return value
        case Error(e):
            pytest.fail(f"expected Ok, got {e}")


def err(result: Any) -> ApiError:
    """Unwrap an Error, failing the test on Ok."""
    match result:
        case Error(e):
            return e
        case Ok(value):
            pytest.fail(f"expected Error, got Ok({value!r})")


class Backend:
    """
    Scripted fake backend for httpx.MockTransport.

    Routes map (method, path) to a handler, a single response, or a list of
    responses consumed in order (the last one repeats). Unrouted requests
    get 404. Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def on(
        self,
        method: str,
        path: str,
        response: httpx.Response | list[httpx.Response] | Handler,
    ) -> None:
        if isinstance(response, httpx.Response):
            responses = [response]
        elif isinstance(response, list):
            responses = list(response)
        else:
            self.routes[(method, path)] = response
            return

        def scripted(request: httpx.Request) -> httpx.Response:
            current = responses.pop(0) if len(responses) > 1 else responses[0]
            return httpx.Response(
                current.status_code, headers=current.headers, content=current.content
            )

        self.routes[(method, path)] = scripted

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"detail": "Not found."})
        response = handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response


@pytest.fixture
def settings() -> Settings:
    return Settings(api_url="http://backend.test", request_timeout=1.0)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def backend() -> Backend:
    return Backend()


@pytest.fixture
async def transport(settings, backend):
    http = HttpTransport(settings, transport=httpx.MockTransport(backend))
    yield http
    await http.aclose()


@pytest.fixture
def tokens(storage) -> TokenStore:
    return TokenStore(storage)


@pytest.fixture
def identity():
    return static_identity(PROOF)


@pytest.fixture
def session(transport, tokens, settings, identity) -> AuthSession:
    return AuthSession(transport, tokens, endpoints=settings.endpoints, identity=identity)


@pytest.fixture
def gateway(transport, session, settings) -> RequestGateway:
    return RequestGateway(transport, session, injection_for(settings, session))


@pytest.fixture
def signed_in(session, tokens) -> AuthSession:
    """Session restored from a stored credential pair."""
    tokens.set(Credential("access-0", "refresh-0"))
    session.restore()
    return session
