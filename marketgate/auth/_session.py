"""
AuthSession — the authentication state machine.

    unauthenticated --login--> authenticating --ok--> authenticated
                                              --fail--> failed
    authenticated --401--> refreshing --ok--> authenticated
                                      --rejected--> authenticating --> failed

Refresh and login are coalesced: concurrent callers share one exchange.
Coalescing is scoped to the session epoch (bumped by logout), and login
calls only share an exchange when they carry the same proof.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

import structlog
from kungfu import Error, Ok, Result

from marketgate._pending import Pending
from marketgate._wire import pick
from marketgate.auth._identity import no_identity
from marketgate.auth._tokens import TokenStore
from marketgate.auth._types import (
    AUTHENTICATING,
    REFRESHING,
    UNAUTHENTICATED,
    Authenticated,
    Credential,
    Failed,
    IdentitySource,
    SessionState,
    UserProfile,
    state_name,
)
from marketgate.config import Endpoints
from marketgate.errors import ApiError, ApiErrors, ErrorKind
from marketgate.transport import HttpTransport

logger = structlog.get_logger(__name__)

# 4xx answers (other than 429) mean the backend refused the proof or token.
_REJECTION_KINDS = frozenset({
    ErrorKind.AUTH,
    ErrorKind.FORBIDDEN,
    ErrorKind.NOT_FOUND,
    ErrorKind.VALIDATION,
})


def _rejected(error: ApiError) -> bool:
    return error.kind in _REJECTION_KINDS


def _as_auth(error: ApiError) -> ApiError:
    if error.kind is ErrorKind.AUTH:
        return error
    return replace(error, kind=ErrorKind.AUTH)


def _session_closed() -> ApiError:
    return ApiErrors.auth("Session was closed", status=0)


def _parse_login(body: Any) -> tuple[Credential, UserProfile] | None:
    if not isinstance(body, Mapping):
        return None
    access = pick(body, "access", "accessToken")
    if not isinstance(access, str) or not access:
        return None
    refresh = pick(body, "refresh", "refreshToken", default="")
    user = body.get("user")
    if not isinstance(user, Mapping):
        return None
    refresh_token = refresh if isinstance(refresh, str) else ""
    return Credential(access, refresh_token), UserProfile.from_json(user)


class AuthSession:
    """
    Owns session state for one running client.

    Construct once and pass it to every consumer.

    Example:
        session = AuthSession(transport, tokens, identity=read_init_data)
        match await session.login():
            case Ok(user):
                print("hello", user.first_name)
            case Error(e):
                print("login failed:", e.message)
    """

    def __init__(
        self,
        transport: HttpTransport,
        tokens: TokenStore,
        *,
        endpoints: Endpoints | None = None,
        identity: IdentitySource | None = None,
    ) -> None:
        self._transport = transport
        self._tokens = tokens
        self._endpoints = endpoints or Endpoints()
        self._identity = identity or no_identity
        self._state: SessionState = UNAUTHENTICATED
        self._proof: str | None = None
        self._epoch = 0
        self._refreshing = Pending[Result[Credential, ApiError]]("refresh")
        self._logging_in = Pending[Result[UserProfile, ApiError]]("login")

    # ───────────────────────────────────────────────────────────────────────────
    # Inspection
    # ───────────────────────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def tokens(self) -> TokenStore:
        return self._tokens

    @property
    def user(self) -> UserProfile | None:
        return _user_of(self._state)

    @property
    def is_authenticated(self) -> bool:
        return isinstance(self._state, Authenticated)

    def identity_proof(self) -> str | None:
        """Fresh proof from the host, falling back to the last accepted one."""
        return self._identity() or self._proof

    # ───────────────────────────────────────────────────────────────────────────
    # Transitions without exchanges
    # ───────────────────────────────────────────────────────────────────────────

    def restore(self) -> bool:
        """Resume from stored tokens. The profile is fetched later."""
        if self._tokens.get() is None:
            return False
        self._transition(Authenticated(None))
        return True

    def bind_user(self, user: UserProfile) -> None:
        if isinstance(self._state, Authenticated):
            self._transition(Authenticated(user))

    def forward_identity(self) -> bool:
        """Proof-forwarding mode: authenticated as long as a proof exists."""
        proof = self.identity_proof()
        if not proof:
            return False
        self._proof = proof
        self._transition(Authenticated(self.user))
        return True

    def expire(self, reason: str) -> None:
        self._tokens.clear()
        self._transition(Failed(reason))

    def logout(self) -> None:
        """Tear down. Exchanges still in flight resolve as closed."""
        self._epoch += 1
        self._tokens.clear()
        self._proof = None
        self._transition(UNAUTHENTICATED)

    # ───────────────────────────────────────────────────────────────────────────
    # Login
    # ───────────────────────────────────────────────────────────────────────────

    async def login(self, proof: str | None = None) -> Result[UserProfile, ApiError]:
        proof = proof or self.identity_proof()
        if not proof:
            error = ApiErrors.auth("Identity proof is missing", status=0)
            self._transition(Failed(error.message))
            return Error(error)
        return await self._logging_in.join(lambda: self._login(proof), key=(self._epoch, proof))

    async def _login(self, proof: str) -> Result[UserProfile, ApiError]:
        epoch = self._epoch
        self._transition(AUTHENTICATING)

        result = await self._transport.exchange(
            "POST", self._endpoints.login, json={"init_data": proof}
        )
        if epoch != self._epoch:
            return Error(_session_closed())

        match result:
            case Ok(body):
                parsed = _parse_login(body)
                if parsed is None:
                    return self._login_failed(ApiErrors.server("Malformed login response"))
                credential, user = parsed
                self._tokens.set(credential)
                self._proof = proof
                self._transition(Authenticated(user))
                logger.info("session.logged_in", user_id=user.id)
                return Ok(user)
            case Error(e):
                return self._login_failed(_as_auth(e) if _rejected(e) else e)

    def _login_failed(self, error: ApiError) -> Result[UserProfile, ApiError]:
        self._transition(Failed(error.message))
        logger.warning("session.login_failed", kind=error.kind.name, status=error.http_status)
        return Error(error)

    # ───────────────────────────────────────────────────────────────────────────
    # Refresh
    # ───────────────────────────────────────────────────────────────────────────

    async def refresh(self) -> Result[Credential, ApiError]:
        """
        Exchange the refresh token for a new access token.

        Transient failures keep the credential. A rejection clears it and
        falls back to a full login with the identity proof.
        """
        match self._state:
            case Failed(reason):
                return Error(ApiErrors.auth(f"Session failed: {reason}", status=0))
        return await self._refreshing.join(self._refresh, key=self._epoch)

    async def _refresh(self) -> Result[Credential, ApiError]:
        epoch = self._epoch
        credential = self._tokens.get()
        if credential is None or not credential.can_refresh:
            return await self._relogin(ApiErrors.auth("No refresh token available", status=0))

        previous = self._state
        self._transition(REFRESHING)

        result = await self._transport.exchange(
            "POST", self._endpoints.refresh, json={"refresh": credential.refresh_token}
        )
        if epoch != self._epoch:
            return Error(_session_closed())

        match result:
            case Ok(body) if isinstance(body, Mapping) and pick(body, "access", "accessToken"):
                rotated = pick(body, "refresh", "refreshToken")
                access = pick(body, "access", "accessToken")
                if rotated:
                    self._tokens.set(Credential(access, rotated))
                else:
                    self._tokens.replace_access(access)
                self._transition(Authenticated(_user_of(previous)))
                logger.info("session.refreshed", rotated=bool(rotated))
                return Ok(self._tokens.get() or Credential(access, credential.refresh_token))
            case Ok(_):
                self._transition(previous)
                return Error(ApiErrors.server("Malformed refresh response"))
            case Error(e) if not _rejected(e):
                self._transition(previous)
                logger.info("session.refresh_deferred", kind=e.kind.name)
                return Error(e)
            case Error(e):
                return await self._relogin(e)

    async def _relogin(self, cause: ApiError) -> Result[Credential, ApiError]:
        self._tokens.clear()
        proof = self.identity_proof()
        if not proof:
            error = _as_auth(cause)
            self._transition(Failed(error.message))
            logger.warning("session.refresh_rejected", status=error.http_status)
            return Error(error)

        logger.info("session.relogin", status=cause.http_status)
        match await self._logging_in.join(lambda: self._login(proof), key=(self._epoch, proof)):
            case Ok(_):
                credential = self._tokens.get()
                if credential is None:
                    return Error(_session_closed())
                return Ok(credential)
            case Error(e):
                return Error(e)

    # ───────────────────────────────────────────────────────────────────────────
    # Internals
    # ───────────────────────────────────────────────────────────────────────────

    def _transition(self, state: SessionState) -> None:
        before = self._state
        self._state = state
        if type(before) is not type(state):
            logger.debug("session.transition", before=state_name(before), after=state_name(state))


def _user_of(state: SessionState) -> UserProfile | None:
    match state:
        case Authenticated(user):
            return user
        case _:
            return None


__all__ = ("AuthSession",)
