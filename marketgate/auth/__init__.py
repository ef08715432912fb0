"""
Auth — credential pair, identity proof and the session state machine.

    from marketgate import auth as A

    tokens = A.TokenStore(storage)
    session = A.AuthSession(transport, tokens, identity=A.static_identity(init_data))

    await session.login()
    await session.refresh()     # concurrent callers share one exchange
"""

from marketgate.auth._types import (
    Credential,
    IdentitySource,
    UserProfile,
    Unauthenticated,
    Authenticating,
    Authenticated,
    Refreshing,
    Failed,
    SessionState,
    state_name,
)
from marketgate.auth._tokens import TokenStore
from marketgate.auth._identity import no_identity, static_identity
from marketgate.auth._session import AuthSession

__all__ = (
    # Types
    "Credential",
    "IdentitySource",
    "UserProfile",
    # States
    "Unauthenticated",
    "Authenticating",
    "Authenticated",
    "Refreshing",
    "Failed",
    "SessionState",
    "state_name",
    # Components
    "TokenStore",
    "AuthSession",
    "no_identity",
    "static_identity",
)
