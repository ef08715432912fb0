"""
Gateway — authenticated calls with transparent 401 recovery.

    from marketgate import gateway as G

    gw = G.RequestGateway(transport, session, G.injection_for(settings, session))
    profile = G.expect(await gw.call("/me/", requires_auth=True), UserProfile.from_json)
"""

from marketgate.gateway._injection import (
    Injection,
    BearerInjection,
    InitDataInjection,
    injection_for,
)
from marketgate.gateway._gateway import RequestGateway
from marketgate.gateway._decode import expect, expect_empty

__all__ = (
    "Injection",
    "BearerInjection",
    "InitDataInjection",
    "injection_for",
    "RequestGateway",
    "expect",
    "expect_empty",
)
