"""
Transport — JSON over HTTP with a hard deadline.

    from marketgate import transport as T

    http = T.HttpTransport(settings)
    body = await http.exchange("GET", "/me/", headers={"Authorization": "Bearer ..."})
"""

from marketgate.transport._deadline import (
    Deadline,
    deadline,
    within,
)
from marketgate.transport._client import (
    HttpTransport,
    decode,
)

__all__ = (
    "Deadline",
    "deadline",
    "within",
    "HttpTransport",
    "decode",
)
