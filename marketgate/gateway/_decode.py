"""
Typed decoding of gateway results.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from kungfu import Error, Ok, Result

from marketgate._types import Body
from marketgate.errors import ApiError, ApiErrors


def expect[T](result: Result[Body, ApiError], parse: Callable[[Any], T]) -> Result[T, ApiError]:
    """
    Parse an Ok body into T. A body of the wrong shape is a SERVER error.

    Example:
        expect(await gw.call("/me/", requires_auth=True), UserProfile.from_json)
    """
    match result:
        case Ok(body):
            try:
                return Ok(parse(body))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                return Error(ApiErrors.server("Unexpected response shape", details=str(e)))
        case Error(e):
            return Error(e)


def expect_empty(result: Result[Body, ApiError]) -> Result[None, ApiError]:
    """For DELETE-style calls: any successful body means done."""
    match result:
        case Ok(_):
            return Ok(None)
        case Error(e):
            return Error(e)


__all__ = ("expect", "expect_empty")
