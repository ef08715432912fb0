"""
Deadline — one cancellable-operation abstraction for every exchange.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from kungfu import Error, LazyCoroResult, Result

from marketgate.errors import ApiError, timed_out


@dataclass(frozen=True, slots=True)
class Deadline:
    """Time budget for a single exchange."""

    duration: timedelta

    @property
    def seconds(self) -> float:
        return self.duration.total_seconds()


def deadline(seconds: float | None = None, duration: timedelta | None = None) -> Deadline:
    """
    Build a Deadline.

    Example:
        deadline(seconds=15)
        deadline(duration=timedelta(milliseconds=500))
    """
    if duration is not None:
        return Deadline(duration)
    if seconds is not None:
        return Deadline(timedelta(seconds=seconds))
    raise ValueError("Must provide seconds or duration")


def within[T](
    operation: Callable[[], Awaitable[Result[T, ApiError]]],
    limit: Deadline,
) -> LazyCoroResult[T, ApiError]:
    """
    Run operation under limit.

    On expiry the in-flight operation is cancelled (not left running) and
    the result is a TIMEOUT error.
    """

    async def run() -> Result[T, ApiError]:
        try:
            async with asyncio.timeout(limit.seconds):
                return await operation()
        except TimeoutError:
            return Error(timed_out(limit.seconds))

    return LazyCoroResult(run)


__all__ = ("Deadline", "deadline", "within")
