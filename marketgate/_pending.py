"""
Pending — attach concurrent callers to one in-flight operation.

The event loop is single-threaded, so nothing here guards memory. The hazard
is redundant work: two callers hitting 401 at once must not start two
refresh exchanges. The first caller starts a task, later callers with the
same key await the same task, and the handle is released when it finishes.

Callers await through asyncio.shield: a caller whose own deadline expires
is cancelled alone, the shared operation keeps running for the others.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine, Hashable
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class Pending[T]:
    """
    Shared pending-operation handle.

    A caller whose key differs from the in-flight one starts its own task;
    the handle then tracks the newest task.

    Example:
        refreshing = Pending[Result[Credential, ApiError]]("refresh")

        async def refresh() -> Result[Credential, ApiError]:
            return await refreshing.join(do_refresh, key=epoch)
    """

    __slots__ = ("_name", "_task", "_key")

    def __init__(self, name: str) -> None:
        self._name = name
        self._task: asyncio.Task[T] | None = None
        self._key: Hashable = None

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def key(self) -> Hashable:
        """Key of the in-flight operation (None when idle)."""
        return self._key if self.in_flight else None

    async def join(self, start: Callable[[], Coroutine[Any, Any, T]], key: Hashable = None) -> T:
        """Start the operation, or attach to the one already running under key."""
        task = self._task
        if task is None or task.done() or self._key != key:
            task = asyncio.get_running_loop().create_task(start(), name=f"marketgate:{self._name}")
            self._task = task
            self._key = key
            task.add_done_callback(self._release)
            logger.debug("pending.started", operation=self._name)
        else:
            logger.debug("pending.joined", operation=self._name)
        return await asyncio.shield(task)

    def _release(self, task: asyncio.Task[T]) -> None:
        # Every awaiting caller may have been cancelled; mark the outcome retrieved.
        if not task.cancelled():
            task.exception()
        if self._task is task:
            self._task = None
            self._key = None


__all__ = ("Pending",)
