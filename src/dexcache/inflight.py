"""In-flight request registry.

Tracks at most one pending asyncio task per logical key so that concurrent
callers asking for the same thing share a single network round-trip. Keys
are namespaced by the caller (``entry:25``, ``url:<locator>``,
``index:1010``) so unrelated operations never collide.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

R = TypeVar("R")


def _mark_retrieved(task: asyncio.Task[Any]) -> None:
    # Waiters may all have been cancelled; the client has already logged the failure
    if not task.cancelled():
        task.exception()


class InFlightRegistry:
    """Registry of pending operations, keyed by logical key."""

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Task[Any]] = {}

    async def begin_or_join(self, key: str, factory: Callable[[], Awaitable[R]]) -> R:
        """Start the operation for ``key`` or join the one already running.

        ``factory`` is only invoked when nothing is registered for ``key``.
        Every caller observes the same value or the same exception. The
        registration is removed inside the task itself, on every exit path,
        before any waiter resumes.
        """
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run(key, factory))
            self._pending[key] = task
            task.add_done_callback(_mark_retrieved)
        # Cancelling one waiter must not cancel the operation the others share
        return await asyncio.shield(task)

    async def _run(self, key: str, factory: Callable[[], Awaitable[R]]) -> R:
        try:
            return await factory()
        finally:
            # clear() may have dropped us and a newer task may own the key by now
            if self._pending.get(key) is asyncio.current_task():
                del self._pending[key]

    def is_pending(self, key: str) -> bool:
        return key in self._pending

    def pending_count(self) -> int:
        return len(self._pending)

    def clear(self) -> None:
        """Forget every registration. Running tasks are left to finish."""
        self._pending.clear()
