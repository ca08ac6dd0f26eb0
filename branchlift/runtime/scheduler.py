"""In-process scheduler for deferred environment builds.

Each environment gets at most one pending task, keyed by its id.  Tasks are
ephemeral -- nothing is resumed after a restart -- and can be cancelled
individually (environment vanished on reload) or all at once (logout,
shutdown).
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


class BuildScheduler:
    """Registry of pending deferred callbacks keyed by environment id.

    ``wait_until_drained`` blocks until every scheduled callback has either
    run or been cancelled; the CLI uses it to wait for builds before exiting.
    """

    def __init__(self) -> None:
        self._tasks: dict[int, asyncio.Task[None]] = {}
        self._drain_event = asyncio.Event()
        self._drain_event.set()  # Starts "drained" (nothing scheduled).

    # -- Mutation --------------------------------------------------------------

    def schedule(self, key: int, delay: float, callback: Callable[[], Awaitable[None]]) -> None:
        """Run *callback* after *delay* seconds.  Replaces any task already under *key*."""
        self.cancel(key)
        task = asyncio.create_task(self._run(key, delay, callback), name=f"build-{key}")
        self._tasks[key] = task
        self._drain_event.clear()
        task.add_done_callback(partial(self._discard, key))
        logger.debug("Scheduler: build {} scheduled in {}s", key, delay)

    def cancel(self, key: int) -> bool:
        """Cancel the task under *key*.  Returns ``False`` if nothing was pending."""
        task = self._tasks.pop(key, None)
        if task is None:
            return False
        task.cancel()
        logger.debug("Scheduler: build {} cancelled", key)
        if not self._tasks:
            self._drain_event.set()
        return True

    def cancel_all(self) -> int:
        """Cancel every pending task.  Returns how many were cancelled."""
        count = 0
        for key in list(self._tasks):
            if self.cancel(key):
                count += 1
        return count

    # -- Query -----------------------------------------------------------------

    @property
    def pending_ids(self) -> list[int]:
        return sorted(self._tasks)

    @property
    def active_count(self) -> int:
        return len(self._tasks)

    def __contains__(self, key: object) -> bool:
        return key in self._tasks

    # -- Lifecycle -------------------------------------------------------------

    async def wait_until_drained(self, timeout: float | None = None) -> bool:
        """Wait until no task is pending.

        Returns ``True`` once drained, ``False`` if *timeout* expired first.
        """
        if not self._tasks:
            return True
        try:
            await asyncio.wait_for(self._drain_event.wait(), timeout=timeout)
        except TimeoutError:
            logger.warning("Scheduler: drain timed out after {}s with {} builds pending", timeout, len(self._tasks))
            return False
        else:
            return True

    # -- Internals -------------------------------------------------------------

    @staticmethod
    async def _run(key: int, delay: float, callback: Callable[[], Awaitable[None]]) -> None:
        await asyncio.sleep(delay)
        try:
            await callback()
        except Exception:
            logger.exception("Scheduler: build {} callback failed", key)

    def _discard(self, key: int, task: asyncio.Task[None]) -> None:
        # A rescheduled key may already point at a newer task.
        if self._tasks.get(key) is task:
            del self._tasks[key]
        if not self._tasks:
            self._drain_event.set()
