"""Tracked background tasks for fire-and-forget UI work."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine, Optional


class BackgroundTasks:
    """Keeps strong references to spawned tasks so they can be awaited later.

    Replay handlers and controller actions start network calls without
    awaiting them; this set lets tests and shutdown code wait for them.
    """

    def __init__(self, name: str = "tasks") -> None:
        self.name = name
        self._pending: set[asyncio.Task] = set()
        self._logger = logging.getLogger(__name__)

    def __len__(self) -> int:
        return len(self._pending)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: Optional[str] = None) -> asyncio.Task:
        """Schedule a coroutine on the running loop and track it."""
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def wait_until_idle(self, timeout: float = 60.0) -> bool:
        """Wait for all pending tasks to complete.

        Args:
            timeout: Maximum time to wait in seconds

        Returns:
            True if all tasks completed, False if timeout reached
        """
        if not self._pending:
            return True

        self._logger.debug(f"{self.name}: waiting for {len(self._pending)} pending tasks")

        loop = asyncio.get_running_loop()
        start_time = loop.time()
        while self._pending:
            remaining = timeout - (loop.time() - start_time)
            if remaining <= 0:
                self._logger.warning(f"{self.name}: timeout reached with {len(self._pending)} tasks pending")
                return False

            # Tasks may spawn new tasks, so we loop
            await asyncio.wait(list(self._pending), timeout=remaining)
            await asyncio.sleep(0)

        return True

    def cancel_all(self) -> None:
        """Cancel every pending task."""
        for task in list(self._pending):
            task.cancel()
