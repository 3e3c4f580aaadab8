"""Per-room periodic tick tasks."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

TickCallback = Callable[[str], Awaitable[None]]


class RoomScheduler:
    """Owns at most one periodic asyncio task per room code.

    Stopping is idempotent and is the only way a loop is cancelled. A tick
    that is already executing is never interrupted mid-step because the step
    itself does not await.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task] = {}

    def start(self, code: str, interval: float, callback: TickCallback) -> None:
        """Begin ticking *code* every *interval* seconds, replacing any loop."""
        if self.is_running(code):
            logger.debug("Replacing tick loop for room %s.", code)
        self.stop(code)
        self._tasks[code] = asyncio.create_task(
            self._loop(code, interval, callback), name=f"room-{code}",
        )

    def stop(self, code: str) -> None:
        task = self._tasks.pop(code, None)
        if task is not None and not task.done():
            # Never cancel the task running this very call; its loop exits
            # on its own once it sees the entry is gone.
            if task is not asyncio.current_task():
                task.cancel()

    def is_running(self, code: str) -> bool:
        task = self._tasks.get(code)
        return task is not None and not task.done()

    async def _loop(
        self, code: str, interval: float, callback: TickCallback,
    ) -> None:
        me = asyncio.current_task()
        try:
            while self._tasks.get(code) is me:
                await asyncio.sleep(interval)
                if self._tasks.get(code) is not me:
                    break
                await callback(code)
        except asyncio.CancelledError:
            logger.debug("Tick loop cancelled for room %s.", code)
        except Exception:
            logger.exception("Tick loop error in room %s.", code)
            if self._tasks.get(code) is me:
                del self._tasks[code]

    async def stop_all(self) -> None:
        """Cancel every loop and wait for them to finish."""
        tasks = [t for t in self._tasks.values() if not t.done()]
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
