"""
Scheduler — cancellable delayed tasks on the asyncio loop.

Loaders debounce through this interface rather than raw timer handles,
so tests can swap in a manual clock and step time deterministically.
"""

import asyncio
import logging
from typing import Optional, Callable, Awaitable

logger = logging.getLogger("Scheduler")

Callback = Callable[[], Awaitable[None]]


class DelayedTask:
    """Handle for a scheduled callback. ``cancel()`` is safe to call twice."""

    def __init__(self):
        self._cancelled = False
        self._done = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._done or self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class AsyncioDelayedTask(DelayedTask):
    """A DelayedTask backed by an asyncio.Task sleeping for the delay."""

    def __init__(self, delay: float, callback: Callback):
        super().__init__()
        self.delay = delay
        self._started = False
        self._callback = callback
        self._task: Optional[asyncio.Task] = asyncio.get_running_loop().create_task(self._run())

    async def _run(self):
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            return  # cancel() was called
        if self._cancelled:
            return
        self._started = True
        try:
            await self._callback()
        except Exception as e:
            logger.error(f"Delayed callback error: {e}", exc_info=True)
        finally:
            self._done = True

    def cancel(self) -> None:
        super().cancel()
        # A callback that already started runs to completion.
        if self._task and not self._task.done() and not self._started:
            self._task.cancel()


class AsyncioScheduler:
    """Runs callbacks after a delay on the running event loop.

    Must be used from inside a running loop.
    """

    def schedule(self, delay: float, callback: Callback) -> DelayedTask:
        return AsyncioDelayedTask(delay, callback)
