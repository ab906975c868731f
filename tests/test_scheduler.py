"""
Tests for tools/scheduler.py — delayed tasks on the real event loop.

Uses short delays (0.05-0.2s). All tests are async.
"""

import asyncio

from tools.scheduler import AsyncioScheduler


class TestAsyncioScheduler:

    def test_callback_runs_after_delay(self):
        fired = []

        async def callback():
            fired.append(True)

        async def run():
            task = AsyncioScheduler().schedule(0.05, callback)
            assert fired == []
            assert task.done is False
            await asyncio.sleep(0.2)
            assert fired == [True]
            assert task.done is True

        asyncio.run(run())

    def test_cancel_before_delay(self):
        fired = []

        async def callback():
            fired.append(True)

        async def run():
            task = AsyncioScheduler().schedule(0.05, callback)
            task.cancel()
            task.cancel()  # second cancel is harmless
            await asyncio.sleep(0.2)
            assert fired == []
            assert task.cancelled is True

        asyncio.run(run())

    def test_cancel_does_not_interrupt_started_callback(self):
        finished = []

        async def callback():
            await asyncio.sleep(0.1)
            finished.append(True)

        async def run():
            task = AsyncioScheduler().schedule(0.01, callback)
            await asyncio.sleep(0.05)  # callback is now running
            task.cancel()
            await asyncio.sleep(0.2)
            assert finished == [True]

        asyncio.run(run())

    def test_callback_error_is_contained(self):
        async def callback():
            raise RuntimeError("handler blew up")

        async def run():
            task = AsyncioScheduler().schedule(0.01, callback)
            await asyncio.sleep(0.1)
            assert task.done is True

        asyncio.run(run())
