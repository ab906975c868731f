"""
Shared pytest fixtures for the encounter client test suite.

Fake HTTP objects stand in for aiohttp so the gateway and normalizer
can be tested without a network; ManualScheduler replaces the asyncio
timer so debounce behaviour can be stepped deterministically.
"""

import asyncio
import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from models.remote_result import RemoteResult
from tools.scheduler import DelayedTask


# ---------------------------------------------------------------------------
# HTTP fakes
# ---------------------------------------------------------------------------

class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse."""

    def __init__(self, status=200, body="", content_type="application/json",
                 reason="OK", text_error=None):
        self.status = status
        self.reason = reason
        self.headers = {"Content-Type": content_type} if content_type else {}
        if not isinstance(body, str):
            body = json.dumps(body)
        self._body = body
        self._text_error = text_error

    async def text(self):
        if self._text_error is not None:
            raise self._text_error
        return self._body


class _FakeRequest:
    def __init__(self, response=None, error=None):
        self._response = response
        self._error = error

    async def __aenter__(self):
        if self._error is not None:
            raise self._error
        return self._response

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Records POSTs and answers each with the configured response or error.

    Usage:
        session = FakeSession(FakeResponse(200, {"ok": True}))
        client = EdgeFunctionClient(base_url="https://fn.test", session=session)
    """

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(200, {})
        self.error = error
        self.calls = []
        self.closed = False

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        return _FakeRequest(self.response, self.error)

    async def close(self):
        self.closed = True


# ---------------------------------------------------------------------------
# Virtual clock
# ---------------------------------------------------------------------------

class ManualTask(DelayedTask):
    def __init__(self, due, callback):
        super().__init__()
        self.due = due
        self.callback = callback


class ManualScheduler:
    """Scheduler driven by ``await advance(seconds)`` instead of wall time."""

    def __init__(self):
        self.now = 0.0
        self.tasks = []

    def schedule(self, delay, callback):
        task = ManualTask(self.now + delay, callback)
        self.tasks.append(task)
        return task

    @property
    def pending(self):
        return [t for t in self.tasks if not t.done]

    async def advance(self, seconds, wait=True):
        """Move the clock and start every due callback.

        With ``wait=False`` the callbacks run as tasks and are returned
        unawaited, so a test can interleave other work with them.
        """
        self.now += seconds
        due = sorted((t for t in self.pending if t.due <= self.now), key=lambda t: t.due)
        started = []
        for task in due:
            task._done = True
            started.append(asyncio.ensure_future(task.callback()))
        if wait and started:
            await asyncio.gather(*started)
        return started


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def mock_service():
    """MagicMock NotionService whose fetches succeed with empty lists."""
    service = MagicMock()
    service.fetch_environments = AsyncMock(return_value=RemoteResult.ok({"environments": []}))
    service.fetch_campaigns = AsyncMock(return_value=RemoteResult.ok({"campaigns": []}))
    service.fetch_sessions = AsyncMock(return_value=RemoteResult.ok({"sessions": []}))
    service.generate_encounter = AsyncMock(return_value=RemoteResult.ok({"encounter": {}}))
    return service


@pytest.fixture
def mock_client():
    """MagicMock EdgeFunctionClient whose invoke() succeeds with ``{}``."""
    client = MagicMock()
    client.invoke = AsyncMock(return_value=RemoteResult.ok({}))
    return client
