"""
Edge Function Client — Gateway to the serverless functions (Async)

Every backend operation (fetch-environments, generate-encounter, ...)
is a named function reached with a JSON POST:

  Client  --(POST {base}/{name}, JSON)-->  Edge Function  -->  Notion

Requires:
  - EDGE_FUNCTIONS_URL: Base URL of the functions host
  - SUPABASE_ANON_KEY: Bearer credential sent with every call
  - EDGE_FUNCTION_TIMEOUT: Seconds before a call is abandoned (default 30)

invoke() never raises. Every outcome, including transport failures,
comes back as a RemoteResult. There is no retry here; callers retry.
"""

import os
import time
import asyncio
import logging
from typing import Optional, Dict, Any

import aiohttp

from models.remote_result import RemoteResult
from services.edge_function_errors import (
    EdgeFunctionError,
    EdgeFunctionConfigError,
    EdgeFunctionConnectionError,
    EdgeFunctionTimeoutError,
)
from services.response_normalizer import normalize_response

logger = logging.getLogger('EdgeFunctionClient')


class EdgeFunctionClient:
    """Async gateway for edge function calls.

    Usage:
        client = EdgeFunctionClient()
        await client.connect()      # creates the aiohttp session
        result = await client.invoke("fetch-environments")
        await client.close()

    or ``async with EdgeFunctionClient() as client: ...``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = (base_url or os.getenv('EDGE_FUNCTIONS_URL') or '').rstrip('/')
        self.api_key = api_key if api_key is not None else os.getenv('SUPABASE_ANON_KEY', '')
        if timeout is None:
            timeout = float(os.getenv('EDGE_FUNCTION_TIMEOUT', '30'))
        self.timeout = timeout
        self._session = session

        if not self.base_url:
            logger.warning("EDGE_FUNCTIONS_URL not set — every call will fail.")

    async def __aenter__(self) -> "EdgeFunctionClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Create the aiohttp session if there is none."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            logger.info(f"Edge function session opened for {self.base_url or '<unset>'}")

    async def close(self) -> None:
        """Shut down the aiohttp session cleanly."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        logger.info("Edge function client closed.")

    # ------------------------------------------------------------------
    # Internal HTTP layer
    # ------------------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        return {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {self.api_key}',
            'apikey': self.api_key or '',
        }

    async def _raw_invoke(self, name: str, payload: Optional[Dict[str, Any]]) -> RemoteResult:
        """Execute a single POST (no retry). Raises EdgeFunctionError subclasses."""
        if not self.base_url:
            raise EdgeFunctionConfigError("EDGE_FUNCTIONS_URL is not configured")

        await self.connect()
        url = f"{self.base_url}/{name}"
        client_timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            async with self._session.post(url, headers=self._headers(), json=payload or {},
                                          timeout=client_timeout) as resp:
                return await normalize_response(resp)
        except aiohttp.ClientError as e:
            raise EdgeFunctionConnectionError(f"Network error: {e}") from e
        except asyncio.TimeoutError as e:
            raise EdgeFunctionTimeoutError(
                f"Request timed out after {self.timeout:g}s: {name}"
            ) from e

    async def invoke(self, name: str, payload: Optional[Dict[str, Any]] = None) -> RemoteResult:
        """Call edge function ``name`` once and return its normalized result."""
        started = time.monotonic()
        try:
            result = await self._raw_invoke(name, payload)
        except EdgeFunctionError as e:
            result = RemoteResult.fail(str(e), status=e.status)
        except Exception as e:
            logger.error(f"Unexpected error calling {name}: {e}", exc_info=True)
            result = RemoteResult.fail(str(e) or "Unknown error occurred")

        elapsed_ms = (time.monotonic() - started) * 1000
        if result.success:
            logger.info(f"{name} ok in {elapsed_ms:.0f}ms")
        else:
            logger.warning(f"{name} failed in {elapsed_ms:.0f}ms: {result.error}")
        return result
