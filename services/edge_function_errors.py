"""
Edge Function Error Types — Structured exception hierarchy.

The gateway raises these internally and converts them into failed
RemoteResults at its boundary, so callers see strings, not exceptions.
"""

from typing import Optional


class EdgeFunctionError(Exception):
    """Base class for all edge function errors."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class EdgeFunctionConfigError(EdgeFunctionError):
    """Base URL or credentials missing. NOT retryable without config change."""
    pass


class EdgeFunctionConnectionError(EdgeFunctionError):
    """Functions host unreachable or the connection dropped. Retryable."""
    pass


class EdgeFunctionTimeoutError(EdgeFunctionError):
    """No response within the configured timeout. Retryable."""
    pass


class EdgeFunctionResponseError(EdgeFunctionError):
    """The function answered with a failure (non-2xx or malformed body)."""
    pass
