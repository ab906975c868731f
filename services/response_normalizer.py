"""
Response Normalizer — turns any HTTP outcome into a RemoteResult.

Handles four shapes: JSON success, JSON error payload, plain-text
response, and a body that cannot be read or parsed. The declared content
type is checked before parsing, and parsing failures are caught
separately, so a body that claims JSON but is not still resolves to a
failed result instead of raising.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from models.remote_result import RemoteResult

logger = logging.getLogger("ResponseNormalizer")

UNKNOWN_ERROR = "Unknown error occurred"


def _is_error_status(status: int) -> bool:
    return not 200 <= status < 300


def _content_type(response: Any) -> str:
    headers = getattr(response, "headers", None) or {}
    value = headers.get("Content-Type") or headers.get("content-type")
    if value is None:
        value = getattr(response, "content_type", "") or ""
    return value.lower()


async def normalize_response(response: Any) -> RemoteResult:
    """Normalize an HTTP response into ``{success, data, error, status}``.

    ``response`` needs ``status``, ``reason``, ``headers`` and an async
    ``text()``; an ``aiohttp.ClientResponse`` fits.
    """
    try:
        status = response.status

        if "application/json" not in _content_type(response):
            text = await response.text()
            if _is_error_status(status):
                return RemoteResult.fail(f"HTTP {status}: {text}", status=status)
            return RemoteResult.ok(text, status=status)

        body = json.loads(await response.text())

        if _is_error_status(status):
            message = None
            if isinstance(body, dict):
                message = body.get("error") or body.get("message")
            if not message:
                message = f"HTTP {status}: {getattr(response, 'reason', '') or ''}".rstrip()
            return RemoteResult.fail(str(message), status=status)

        return RemoteResult.ok(body, status=status)

    except Exception as e:
        logger.warning(f"Could not read response body: {e}")
        return RemoteResult.fail(str(e) or UNKNOWN_ERROR)


def extract_error_message(error: Any) -> str:
    """Best-effort human message from a string, exception, or error payload."""
    if isinstance(error, str):
        return error
    if isinstance(error, BaseException):
        return str(error) or UNKNOWN_ERROR
    if isinstance(error, dict):
        message = error.get("message") or error.get("error")
        if message:
            return str(message)
    return UNKNOWN_ERROR


@dataclass(frozen=True)
class ErrorCategory:
    """Coarse classification used to decide whether a retry makes sense."""

    type: str  # network | validation | business | system | unknown
    severity: str  # low | medium | high | critical
    retryable: bool


_CATEGORY_RULES = (
    (("fetch", "network", "timeout"), ErrorCategory("network", "medium", True)),
    (("validation", "invalid", "required"), ErrorCategory("validation", "low", False)),
    (("not found", "unauthorized", "forbidden"), ErrorCategory("business", "medium", False)),
    (("internal", "server", "database"), ErrorCategory("system", "high", True)),
)


def categorize_error(error: Any) -> ErrorCategory:
    """Classify an error by keywords in its message. First matching rule wins."""
    message = extract_error_message(error).lower()
    for keywords, category in _CATEGORY_RULES:
        if any(k in message for k in keywords):
            return category
    return ErrorCategory("unknown", "medium", False)
