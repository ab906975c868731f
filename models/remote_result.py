"""
RemoteResult — the single outcome shape for every edge function call.

A result is either a success carrying data, or a failure carrying an
error string. ``status`` is optional HTTP metadata on either side.
"""

from typing import Any, Optional

from pydantic import BaseModel, model_validator


class RemoteResult(BaseModel):
    """Normalized outcome of a remote operation."""

    success: bool
    data: Any = None
    error: Optional[str] = None
    status: Optional[int] = None

    @model_validator(mode="after")
    def check_outcome(self):
        if self.success and self.error is not None:
            raise ValueError("A successful result cannot carry an error")
        if not self.success and not self.error:
            raise ValueError("A failed result must carry an error message")
        return self

    @classmethod
    def ok(cls, data: Any = None, status: Optional[int] = None) -> "RemoteResult":
        return cls(success=True, data=data, status=status)

    @classmethod
    def fail(cls, error: str, status: Optional[int] = None) -> "RemoteResult":
        return cls(success=False, error=error or "Unknown error occurred", status=status)

    def field(self, key: str) -> Any:
        """Return ``data[key]`` when data is a mapping, else None."""
        if isinstance(self.data, dict):
            return self.data.get(key)
        return None

    def unwrap(self) -> Any:
        """Return the data, or raise EdgeFunctionError for a failure."""
        if self.success:
            return self.data
        # Imported here so models stay importable without the services package.
        from services.edge_function_errors import EdgeFunctionResponseError
        raise EdgeFunctionResponseError(self.error, status=self.status)
