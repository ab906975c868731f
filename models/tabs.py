"""
Tab documents — the open results in the workspace.
"""

import time
from typing import List, Optional, Dict, Any, Literal
from uuid import uuid4

from pydantic import BaseModel, Field

TabType = Literal["encounter", "magic-items", "empty"]


class TabDocument(BaseModel):
    """One open document: an encounter result, a magic-item summary, or empty."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    type: TabType = "empty"
    title: str = "New Tab"
    data: Dict[str, Any] = Field(default_factory=dict)
    created_at: float = Field(default_factory=time.time)
    error: Optional[str] = None
    generation_time: Optional[float] = None  # seconds
    logs: List[str] = Field(default_factory=list)
