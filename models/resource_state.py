"""
Loader state — what a UI renders for one resource list.
"""

from typing import List, Optional, Any
from pydantic import BaseModel


class ResourceState(BaseModel):
    """Items, loading flag, last error and search query for a resource."""

    items: List[Any] = []
    is_loading: bool = False
    error: Optional[str] = None
    search_query: str = ""
    is_using_defaults: bool = False
