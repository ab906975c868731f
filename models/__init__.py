"""
Pydantic v2 data models — the contract between edge functions and the
client layer.

Every record an edge function returns is validated through these
models before it reaches loader state.
"""

from models.remote_result import RemoteResult
from models.resource_state import ResourceState
from models.notion import (
    Environment,
    DEFAULT_ENVIRONMENTS,
    Campaign,
    Session,
    CreatureFilters,
    EncounterParams,
)
from models.tabs import TabDocument, TabType

__all__ = [
    "RemoteResult",
    "ResourceState",
    "Environment",
    "DEFAULT_ENVIRONMENTS",
    "Campaign",
    "Session",
    "CreatureFilters",
    "EncounterParams",
    "TabDocument",
    "TabType",
]
