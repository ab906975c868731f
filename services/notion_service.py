"""
NotionService — typed facade over the Notion-backed edge functions.

No shared state: each method is one gateway call that returns a
RemoteResult. If the wrapped client raises anyway, the exception is
converted here, with an operation-specific message when it has none.
"""

import logging
from typing import Optional, Dict, Any, Union

from models.remote_result import RemoteResult
from models.notion import CreatureFilters, EncounterParams

logger = logging.getLogger("NotionService")

Filters = Union[CreatureFilters, Dict[str, Any], None]


def _payload(filters: Filters) -> Optional[Dict[str, Any]]:
    if filters is None:
        return None
    if hasattr(filters, "to_payload"):
        return filters.to_payload()
    return {k: v for k, v in filters.items() if v is not None}


class NotionService:
    """Wraps an EdgeFunctionClient (anything with ``async invoke(name, payload)``)."""

    def __init__(self, client):
        self.client = client

    async def _call(self, name: str, payload: Optional[Dict[str, Any]], fallback: str) -> RemoteResult:
        try:
            return await self.client.invoke(name, payload)
        except Exception as e:
            logger.error(f"{name} raised instead of returning a result: {e}")
            return RemoteResult.fail(str(e) or fallback)

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    async def discover_databases(self) -> RemoteResult:
        return await self._call("discover-notion-databases", None, "Failed to discover databases")

    async def get_schema(self, database_id: str) -> RemoteResult:
        return await self._call("get-notion-schema", {"databaseId": database_id}, "Failed to get schema")

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    async def fetch_creatures(self, filters: Filters = None) -> RemoteResult:
        return await self._call("fetch-creatures", _payload(filters), "Failed to fetch creatures")

    async def fetch_environments(self) -> RemoteResult:
        return await self._call("fetch-environments", None, "Failed to fetch environments")

    async def fetch_sessions(self, search_query: str = "", campaign_id: Optional[str] = None) -> RemoteResult:
        payload = {"searchQuery": search_query, "campaignId": campaign_id}
        return await self._call("fetch-sessions", payload, "Failed to fetch sessions")

    async def fetch_campaigns(self, search_query: str = "", active_only: bool = False) -> RemoteResult:
        payload = {"searchQuery": search_query, "activeOnly": active_only}
        return await self._call("fetch-campaigns", payload, "Failed to fetch campaigns")

    async def fetch_magic_items(self, filters: Optional[Dict[str, Any]] = None) -> RemoteResult:
        return await self._call("fetch-magic-items", _payload(filters), "Failed to fetch magic items")

    # ------------------------------------------------------------------
    # Encounters
    # ------------------------------------------------------------------

    async def generate_encounter(self, params: Union[EncounterParams, Dict[str, Any]]) -> RemoteResult:
        if isinstance(params, EncounterParams):
            params = params.to_payload()
        logger.info(f"Generating encounter: {params}")
        return await self._call("generate-encounter", params, "Failed to generate encounter")

    async def save_encounter(self, encounter: Dict[str, Any]) -> RemoteResult:
        return await self._call("save-encounter", {"encounter": encounter}, "Failed to save encounter")

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def fix_alignments(self) -> RemoteResult:
        return await self._call("fix-alignments", None, "Failed to fix alignments")

    async def fix_creature_types(self) -> RemoteResult:
        return await self._call("fix-creature-types", None, "Failed to fix creature types")
