"""
ResourceLoader — async loading state for one resource list.

Pure Python + asyncio. No UI imports. The owner (a view, a CLI, a test)
reads ``loader.state`` and subscribes to changes.

Lifecycle:
  mount()            → initial load, exactly once per loader
  set_search_query() → debounced reload (last query wins)
  retry()            → reload with the current query and key
  unmount()          → closes the liveness scope; later writes are dropped

Every load carries the scope it was issued under and a generation
number. A result commits only if the scope is still alive and no newer
load has been issued since, so a slow response can never overwrite a
fresher one.
"""

import logging
from typing import List, Optional, Any, Callable, Sequence

from pydantic import BaseModel, ValidationError

from models.remote_result import RemoteResult
from models.resource_state import ResourceState
from models.notion import Environment, Campaign, Session, DEFAULT_ENVIRONMENTS
from tools.scheduler import AsyncioScheduler, DelayedTask

logger = logging.getLogger("ResourceLoader")

DEFAULT_DEBOUNCE_SECONDS = 0.3

Listener = Callable[[ResourceState], None]


class LoadScope:
    """Liveness token shared by every load a loader issues."""

    def __init__(self):
        self._alive = True

    @property
    def alive(self) -> bool:
        return self._alive

    def close(self) -> None:
        self._alive = False


class ResourceLoader:
    """Base loader. Subclasses provide ``_fetch`` and may override ``_apply``.

    Args:
        service: NotionService (or anything with the same fetch methods).
        scheduler: Delayed-task scheduler used for search debouncing.
        debounce_seconds: Quiet period before a search reload fires.
    """

    resource_name = "items"  # key of the list inside the response data
    item_model: Optional[type] = None

    def __init__(self, service, scheduler=None, debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS):
        self.service = service
        self.scheduler = scheduler or AsyncioScheduler()
        self.debounce_seconds = debounce_seconds
        self.state = ResourceState()
        self._scope = LoadScope()
        self._generation = 0
        self._pending: Optional[DelayedTask] = None
        self._mounted = False
        self._has_loaded = False
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def is_mounted(self) -> bool:
        return self._mounted and self._scope.alive

    @property
    def status(self) -> str:
        """One of idle, loading, loaded, errored."""
        if self.state.is_loading:
            return "loading"
        if self.state.error:
            return "errored"
        if self._has_loaded:
            return "loaded"
        return "idle"

    @property
    def items(self) -> List[Any]:
        return self.state.items

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(state)`` after every state write. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, scope: LoadScope, generation: Optional[int] = None, **changes) -> bool:
        """Apply ``changes`` to state unless the scope closed or the load went stale."""
        if not scope.alive:
            logger.debug(f"[{self.resource_name}] dropped write after unmount: {sorted(changes)}")
            return False
        if generation is not None and generation != self._generation:
            logger.debug(f"[{self.resource_name}] dropped stale write (gen {generation} < {self._generation})")
            return False
        for key, value in changes.items():
            setattr(self.state, key, value)
        for listener in list(self._listeners):
            try:
                listener(self.state)
            except Exception as e:
                logger.error(f"[{self.resource_name}] listener error: {e}", exc_info=True)
        return True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def mount(self) -> None:
        """Run the initial load. Further calls are no-ops."""
        if self._mounted:
            return
        if not self._scope.alive:
            logger.warning(f"[{self.resource_name}] mount() after unmount ignored")
            return
        self._mounted = True
        await self._load(self.state.search_query)

    def unmount(self) -> None:
        """Tear down: cancel the pending search and drop every later write."""
        self._cancel_pending()
        self._scope.close()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def set_search_query(self, query: str) -> None:
        """Store the query and (re)schedule a debounced reload.

        An empty query cancels any pending reload without loading.
        """
        if not self._commit(self._scope, search_query=query):
            return
        self._cancel_pending()
        if not query:
            return
        self._pending = self.scheduler.schedule(
            self.debounce_seconds, lambda: self._load(query)
        )

    async def retry(self) -> None:
        """Reload with the current query. The query is kept."""
        self._cancel_pending()
        await self._load(self.state.search_query)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def _load(self, search_query: str) -> None:
        scope = self._scope
        if not scope.alive:
            return
        self._generation += 1
        generation = self._generation
        self._commit(scope, generation, is_loading=True, error=None)

        try:
            result = await self._fetch(search_query)
        except Exception as e:
            logger.error(f"[{self.resource_name}] fetch raised: {e}", exc_info=True)
            result = RemoteResult.fail(str(e) or f"Failed to load {self.resource_name}")

        changes = self._apply(result)
        changes["is_loading"] = False
        if self._commit(scope, generation, **changes):
            self._has_loaded = True
            logger.info(
                f"[{self.resource_name}] loaded {len(self.state.items)} item(s)"
                + (f" (error: {self.state.error})" if self.state.error else "")
            )

    async def _fetch(self, search_query: str) -> RemoteResult:
        raise NotImplementedError

    def _apply(self, result: RemoteResult) -> dict:
        """State changes for a finished load. Failures clear the list."""
        if result.success:
            return {"items": self._parse_items(result.field(self.resource_name)), "error": None}
        return {"items": [], "error": result.error}

    def _parse_items(self, raw: Any) -> List[Any]:
        if not isinstance(raw, list):
            return []
        if self.item_model is None:
            return list(raw)
        items = []
        for entry in raw:
            if isinstance(entry, BaseModel):
                items.append(entry)
                continue
            try:
                items.append(self.item_model.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"[{self.resource_name}] skipping invalid entry: {e.error_count()} error(s)")
        return items


class EnvironmentsLoader(ResourceLoader):
    """Environments with a fail-soft default set.

    A failed or empty fetch never leaves the list empty: the injected
    defaults are used and ``is_using_defaults`` is set. Only a failure
    records an error.
    """

    resource_name = "environments"
    item_model = Environment

    def __init__(self, service, defaults: Sequence[Environment] = DEFAULT_ENVIRONMENTS, **kwargs):
        super().__init__(service, **kwargs)
        self.defaults = list(defaults)

    async def _fetch(self, search_query: str) -> RemoteResult:
        return await self.service.fetch_environments()

    def _fresh_defaults(self) -> List[Environment]:
        return [env.model_copy(deep=True) for env in self.defaults]

    def _apply(self, result: RemoteResult) -> dict:
        if result.success:
            items = self._parse_items(result.field(self.resource_name))
            if items:
                return {"items": items, "error": None, "is_using_defaults": False}
            logger.info("No environments returned, using defaults")
            return {"items": self._fresh_defaults(), "error": None, "is_using_defaults": True}
        logger.info(f"Environments unavailable ({result.error}), using defaults")
        return {"items": self._fresh_defaults(), "error": result.error, "is_using_defaults": True}

    @property
    def environments(self) -> List[Environment]:
        return self.state.items

    @property
    def environment_options(self) -> List[str]:
        """Names for a picker: "Any" first, then unique names alphabetically."""
        names = {env.name for env in self.state.items if env.name and env.name != "Any"}
        return ["Any"] + sorted(names, key=str.casefold)


class CampaignsLoader(ResourceLoader):
    """Campaigns, optionally restricted to active ones."""

    resource_name = "campaigns"
    item_model = Campaign

    def __init__(self, service, active_only: bool = False, **kwargs):
        super().__init__(service, **kwargs)
        self.active_only = active_only

    async def _fetch(self, search_query: str) -> RemoteResult:
        return await self.service.fetch_campaigns(search_query, self.active_only)


class SessionsLoader(ResourceLoader):
    """Sessions keyed by campaign.

    Changing the campaign resets the query and reloads at once; query
    changes under a stable campaign go through the debounce.
    """

    resource_name = "sessions"
    item_model = Session

    def __init__(self, service, campaign_id: Optional[str] = None, **kwargs):
        super().__init__(service, **kwargs)
        self.campaign_id = campaign_id

    async def _fetch(self, search_query: str) -> RemoteResult:
        return await self.service.fetch_sessions(search_query, self.campaign_id)

    async def set_campaign(self, campaign_id: Optional[str]) -> None:
        """Switch campaign: clear the query and load immediately. Same id is a no-op."""
        if campaign_id == self.campaign_id or not self._scope.alive:
            return
        logger.info(f"Campaign changed {self.campaign_id!r} -> {campaign_id!r}")
        self.campaign_id = campaign_id
        self._cancel_pending()
        self._commit(self._scope, search_query="")
        await self._load("")
