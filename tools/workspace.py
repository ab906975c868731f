"""
TabWorkspace — the open documents and which one is active.

Pure Python, single writer (the UI loop). Tabs keep insertion order,
which is also display order. Closing the active tab activates the tab
just before it, or the new first tab if it was first.
"""

import logging
from typing import List, Optional

from models.tabs import TabDocument

logger = logging.getLogger("TabWorkspace")


class TabWorkspace:
    """Ordered collection of TabDocuments with one active selection."""

    def __init__(self):
        self._tabs: List[TabDocument] = []
        self._active_id: Optional[str] = None

    def __len__(self) -> int:
        return len(self._tabs)

    @property
    def active_tab_id(self) -> Optional[str]:
        return self._active_id

    @property
    def active_tab(self) -> Optional[TabDocument]:
        return self.get(self._active_id) if self._active_id else None

    def list(self) -> List[TabDocument]:
        """Tabs in display order (a copy; mutate through the workspace)."""
        return list(self._tabs)

    def get(self, tab_id: str) -> Optional[TabDocument]:
        for tab in self._tabs:
            if tab.id == tab_id:
                return tab
        return None

    def _index(self, tab_id: str) -> int:
        for i, tab in enumerate(self._tabs):
            if tab.id == tab_id:
                return i
        return -1

    def add_tab(self, doc: TabDocument) -> TabDocument:
        """Append ``doc`` and make it active. Raises ValueError on a duplicate id."""
        if self._index(doc.id) != -1:
            raise ValueError(f"Tab id already open: {doc.id}")
        self._tabs.append(doc)
        self._active_id = doc.id
        logger.debug(f"Opened tab {doc.id} ({doc.type}: {doc.title})")
        return doc

    def new_empty_tab(self, title: str = "New Tab") -> TabDocument:
        return self.add_tab(TabDocument(type="empty", title=title))

    def close_tab(self, tab_id: str) -> bool:
        """Remove a tab. Returns False if no such tab is open."""
        index = self._index(tab_id)
        if index == -1:
            return False

        self._tabs.pop(index)
        if self._active_id == tab_id:
            if not self._tabs:
                self._active_id = None
            else:
                self._active_id = self._tabs[max(index - 1, 0)].id
        logger.debug(f"Closed tab {tab_id}; active is now {self._active_id}")
        return True

    def set_active(self, tab_id: str) -> bool:
        """Select a tab. Unknown ids leave the selection unchanged."""
        if self._index(tab_id) == -1:
            return False
        self._active_id = tab_id
        return True

    def update_tab(self, tab_id: str, **changes) -> Optional[TabDocument]:
        """Replace fields on an open tab. The id cannot change."""
        index = self._index(tab_id)
        if index == -1:
            return None
        changes.pop("id", None)
        updated = TabDocument.model_validate({**self._tabs[index].model_dump(), **changes})
        self._tabs[index] = updated
        return updated
