"""
Encounter tabs — run a generation into a workspace tab.

The tab opens immediately with a placeholder title, then receives the
encounter (or the error), the elapsed time and a short log.
"""

import time
import logging
from datetime import datetime
from typing import List, Dict, Any, Union

from models.notion import EncounterParams
from models.tabs import TabDocument
from tools.workspace import TabWorkspace

logger = logging.getLogger("EncounterTabs")


def _log_line(message: str) -> str:
    return f"[{datetime.now().strftime('%H:%M:%S')}] {message}"


async def generate_encounter_tab(
    workspace: TabWorkspace,
    service,
    params: Union[EncounterParams, Dict[str, Any]],
) -> TabDocument:
    """Open an encounter tab and fill it from generate-encounter.

    Never raises for a backend failure: the error lands on the tab.
    """
    if not isinstance(params, EncounterParams):
        params = EncounterParams.model_validate(params)

    title = f"{params.environment} Encounter" if params.environment != "Any" else "Encounter"
    tab = workspace.add_tab(TabDocument(type="encounter", title=title))
    logs: List[str] = [_log_line("Generating encounter...")]

    started = time.monotonic()
    result = await service.generate_encounter(params)
    elapsed = time.monotonic() - started

    if result.success:
        logs.append(_log_line(f"Generation complete in {elapsed:.2f}s"))
        encounter = result.data
        if isinstance(encounter, dict) and "encounter" in encounter:
            encounter = encounter["encounter"]
        updated = workspace.update_tab(
            tab.id,
            data={"encounter": encounter, "monster_card_tabs": {}},
            generation_time=elapsed,
            logs=logs,
            error=None,
        )
    else:
        logger.warning(f"Encounter generation failed: {result.error}")
        logs.append(_log_line(f"Generation failed: {result.error}"))
        updated = workspace.update_tab(
            tab.id,
            generation_time=elapsed,
            logs=logs,
            error=result.error,
        )

    # The tab may have been closed while the call was in flight.
    return updated or tab


def open_magic_items_tab(workspace: TabWorkspace, items: List[Any], title: str = "Magic Items") -> TabDocument:
    """Open a magic-item summary tab."""
    return workspace.add_tab(TabDocument(type="magic-items", title=title, data={"items": list(items)}))
