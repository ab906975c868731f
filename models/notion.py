"""
Notion content schemas — the records edge functions return and the
filter payloads they accept.

Wire keys are camelCase; Python attributes are snake_case. Payload
models serialize by alias and drop unset values.
"""

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator


class Environment(BaseModel):
    """A place encounters can happen in (Forest, Dungeon, ...)."""

    id: str
    name: str
    description: str = ""
    terrain_type: List[str] = []
    climate: str = ""

    model_config = {"extra": "allow"}

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v)


# Fallback set shown when the environments database is unreachable or empty.
DEFAULT_ENVIRONMENTS = (
    Environment(id="1", name="Forest"),
    Environment(id="2", name="Dungeon"),
    Environment(id="3", name="Mountains"),
    Environment(id="4", name="Desert"),
    Environment(id="5", name="Swamp"),
    Environment(id="6", name="City"),
    Environment(id="7", name="Ruins"),
    Environment(id="8", name="Cave"),
)


class Campaign(BaseModel):
    """Schema for a campaign page."""

    id: str
    name: str
    description: Optional[str] = None
    active: bool = False
    session_relations: List[str] = Field(alias="sessionRelations", default_factory=list)
    cover_art: Optional[str] = Field(alias="coverArt", default=None)

    model_config = {"extra": "allow", "populate_by_name": True}


class Session(BaseModel):
    """Schema for a game session page, optionally linked to a campaign."""

    id: str
    name: str
    date: Optional[str] = None
    description: Optional[str] = None
    campaign_relation: Optional[str] = Field(alias="campaignRelation", default=None)
    player_relations: List[str] = Field(alias="playerRelations", default_factory=list)
    encounter_relations: List[str] = Field(alias="encounterRelations", default_factory=list)

    model_config = {"extra": "allow", "populate_by_name": True}


class CreatureFilters(BaseModel):
    """Filter payload for fetch-creatures."""

    environment: Optional[str] = None
    min_cr: Optional[str] = Field(alias="minCR", default=None)
    max_cr: Optional[str] = Field(alias="maxCR", default=None)
    creature_type: Optional[str] = Field(alias="creatureType", default=None)
    alignment: Optional[str] = None
    size: Optional[str] = None

    model_config = {"populate_by_name": True}

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class EncounterParams(BaseModel):
    """Request payload for generate-encounter."""

    environment: str = "Any"
    xp_threshold: int = Field(alias="xpThreshold", default=100, ge=0)
    max_monsters: int = Field(alias="maxMonsters", default=3, ge=1)
    min_cr: float = Field(alias="minCR", default=0, ge=0)
    max_cr: float = Field(alias="maxCR", default=2, ge=0)
    alignment: str = "Any"
    creature_type: str = Field(alias="creatureType", default="Any")
    size: str = "Any"
    session_id: Optional[str] = Field(alias="sessionId", default=None)

    model_config = {"populate_by_name": True}

    @field_validator("max_cr")
    @classmethod
    def max_cr_not_below_min(cls, v, info):
        min_cr = info.data.get("min_cr")
        if min_cr is not None and v < min_cr:
            return min_cr
        return v

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
