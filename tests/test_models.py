"""
Tests for the pydantic models — result invariant, wire aliases, tab defaults.
"""

import pytest
from pydantic import ValidationError

from models import (
    RemoteResult,
    Campaign,
    Session,
    Environment,
    EncounterParams,
    TabDocument,
    DEFAULT_ENVIRONMENTS,
)
from services.edge_function_errors import EdgeFunctionError


class TestRemoteResult:

    def test_ok(self):
        result = RemoteResult.ok({"a": 1}, status=200)
        assert result.success is True
        assert result.field("a") == 1
        assert result.field("missing") is None
        assert result.unwrap() == {"a": 1}

    def test_fail(self):
        result = RemoteResult.fail("boom", status=500)
        assert result.success is False
        assert result.error == "boom"
        assert result.field("a") is None

    def test_fail_without_message_gets_default(self):
        assert RemoteResult.fail("").error == "Unknown error occurred"

    def test_success_cannot_carry_error(self):
        with pytest.raises(ValidationError):
            RemoteResult(success=True, data={}, error="nope")

    def test_failure_requires_error(self):
        with pytest.raises(ValidationError):
            RemoteResult(success=False)

    def test_unwrap_failure_raises(self):
        with pytest.raises(EdgeFunctionError) as exc_info:
            RemoteResult.fail("Not found", status=404).unwrap()
        assert exc_info.value.status == 404
        assert str(exc_info.value) == "Not found"


class TestNotionModels:

    def test_campaign_from_wire(self):
        campaign = Campaign.model_validate({
            "id": "c1",
            "name": "Curse of Strahd",
            "active": True,
            "sessionRelations": ["s1", "s2"],
            "coverArt": "https://img.test/strahd.png",
        })
        assert campaign.session_relations == ["s1", "s2"]
        assert campaign.cover_art == "https://img.test/strahd.png"

    def test_session_defaults(self):
        session = Session(id="s1", name="Session 1")
        assert session.campaign_relation is None
        assert session.player_relations == []

    def test_environment_id_coerced(self):
        assert Environment.model_validate({"id": 7, "name": "Ruins"}).id == "7"

    def test_default_environments(self):
        names = [env.name for env in DEFAULT_ENVIRONMENTS]
        assert names[0] == "Forest"
        assert len(names) == 8

    def test_encounter_params_clamps_max_cr(self):
        params = EncounterParams(min_cr=5, max_cr=2)
        assert params.max_cr == 5

    def test_encounter_params_rejects_zero_monsters(self):
        with pytest.raises(ValidationError):
            EncounterParams(max_monsters=0)


class TestTabDocument:

    def test_defaults(self):
        tab = TabDocument()
        assert tab.type == "empty"
        assert tab.logs == []
        assert tab.created_at > 0

    def test_unique_ids(self):
        assert TabDocument().id != TabDocument().id

    def test_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            TabDocument(type="spellbook")
