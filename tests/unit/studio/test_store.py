import json
import logging

import pytest

from scriptarc.core.types import ResearchBrief, ScriptFramework, SectionDraft, Tone
from scriptarc.studio.state import Tier, UserState, YouTubeScript
from scriptarc.studio.store import JSONStateStore, state_from_dict, state_to_dict

pytestmark = pytest.mark.unit


def _populated_state() -> UserState:
    script = YouTubeScript.from_drafts(
        "Case files",
        ScriptFramework.CASE_STUDY,
        Tone.VIRAL,
        [SectionDraft("Hook", "Open strong.")],
        ResearchBrief(research="r", hooks=("a", "b", "c")),
    )
    return UserState.initial().upgrade(Tier.CREATOR).add_script(script)


@pytest.mark.asyncio
async def test_missing_file_loads_initial_state(tmp_path):
    store = JSONStateStore(tmp_path / "nested" / "state.json")
    assert await store.load() == UserState.initial()


@pytest.mark.asyncio
async def test_save_then_load_preserves_state(tmp_path):
    store = JSONStateStore(tmp_path / "nested" / "state.json")
    state = _populated_state()
    await store.save(state)
    assert store.path.exists()
    assert not store.path.with_suffix(".json.tmp").exists()
    assert await store.load() == state


@pytest.mark.asyncio
async def test_saved_file_stores_enum_values(tmp_path):
    store = JSONStateStore(tmp_path / "state.json")
    await store.save(_populated_state())
    raw = json.loads(store.path.read_text(encoding="utf-8"))
    assert raw["tier"] == "creator"
    assert raw["scripts"][0]["framework"] == "Case Study / deep Dive"
    assert raw["profiles"][0]["default_tone"] == "Authoritative"


@pytest.mark.asyncio
async def test_corrupt_json_loads_initial_state_and_logs(tmp_path, caplog):
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.ERROR, logger="scriptarc.studio.store"):
        state = await JSONStateStore(path).load()
    assert state == UserState.initial()
    assert any("Failed to read studio state" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_structurally_invalid_state_loads_initial(tmp_path, caplog):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"credits": 3, "tier": "platinum"}), encoding="utf-8")
    with caplog.at_level(logging.ERROR, logger="scriptarc.studio.store"):
        state = await JSONStateStore(path).load()
    assert state == UserState.initial()
    assert any("Discarding" in r.getMessage() for r in caplog.records)


def test_missing_profiles_fall_back_to_default():
    state = state_from_dict({"credits": 2, "tier": "free"})
    assert state.credits == 2
    assert state.profiles == UserState.initial().profiles


def test_dict_round_trip_of_populated_state():
    state = _populated_state()
    assert state_from_dict(json.loads(json.dumps(state_to_dict(state)))) == state


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [[1, 2, 3], "text", 42])
async def test_non_object_json_loads_initial_state_and_logs(tmp_path, caplog, payload):
    path = tmp_path / "state.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    with caplog.at_level(logging.ERROR, logger="scriptarc.studio.store"):
        state = await JSONStateStore(path).load()
    assert state == UserState.initial()
    assert any("expected a JSON object" in r.getMessage() for r in caplog.records)
