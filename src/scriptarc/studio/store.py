"""JSON persistence for the studio state."""

from __future__ import annotations

from dataclasses import asdict
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from scriptarc.core.types import ChannelProfile, ScriptFramework, Tone

from .state import (
    ScriptMetadata,
    ScriptSection,
    Tier,
    UserState,
    YouTubeScript,
)

if TYPE_CHECKING:
    import os

log = logging.getLogger(__name__)


class StateStore(Protocol):
    async def load(self) -> UserState: ...

    async def save(self, state: UserState) -> None: ...


class JSONStateStore:
    """Single-file JSON store for one user's studio state.

    Uses copy-on-write: write to a temp file and rename for atomicity.
    Shape saved:
      {
        "credits": int,
        "tier": "free" | "creator" | "agency",
        "scripts": [{"id":..., "sections": [...], "metadata": {...} | null, ...}],
        "profiles": [{"id":..., "name":..., "default_tone":..., ...}]
      }
    A missing or unreadable file loads as a brand-new user.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def load(self) -> UserState:
        data = self._read_all()
        if data is None:
            return UserState.initial()
        try:
            return state_from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            log.error("Discarding unreadable studio state in %s: %s", self._path, e)
            return UserState.initial()

    async def save(self, state: UserState) -> None:
        self._write_all(state_to_dict(state))

    def _read_all(self) -> dict[str, Any] | None:
        if not self._path.exists():
            return None
        try:
            result = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            log.error("Failed to read studio state from %s: %s", self._path, e)
            return None
        if not isinstance(result, dict):
            log.error(
                "Failed to read studio state from %s: expected a JSON object, got %s",
                self._path,
                type(result).__name__,
            )
            return None
        return result

    def _write_all(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        Path.replace(tmp, self._path)


def state_to_dict(state: UserState) -> dict[str, Any]:
    """JSON-ready form of ``state``; enums are stored by value."""
    data = asdict(state)
    data["tier"] = state.tier.value
    for raw, script in zip(data["scripts"], state.scripts, strict=True):
        raw["framework"] = script.framework.value
        raw["tone"] = script.tone.value
    for raw, profile in zip(data["profiles"], state.profiles, strict=True):
        raw["default_tone"] = profile.default_tone.value
    return data


def state_from_dict(data: dict[str, Any]) -> UserState:
    """Rebuild a ``UserState`` saved by ``state_to_dict``.

    Raises:
        KeyError, TypeError, ValueError: On structurally invalid data.
    """
    profiles = tuple(
        ChannelProfile(
            id=str(p["id"]),
            name=str(p["name"]),
            niche=str(p["niche"]),
            target_audience=str(p["target_audience"]),
            default_tone=Tone(p.get("default_tone", Tone.CONVERSATIONAL.value)),
        )
        for p in data.get("profiles", [])
    )
    scripts = tuple(_script_from_dict(s) for s in data.get("scripts", []))
    return UserState(
        credits=int(data["credits"]),
        tier=Tier(data["tier"]),
        scripts=scripts,
        profiles=profiles or UserState.initial().profiles,
    )


def _script_from_dict(raw: dict[str, Any]) -> YouTubeScript:
    meta_raw = raw.get("metadata")
    metadata = None
    if isinstance(meta_raw, dict) and meta_raw:
        metadata = ScriptMetadata(
            hook_options=tuple(meta_raw.get("hook_options", ()) or ()),
            research_summary=str(meta_raw.get("research_summary", "")),
        )
    return YouTubeScript(
        id=str(raw["id"]),
        title=str(raw.get("title", raw["topic"])),
        topic=str(raw["topic"]),
        framework=ScriptFramework(raw["framework"]),
        tone=Tone(raw["tone"]),
        sections=tuple(
            ScriptSection(
                id=str(s["id"]),
                label=str(s["label"]),
                content=str(s["content"]),
                status="final" if s.get("status") == "final" else "draft",
            )
            for s in raw.get("sections", [])
        ),
        created_at=int(raw.get("created_at", 0)),
        metadata=metadata,
    )
