"""Stateful script studio: plans, credits, profiles and saved scripts."""

from .state import (
    PRO_FRAMEWORKS,
    PROFILE_LIMITS,
    TIER_CREDITS,
    ScriptMetadata,
    ScriptSection,
    Tier,
    UserState,
    YouTubeScript,
    default_profile,
    word_count,
)
from .store import JSONStateStore, StateStore, state_from_dict, state_to_dict
from .workflow import ScriptStudio, open_studio

__all__ = [
    "PROFILE_LIMITS",
    "PRO_FRAMEWORKS",
    "TIER_CREDITS",
    "JSONStateStore",
    "ScriptMetadata",
    "ScriptSection",
    "ScriptStudio",
    "StateStore",
    "Tier",
    "UserState",
    "YouTubeScript",
    "default_profile",
    "open_studio",
    "state_from_dict",
    "state_to_dict",
    "word_count",
]
