"""Core types, reply schemas and exceptions."""

from .exceptions import (
    ConfigurationError,
    GenerationFailed,
    MalformedResponse,
    PlanLimitError,
    RegenerationFailed,
    ScriptArcError,
    TransportError,
)
from .schemas import ResearchReply, ScriptReply, SectionReply
from .types import (
    ChannelProfile,
    FallbackPlan,
    FallbackVariant,
    GenerationRequest,
    ResearchBrief,
    RetryPolicy,
    ScriptFramework,
    SectionDraft,
    Tone,
)

__all__ = [
    "ChannelProfile",
    "ConfigurationError",
    "FallbackPlan",
    "FallbackVariant",
    "GenerationFailed",
    "GenerationRequest",
    "MalformedResponse",
    "PlanLimitError",
    "RegenerationFailed",
    "ResearchBrief",
    "ResearchReply",
    "RetryPolicy",
    "ScriptArcError",
    "ScriptFramework",
    "ScriptReply",
    "SectionDraft",
    "SectionReply",
    "Tone",
    "TransportError",
]
