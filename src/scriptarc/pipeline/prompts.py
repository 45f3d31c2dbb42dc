"""Prompt construction for the three generation requests.

Each function returns a fully formed ``GenerationRequest``. Structured prompts
describe their JSON shape in the text as well as through the schema, because
search-grounded calls are sent without a provider-side schema.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scriptarc.core.schemas import HOOK_COUNT, ResearchReply, ScriptReply
from scriptarc.core.types import GenerationRequest

if TYPE_CHECKING:
    from scriptarc.core.types import ChannelProfile, ScriptFramework, Tone

_RESEARCH_SHAPE = '{"research": "<string>", "hooks": ["<string>", "<string>", "<string>"]}'
_SCRIPT_SHAPE = '{"sections": [{"label": "<string>", "content": "<string>"}, ...]}'

SCRIPT_PHASES = (
    "Introduction & Hook (Refine the provided hook for flow)",
    "The Stakes (Define the problem or the curiosity gap clearly)",
    'Core Narrative (The "meat" of the video, broken into digestible segments)',
    "Conclusion & Retention-CTA (A call to action that keeps them on the platform)",
)


def _require_text(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name}: must be a non-empty string")
    return value.strip()


def _enum_text(value: object) -> str:
    return str(getattr(value, "value", value))


def build_research_request(topic: str, niche: str, *, model: str) -> GenerationRequest:
    """Request topical research plus three hook variants."""
    topic = _require_text(topic, "topic")
    niche = _require_text(niche, "niche")
    prompt = (
        f'Analyze this YouTube topic: "{topic}" in the "{niche}" niche.\n'
        "1. Research key facts, trends, and what the competition is missing.\n"
        f'2. Generate {HOOK_COUNT} unique "Scroll-Stopping" hook variations for '
        "the first 15 seconds.\n"
        "Focus on curiosity gaps, pattern interrupts, and emotional triggers.\n\n"
        f"Respond with a single JSON object of this shape and nothing else:\n"
        f"{_RESEARCH_SHAPE}"
    )
    return GenerationRequest(
        model_name=model,
        prompt=prompt,
        response_schema=ResearchReply,
    )


def build_system_instruction(profile: ChannelProfile) -> str:
    """System instruction that puts the model in the channel's voice."""
    return (
        f"You are an elite YouTube scriptwriter for a {profile.niche} channel.\n"
        "Your primary objective is maximum viewer retention (AHR). Use "
        '"Open Loops", "Pattern Interrupts", and "Conversational Narration".\n'
        'NEVER use AI cliches like "In today\'s video" or "Let\'s dive in".\n'
        f"Write specifically for: {profile.target_audience}. Speak as a peer, "
        "but with the authority of an expert."
    )


def build_script_request(
    topic: str,
    framework: ScriptFramework,
    tone: Tone,
    profile: ChannelProfile,
    research: str,
    selected_hook: str,
    *,
    model: str,
    thinking_budget: int | None = None,
) -> GenerationRequest:
    """Request a sectioned script built on prior research and a chosen hook."""
    topic = _require_text(topic, "topic")
    selected_hook = _require_text(selected_hook, "selected_hook")
    phases = "\n".join(f"{i}. {phase}" for i, phase in enumerate(SCRIPT_PHASES, 1))
    prompt = (
        f'Construct a full {_enum_text(framework)} script for the topic: "{topic}".\n'
        f"Tone: {_enum_text(tone)}.\n"
        f"Incorporate this research: {research.strip() or 'none provided'}\n"
        f'Start with this Hook: "{selected_hook}"\n\n'
        "Structure the output into these logical phases:\n"
        f"{phases}\n\n"
        "Respond with a single JSON object of this shape, one entry per phase "
        f"in speaking order:\n{_SCRIPT_SHAPE}"
    )
    return GenerationRequest(
        model_name=model,
        prompt=prompt,
        system_instruction=build_system_instruction(profile),
        response_schema=ScriptReply,
        thinking_budget=thinking_budget,
    )


def build_rewrite_request(
    current_content: str, instruction: str, tone: Tone, *, model: str
) -> GenerationRequest:
    """Request a free-text rewrite of one script section."""
    instruction = _require_text(instruction, "instruction")
    prompt = (
        "Rewrite this specific script section following these instructions: "
        f'"{instruction}".\n'
        f"Maintain the {_enum_text(tone)} tone. Return ONLY the new content for "
        "this section.\n\n"
        "Section Content:\n\n"
        f"{current_content}"
    )
    return GenerationRequest(model_name=model, prompt=prompt)
