"""Structured reply schemas.

These pydantic models serve two purposes: they are handed to the provider as
the requested output schema, and they validate the sanitized reply. Field
constraints that the provider schema cannot express are enforced in
validators, so a reply either validates fully or is rejected.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

HOOK_COUNT = 3


class _StrictReply(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class ResearchReply(_StrictReply):
    """Reply for the research-and-hooks request."""

    research: str = Field(
        description="A detailed summary of research facts and insights."
    )
    hooks: list[str] = Field(
        description="Three distinct viral-optimized hook scripts."
    )

    @field_validator("research")
    @classmethod
    def research_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("research must not be blank")
        return v.strip()

    @field_validator("hooks")
    @classmethod
    def exactly_three_hooks(cls, v: list[str]) -> list[str]:
        hooks = [h.strip() for h in v]
        if len(hooks) != HOOK_COUNT:
            raise ValueError(f"expected {HOOK_COUNT} hooks, got {len(hooks)}")
        if any(not h for h in hooks):
            raise ValueError("hooks must not be blank")
        return hooks


class SectionReply(_StrictReply):
    """One script phase in the script reply."""

    label: str = Field(description="The name of the script phase.")
    content: str = Field(description="The actual spoken narration for this phase.")


class ScriptReply(_StrictReply):
    """Reply for the full-script request.

    The wrapping object exists because object roots survive the sanitizer's
    brace slicing; callers only ever see ``sections``.
    """

    sections: list[SectionReply] = Field(
        description="Script phases in speaking order."
    )

    @field_validator("sections")
    @classmethod
    def at_least_one_section(cls, v: list[SectionReply]) -> list[SectionReply]:
        if not v:
            raise ValueError("sections must not be empty")
        return v
