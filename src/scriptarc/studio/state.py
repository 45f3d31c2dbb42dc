"""User state and plan rules for the script studio.

All types are immutable; every operation returns a new ``UserState``. Plan
refusals raise ``PlanLimitError`` so callers can present the upgrade path.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
import re
import time
from typing import TYPE_CHECKING, Any, Literal
import uuid

from scriptarc.core.exceptions import PlanLimitError
from scriptarc.core.types import ChannelProfile, ScriptFramework, Tone

if TYPE_CHECKING:
    from collections.abc import Iterable

    from scriptarc.core.types import ResearchBrief, SectionDraft


class Tier(str, Enum):
    """Subscription plan."""

    FREE = "free"
    CREATOR = "creator"
    AGENCY = "agency"


# Credits granted when switching to a tier
TIER_CREDITS: dict[Tier, int] = {Tier.FREE: 5, Tier.CREATOR: 50, Tier.AGENCY: 999}

PROFILE_LIMITS: dict[Tier, int] = {Tier.FREE: 1, Tier.CREATOR: 5, Tier.AGENCY: 20}

PRO_FRAMEWORKS = frozenset({ScriptFramework.VIRAL_SHORT_LONG, ScriptFramework.CASE_STUDY})

SectionStatus = Literal["draft", "final"]

_WORD_RE = re.compile(r"\S+")


def new_id() -> str:
    """Short random identifier."""
    return uuid.uuid4().hex[:9]


def word_count(text: str) -> int:
    """Number of whitespace-separated words in ``text``."""
    return len(_WORD_RE.findall(text or ""))


def default_profile() -> ChannelProfile:
    """The channel profile every new user starts with."""
    return ChannelProfile(
        id="default",
        name="Main Channel",
        niche="Educational Tech",
        target_audience="Early adopters and developers",
        default_tone=Tone.AUTHORITATIVE,
    )


@dataclasses.dataclass(frozen=True, slots=True)
class ScriptSection:
    """An editable section of a saved script."""

    id: str
    label: str
    content: str
    status: SectionStatus = "draft"


@dataclasses.dataclass(frozen=True, slots=True)
class ScriptMetadata:
    """Generation context kept alongside a script."""

    hook_options: tuple[str, ...]
    research_summary: str


@dataclasses.dataclass(frozen=True, slots=True)
class YouTubeScript:
    """A saved script."""

    id: str
    title: str
    topic: str
    framework: ScriptFramework
    tone: Tone
    sections: tuple[ScriptSection, ...]
    created_at: int
    metadata: ScriptMetadata | None = None

    @classmethod
    def from_drafts(
        cls,
        topic: str,
        framework: ScriptFramework,
        tone: Tone,
        drafts: Iterable[SectionDraft],
        brief: ResearchBrief | None = None,
        *,
        created_at: int | None = None,
    ) -> YouTubeScript:
        """Assemble a new script from generated section drafts."""
        sections = tuple(
            ScriptSection(id=f"s-{i}", label=d.label, content=d.content)
            for i, d in enumerate(drafts)
        )
        metadata = (
            ScriptMetadata(hook_options=brief.hooks, research_summary=brief.research)
            if brief is not None
            else None
        )
        return cls(
            id=new_id(),
            title=topic,
            topic=topic,
            framework=framework,
            tone=tone,
            sections=sections,
            created_at=created_at if created_at is not None else int(time.time() * 1000),
            metadata=metadata,
        )

    def section(self, section_id: str) -> ScriptSection:
        """Look up a section by id.

        Raises:
            KeyError: If no section has that id.
        """
        for s in self.sections:
            if s.id == section_id:
                return s
        raise KeyError(f"Unknown section '{section_id}' in script '{self.id}'")

    def with_section_content(self, section_id: str, content: str) -> YouTubeScript:
        """Return a copy with one section's content replaced."""
        self.section(section_id)
        sections = tuple(
            dataclasses.replace(s, content=content) if s.id == section_id else s
            for s in self.sections
        )
        return dataclasses.replace(self, sections=sections)

    def to_text(self) -> str:
        """Plain-text export: ``[Label]`` headers followed by narration."""
        return "\n\n".join(f"[{s.label}]\n{s.content}" for s in self.sections)

    @property
    def word_count(self) -> int:
        """Total words across all sections."""
        return sum(word_count(s.content) for s in self.sections)


@dataclasses.dataclass(frozen=True, slots=True)
class UserState:
    """Everything the studio persists for one user."""

    credits: int
    tier: Tier
    scripts: tuple[YouTubeScript, ...] = ()
    profiles: tuple[ChannelProfile, ...] = ()

    @classmethod
    def initial(cls) -> UserState:
        """State of a brand-new user."""
        return cls(
            credits=TIER_CREDITS[Tier.FREE],
            tier=Tier.FREE,
            scripts=(),
            profiles=(default_profile(),),
        )

    # --- Plan rules ---

    @property
    def profile_limit(self) -> int:
        """Maximum number of channel profiles on this plan."""
        return PROFILE_LIMITS[self.tier]

    @property
    def can_create_script(self) -> bool:
        """Agency is never blocked; other plans need a credit."""
        return self.tier is Tier.AGENCY or self.credits > 0

    @property
    def can_regenerate(self) -> bool:
        """Section regeneration is a paid feature."""
        return self.tier is not Tier.FREE

    def can_use_framework(self, framework: ScriptFramework) -> bool:
        """PRO frameworks are locked on the free plan."""
        return not (self.tier is Tier.FREE and framework in PRO_FRAMEWORKS)

    def require_script_credit(self) -> None:
        """Raise ``PlanLimitError`` unless a new script may be created."""
        if not self.can_create_script:
            raise PlanLimitError(
                f"No credits left on the {self.tier.value} plan. Upgrade to create more scripts."
            )

    def require_framework(self, framework: ScriptFramework) -> None:
        """Raise ``PlanLimitError`` if ``framework`` is locked on this plan."""
        if not self.can_use_framework(framework):
            raise PlanLimitError(
                f"'{framework.value}' is a PRO framework. Upgrade your plan to use it."
            )

    def require_regeneration(self) -> None:
        """Raise ``PlanLimitError`` if regeneration is locked on this plan."""
        if not self.can_regenerate:
            raise PlanLimitError(
                "Section regeneration is a PRO feature. Please upgrade your plan."
            )

    # --- Lookups ---

    def profile(self, profile_id: str) -> ChannelProfile:
        """Raises ``KeyError`` for unknown ids."""
        for p in self.profiles:
            if p.id == profile_id:
                return p
        raise KeyError(f"Unknown channel profile '{profile_id}'")

    def script(self, script_id: str) -> YouTubeScript:
        """Raises ``KeyError`` for unknown ids."""
        for s in self.scripts:
            if s.id == script_id:
                return s
        raise KeyError(f"Unknown script '{script_id}'")

    # --- Transitions ---

    def add_script(self, script: YouTubeScript) -> UserState:
        """Store a new script first in the list and spend one credit."""
        self.require_script_credit()
        return dataclasses.replace(
            self,
            scripts=(script, *self.scripts),
            credits=max(0, self.credits - 1),
        )

    def update_script(self, script: YouTubeScript) -> UserState:
        """Replace the stored script that has the same id."""
        self.script(script.id)
        return dataclasses.replace(
            self,
            scripts=tuple(script if s.id == script.id else s for s in self.scripts),
        )

    def upgrade(self, tier: Tier) -> UserState:
        """Switch plan; the credit balance is reset to the plan's grant."""
        tier = Tier(tier)
        return dataclasses.replace(self, tier=tier, credits=TIER_CREDITS[tier])

    def add_profile(self, profile: ChannelProfile) -> UserState:
        """Append a channel profile within the plan limit."""
        if len(self.profiles) >= self.profile_limit:
            raise PlanLimitError(
                f"The {self.tier.value} plan is limited to {self.profile_limit} "
                "channel profile(s). Please upgrade to add more."
            )
        if any(p.id == profile.id for p in self.profiles):
            raise ValueError(f"Channel profile '{profile.id}' already exists")
        return dataclasses.replace(self, profiles=(*self.profiles, profile))

    def update_profile(self, profile_id: str, **changes: Any) -> UserState:
        """Apply field changes to one profile; the id cannot change."""
        if "id" in changes:
            raise ValueError("Channel profile id cannot be changed")
        updated = dataclasses.replace(self.profile(profile_id), **changes)
        return dataclasses.replace(
            self,
            profiles=tuple(updated if p.id == profile_id else p for p in self.profiles),
        )

    def remove_profile(self, profile_id: str) -> UserState:
        """Delete a profile; the last one cannot be removed."""
        self.profile(profile_id)
        if len(self.profiles) == 1:
            raise ValueError("At least one channel profile is required")
        return dataclasses.replace(
            self, profiles=tuple(p for p in self.profiles if p.id != profile_id)
        )
