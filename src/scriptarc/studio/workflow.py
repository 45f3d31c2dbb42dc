"""Research → script → edit flow on top of the generator.

``ScriptStudio`` applies plan rules before any remote call, persists state
after every change, and owns the one caller-side fallback the generator
deliberately leaves out: keeping a section's old content when a rewrite fails.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from scriptarc.config import resolve_config
from scriptarc.core.exceptions import RegenerationFailed
from scriptarc.core.types import ChannelProfile, Tone

from .state import Tier, UserState, YouTubeScript, new_id
from .store import JSONStateStore

if TYPE_CHECKING:
    from collections.abc import Callable

    from scriptarc.config import FrozenConfig
    from scriptarc.core.types import ResearchBrief, ScriptFramework
    from scriptarc.generator import ScriptGenerator

    from .store import StateStore

log = logging.getLogger(__name__)


class ScriptStudio:
    """Stateful front end for one user."""

    def __init__(
        self, generator: ScriptGenerator, store: StateStore, state: UserState
    ) -> None:
        self.generator = generator
        self.store = store
        self._state = state
        self._lock = asyncio.Lock()

    @classmethod
    async def open(cls, generator: ScriptGenerator, store: StateStore) -> ScriptStudio:
        """Load persisted state and return a ready studio."""
        return cls(generator, store, await store.load())

    @property
    def state(self) -> UserState:
        return self._state

    async def _commit(self, change: Callable[[UserState], UserState]) -> UserState:
        """Apply ``change`` to the latest state, persist it, then publish it."""
        async with self._lock:
            state = change(self._state)
            await self.store.save(state)
            self._state = state
            return state

    # --- Generation flow ---

    async def research(self, topic: str, profile_id: str) -> ResearchBrief:
        """Research ``topic`` for the niche of the given channel profile.

        Raises:
            PlanLimitError: If the user cannot create another script.
            KeyError: For an unknown profile.
            GenerationFailed: When research fails.
        """
        self._state.require_script_credit()
        profile = self._state.profile(profile_id)
        return await self.generator.research_and_hooks(topic, profile.niche)

    async def create_script(
        self,
        topic: str,
        profile_id: str,
        framework: ScriptFramework,
        brief: ResearchBrief,
        hook_index: int = 0,
        *,
        tone: Tone | None = None,
    ) -> YouTubeScript:
        """Generate, store and return a new script.

        ``tone`` defaults to the profile's default tone. A credit is spent
        only once generation succeeds.

        Raises:
            PlanLimitError: On an empty balance or a locked framework.
            IndexError: If ``hook_index`` does not select one of the hooks.
            GenerationFailed: When generation fails; state is unchanged.
        """
        self._state.require_script_credit()
        self._state.require_framework(framework)
        profile = self._state.profile(profile_id)
        if not 0 <= hook_index < len(brief.hooks):
            raise IndexError(f"hook_index {hook_index} out of range")
        chosen_tone = tone or profile.default_tone

        drafts = await self.generator.full_script(
            topic,
            framework,
            chosen_tone,
            profile,
            brief.research,
            brief.hooks[hook_index],
        )
        script = YouTubeScript.from_drafts(topic, framework, chosen_tone, drafts, brief)
        await self._commit(lambda s: s.add_script(script))
        log.info(
            "Created script %s (%d sections, %d credits left)",
            script.id,
            len(script.sections),
            self._state.credits,
        )
        return script

    async def rewrite_section(
        self,
        script_id: str,
        section_id: str,
        instruction: str,
        *,
        keep_on_failure: bool = False,
    ) -> str:
        """Rewrite one section of a stored script.

        Args:
            script_id: Stored script id.
            section_id: Section id within the script.
            instruction: Free-text rewrite instruction.
            keep_on_failure: On ``RegenerationFailed``, leave the section as it
                is and return its current content instead of raising.

        Returns:
            The section content after the call.

        Raises:
            PlanLimitError: On the free plan.
            KeyError: For unknown script or section ids.
            RegenerationFailed: When the rewrite fails and
                ``keep_on_failure`` is False.
        """
        self._state.require_regeneration()
        script = self._state.script(script_id)
        current = script.section(section_id).content

        try:
            new_content = await self.generator.regenerate_section(
                current, instruction, script.tone
            )
        except RegenerationFailed as e:
            if not keep_on_failure:
                raise
            log.warning(
                "Keeping original content of %s/%s: %s", script_id, section_id, e
            )
            return self._state.script(script_id).section(section_id).content

        await self._commit(
            lambda s: s.update_script(
                s.script(script_id).with_section_content(section_id, new_content)
            )
        )
        return new_content

    # --- Editing and account ---

    async def edit_section(self, script_id: str, section_id: str, content: str) -> None:
        """Replace a section's content with user-written text."""
        await self._commit(
            lambda s: s.update_script(
                s.script(script_id).with_section_content(section_id, content)
            )
        )

    def export_script(self, script_id: str) -> str:
        """Plain-text export of a stored script."""
        return self._state.script(script_id).to_text()

    async def upgrade(self, tier: Tier) -> UserState:
        """Switch plan and reset the credit balance."""
        return await self._commit(lambda s: s.upgrade(tier))

    async def add_profile(
        self,
        name: str,
        niche: str,
        target_audience: str,
        default_tone: Tone = Tone.CONVERSATIONAL,
    ) -> ChannelProfile:
        """Create a channel profile within the plan limit."""
        profile = ChannelProfile(
            id=new_id(),
            name=name,
            niche=niche,
            target_audience=target_audience,
            default_tone=default_tone,
        )
        await self._commit(lambda s: s.add_profile(profile))
        return profile

    async def update_profile(self, profile_id: str, **changes: Any) -> ChannelProfile:
        """Change fields of an existing profile."""
        state = await self._commit(lambda s: s.update_profile(profile_id, **changes))
        return state.profile(profile_id)

    async def remove_profile(self, profile_id: str) -> None:
        await self._commit(lambda s: s.remove_profile(profile_id))


async def open_studio(
    config: FrozenConfig | None = None, *, generator: ScriptGenerator | None = None
) -> ScriptStudio:
    """Open the studio backed by the JSON file at ``config.state_path``."""
    from scriptarc.generator import create_generator

    final_config = config if config is not None else resolve_config().to_frozen()
    gen = generator or create_generator(final_config)
    return await ScriptStudio.open(gen, JSONStateStore(final_config.state_path))
