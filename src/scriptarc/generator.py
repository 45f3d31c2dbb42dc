"""The primary user-facing entry point for script generation.

``ScriptGenerator`` exposes three builders:

- ``research_and_hooks``: search-grounded research first, offline research as
  the fallback variant
- ``full_script``: one sectioned script from research and a chosen hook
- ``regenerate_section``: free-text rewrite of one section

Each builder constructs a request, runs it through the retry executor, and
sanitizes the reply. Exhaustion surfaces as ``GenerationFailed`` (or
``RegenerationFailed`` for rewrites) chained to the last underlying error.
Builders never substitute fallback content; that is a caller decision.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

from scriptarc.config import FrozenConfig, resolve_config
from scriptarc.core.exceptions import GenerationFailed, RegenerationFailed
from scriptarc.core.schemas import ResearchReply, ScriptReply
from scriptarc.core.types import (
    FallbackVariant,
    ResearchBrief,
    RetryPolicy,
    SectionDraft,
)
from scriptarc.pipeline.adapters.mock import MockGenerationAdapter
from scriptarc.pipeline.prompts import (
    build_research_request,
    build_rewrite_request,
    build_script_request,
)
from scriptarc.pipeline.retry import RetryExecutor
from scriptarc.response.sanitizer import clean_text_reply, parse_structured
from scriptarc.telemetry import TelemetryContext

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from pydantic import BaseModel

    from scriptarc.core.types import (
        ChannelProfile,
        GenerationRequest,
        ScriptFramework,
        Tone,
    )
    from scriptarc.pipeline.adapters.base import GenerationAdapter
    from scriptarc.pipeline.retry import Sleep
    from scriptarc.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)

# --- Telemetry scopes ---
T_RESEARCH = "generator.research"
T_SCRIPT = "generator.script"
T_REWRITE = "generator.rewrite"


@dataclass(frozen=True, slots=True)
class GenerationPolicies:
    """Retry policies used by the builders."""

    search_research: RetryPolicy = RetryPolicy(max_attempts=1, initial_delay=1.0)
    offline_research: RetryPolicy = RetryPolicy(max_attempts=3, initial_delay=2.0)
    full_script: RetryPolicy = RetryPolicy(max_attempts=3, initial_delay=1.0)
    rewrite: RetryPolicy = RetryPolicy(max_attempts=3, initial_delay=1.0)


DEFAULT_POLICIES = GenerationPolicies()


class ScriptGenerator:
    """Builds generation requests and executes them resiliently.

    The generator keeps no per-call state, so concurrent builder calls on one
    instance are independent.
    """

    def __init__(
        self,
        config: FrozenConfig,
        adapter: GenerationAdapter | None = None,
        *,
        policies: GenerationPolicies = DEFAULT_POLICIES,
        sleep: Sleep = asyncio.sleep,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            config: Frozen configuration, read by value on every call.
            adapter: Provider adapter; defaults to the Gemini adapter when
                ``config.use_real_api`` is set and the offline mock otherwise.
            policies: Retry policies for the builders.
            sleep: Backoff sleep function, injectable for tests.
            telemetry: Optional telemetry context.
        """
        self.config = config
        self.policies = policies
        self._adapter = adapter or self._build_default_adapter(config)
        self._telemetry = telemetry or TelemetryContext()
        self._executor = RetryExecutor(sleep=sleep, telemetry=self._telemetry)

    @staticmethod
    def _build_default_adapter(config: FrozenConfig) -> GenerationAdapter:
        if config.use_real_api:
            # Deferred so the mock path never imports the SDK
            from scriptarc.pipeline.adapters.gemini import GoogleGenAIAdapter

            return GoogleGenAIAdapter(config.api_key)
        return MockGenerationAdapter()

    @property
    def adapter(self) -> GenerationAdapter:
        """The provider adapter in use."""
        return self._adapter

    def _structured_call[M: BaseModel](
        self, request: GenerationRequest, schema: type[M]
    ) -> Callable[[], Awaitable[M]]:
        async def call() -> M:
            text = await self._adapter.generate(request)
            return parse_structured(text, schema)

        return call

    def _text_call(self, request: GenerationRequest) -> Callable[[], Awaitable[str]]:
        async def call() -> str:
            return clean_text_reply(await self._adapter.generate(request))

        return call

    async def research_and_hooks(self, topic: str, niche: str) -> ResearchBrief:
        """Research a topic and propose three opening hooks.

        The search-grounded variant runs first under a lenient policy; once it
        is exhausted the same request runs without search under a more
        tolerant one. With ``enable_search`` off only the offline variant runs.

        Raises:
            ValueError: If ``topic`` or ``niche`` is blank.
            GenerationFailed: When every variant has been exhausted.
        """
        request = build_research_request(topic, niche, model=self.config.flash_model)
        plan: list[FallbackVariant[ResearchReply]] = []
        if self.config.enable_search:
            plan.append(
                FallbackVariant(
                    name="research.search",
                    operation=self._structured_call(
                        request.with_search(True), ResearchReply
                    ),
                    policy=self.policies.search_research,
                )
            )
        plan.append(
            FallbackVariant(
                name="research.offline",
                operation=self._structured_call(request, ResearchReply),
                policy=self.policies.offline_research,
            )
        )

        with self._telemetry(T_RESEARCH, model=request.model_name):
            try:
                reply = await self._executor.run_plan(tuple(plan))
            except Exception as e:
                raise GenerationFailed("Failed to research topic", e) from e

        log.debug("Research for %r produced %d hooks", topic, len(reply.hooks))
        return ResearchBrief(research=reply.research, hooks=tuple(reply.hooks))

    async def full_script(
        self,
        topic: str,
        framework: ScriptFramework,
        tone: Tone,
        profile: ChannelProfile,
        research: str,
        selected_hook: str,
    ) -> tuple[SectionDraft, ...]:
        """Generate a sectioned script.

        Returns:
            The script sections in speaking order.

        Raises:
            ValueError: If ``topic`` or ``selected_hook`` is blank.
            GenerationFailed: When retries are exhausted.
        """
        request = build_script_request(
            topic,
            framework,
            tone,
            profile,
            research,
            selected_hook,
            model=self.config.pro_model,
            thinking_budget=self.config.thinking_budget,
        )
        plan = (
            FallbackVariant(
                name="script.generate",
                operation=self._structured_call(request, ScriptReply),
                policy=self.policies.full_script,
            ),
        )

        with self._telemetry(T_SCRIPT, model=request.model_name):
            try:
                reply = await self._executor.run_plan(plan)
            except Exception as e:
                raise GenerationFailed("Failed to generate script", e) from e

        return tuple(SectionDraft(label=s.label, content=s.content) for s in reply.sections)

    async def regenerate_section(
        self, current_content: str, instruction: str, tone: Tone
    ) -> str:
        """Rewrite one section following ``instruction``.

        Returns:
            The replacement content.

        Raises:
            ValueError: If ``instruction`` is blank.
            RegenerationFailed: When retries are exhausted. Keeping the old
                content in that case is up to the caller.
        """
        request = build_rewrite_request(
            current_content, instruction, tone, model=self.config.flash_model
        )
        plan = (
            FallbackVariant(
                name="rewrite.section",
                operation=self._text_call(request),
                policy=self.policies.rewrite,
            ),
        )

        with self._telemetry(T_REWRITE, model=request.model_name):
            try:
                return await self._executor.run_plan(plan)
            except Exception as e:
                raise RegenerationFailed("Failed to regenerate section", e) from e


def create_generator(
    config: FrozenConfig | None = None,
    *,
    adapter: GenerationAdapter | None = None,
    policies: GenerationPolicies = DEFAULT_POLICIES,
) -> ScriptGenerator:
    """Create a generator, resolving configuration when none is given.

    This is the only place where ambient configuration is resolved.
    """
    final_config = config if config is not None else resolve_config().to_frozen()
    return ScriptGenerator(final_config, adapter, policies=policies)
