"""Core data types for generation requests and retry policy.

Everything here is immutable and created per call. Requests describe one
remote call; policies and fallback variants describe how that call is
executed. Domain value types shared by the builders and the studio layer
(frameworks, tones, channel profiles, section drafts) also live here.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
import typing

if typing.TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from pydantic import BaseModel

T = typing.TypeVar("T")


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


# --- Domain enums ---


class ScriptFramework(str, Enum):
    """Narrative structure requested for a full script."""

    DOCUMENTARY = "Documentary Style"
    STORYTELLING = "Narrative Storytelling"
    LISTICLE = "Top 10 / Listicle"
    EXPLAINER = "Educational Explainer"
    VIRAL_SHORT_LONG = "Short-to-Long Conversion"
    CASE_STUDY = "Case Study / deep Dive"


class Tone(str, Enum):
    """Voice the narration is written in."""

    AUTHORITATIVE = "Authoritative"
    DRAMATIC = "Dramatic"
    STORYTELLING = "Storytelling"
    CONVERSATIONAL = "Conversational"
    MINIMALIST = "Minimalist"
    VIRAL = "High Energy / Viral"


# --- Domain value types ---


@dataclasses.dataclass(frozen=True, slots=True)
class ChannelProfile:
    """A YouTube channel the scripts are written for."""

    id: str
    name: str
    niche: str
    target_audience: str
    default_tone: Tone = Tone.CONVERSATIONAL

    def __post_init__(self) -> None:
        # Plain tone labels (e.g. "Dramatic") are normalized to the enum.
        if not isinstance(self.default_tone, Tone):
            object.__setattr__(self, "default_tone", Tone(self.default_tone))


@dataclasses.dataclass(frozen=True, slots=True)
class SectionDraft:
    """One labelled section of a generated script."""

    label: str
    content: str


@dataclasses.dataclass(frozen=True, slots=True)
class ResearchBrief:
    """Topical research plus the hook variants offered to the writer."""

    research: str
    hooks: tuple[str, ...]


# --- Execution types ---


@dataclasses.dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Bounded retries with exponential backoff for one operation.

    ``max_attempts`` counts retries, so an operation runs at most
    ``max_attempts + 1`` times. The delay before retry ``k`` (1-based) is
    ``initial_delay * backoff_multiplier ** (k - 1)``.
    """

    max_attempts: int
    initial_delay: float = 1.0
    backoff_multiplier: float = 2.0

    def __post_init__(self) -> None:
        """Validate invariants so delays strictly increase."""
        _require(
            condition=isinstance(self.max_attempts, int)
            and not isinstance(self.max_attempts, bool),
            message="must be an int",
            field_name="max_attempts",
            exc=TypeError,
        )
        _require(
            condition=self.max_attempts >= 0,
            message="must be >= 0",
            field_name="max_attempts",
        )
        _require(
            condition=self.initial_delay > 0,
            message="must be > 0",
            field_name="initial_delay",
        )
        _require(
            condition=self.backoff_multiplier > 1,
            message="must be > 1",
            field_name="backoff_multiplier",
        )

    @property
    def total_invocations(self) -> int:
        """Upper bound on how many times the operation is invoked."""
        return self.max_attempts + 1

    def delay_for(self, retry_number: int) -> float:
        """Return the wait before the given retry (1-based)."""
        _require(
            condition=1 <= retry_number <= self.max_attempts,
            message=f"must be between 1 and {self.max_attempts}",
            field_name="retry_number",
        )
        return self.initial_delay * self.backoff_multiplier ** (retry_number - 1)

    def delays(self) -> tuple[float, ...]:
        """All backoff delays this policy can produce, in order."""
        return tuple(self.delay_for(k) for k in range(1, self.max_attempts + 1))


@dataclasses.dataclass(frozen=True, slots=True)
class GenerationRequest:
    """Description of a single remote generation call.

    ``response_schema`` is the pydantic model the reply must satisfy; when it
    is None the reply is free text. ``use_search`` toggles search grounding on
    the provider side.
    """

    model_name: str
    prompt: str
    system_instruction: str | None = None
    response_schema: type[BaseModel] | None = None
    use_search: bool = False
    thinking_budget: int | None = None

    def __post_init__(self) -> None:
        """Validate the request shape."""
        _require(
            condition=bool(self.model_name),
            message="must be a non-empty string",
            field_name="model_name",
        )
        _require(
            condition=isinstance(self.prompt, str) and self.prompt.strip() != "",
            message="must be a non-empty string",
            field_name="prompt",
        )
        if self.thinking_budget is not None:
            _require(
                condition=self.thinking_budget >= 0,
                message="must be >= 0",
                field_name="thinking_budget",
            )

    @property
    def is_structured(self) -> bool:
        """True when the reply is expected to carry structured data."""
        return self.response_schema is not None

    def with_search(self, enabled: bool) -> GenerationRequest:  # noqa: FBT001
        """Return a copy with search grounding switched on or off."""
        return dataclasses.replace(self, use_search=enabled)


@dataclasses.dataclass(frozen=True, slots=True)
class FallbackVariant[T]:
    """One entry of a fallback plan: a named operation and its retry policy."""

    name: str
    operation: Callable[[], Awaitable[T]]
    policy: RetryPolicy

    def __post_init__(self) -> None:
        """Validate the variant."""
        _require(
            condition=callable(self.operation),
            message="must be callable",
            field_name="operation",
            exc=TypeError,
        )


FallbackPlan = tuple[FallbackVariant[T], ...]
