"""AI-assisted YouTube script generation with resilient model calls."""

import importlib.metadata
import logging

from scriptarc.config import FrozenConfig, resolve_config
from scriptarc.core.exceptions import (
    ConfigurationError,
    GenerationFailed,
    MalformedResponse,
    PlanLimitError,
    RegenerationFailed,
    ScriptArcError,
    TransportError,
)
from scriptarc.core.types import (
    ChannelProfile,
    FallbackVariant,
    GenerationRequest,
    ResearchBrief,
    RetryPolicy,
    ScriptFramework,
    SectionDraft,
    Tone,
)
from scriptarc.generator import (
    DEFAULT_POLICIES,
    GenerationPolicies,
    ScriptGenerator,
    create_generator,
)
from scriptarc.pipeline.retry import RetryExecutor, run_with_fallback, run_with_retry
from scriptarc.response.sanitizer import sanitize_reply
from scriptarc.studio import JSONStateStore, ScriptStudio, Tier, UserState, open_studio
from scriptarc.telemetry import TelemetryContext, TelemetryReporter

# Version handling
try:
    __version__ = importlib.metadata.version("scriptarc")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Set up a null handler for the library's root logger.
# This prevents 'No handler found' errors if the consuming app has no logging configured.
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public API
__all__ = [  # noqa: RUF022
    # Generator
    "ScriptGenerator",
    "create_generator",
    "GenerationPolicies",
    "DEFAULT_POLICIES",
    # Execution
    "RetryExecutor",
    "run_with_retry",
    "run_with_fallback",
    "sanitize_reply",
    # Studio
    "ScriptStudio",
    "JSONStateStore",
    "UserState",
    "Tier",
    "open_studio",
    # Configuration
    "FrozenConfig",
    "resolve_config",
    # Telemetry (extension points)
    "TelemetryContext",
    "TelemetryReporter",
    # Types
    "ChannelProfile",
    "FallbackVariant",
    "GenerationRequest",
    "ResearchBrief",
    "RetryPolicy",
    "ScriptFramework",
    "SectionDraft",
    "Tone",
    # Exceptions
    "ScriptArcError",
    "ConfigurationError",
    "TransportError",
    "MalformedResponse",
    "GenerationFailed",
    "RegenerationFailed",
    "PlanLimitError",
]
