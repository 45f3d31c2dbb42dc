"""Exception hierarchy for scriptarc.

Transport and parsing failures are kept apart so callers can tell a dead
network from a model that answered with unusable text. The retry executor
treats both the same way; the distinction is for diagnostics.
"""

from __future__ import annotations


class ScriptArcError(Exception):
    """Base exception for scriptarc errors"""  # noqa: D415


class ConfigurationError(ScriptArcError):
    """Raised when configuration cannot be resolved or validated"""  # noqa: D415


class TransportError(ScriptArcError):
    """The remote call itself could not complete (network, auth, rate limit)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialize with an optional HTTP-like status code from the provider."""
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(ScriptArcError):
    """The remote call completed but its text could not be turned into data."""

    def __init__(self, message: str, *, raw_text: str | None = None) -> None:
        """Initialize with the offending raw text for diagnostics."""
        super().__init__(message)
        self.raw_text = raw_text


class GenerationFailed(ScriptArcError):
    """Terminal failure of a builder after retries and fallbacks ran out."""

    def __init__(self, message: str, last_error: BaseException) -> None:
        """Initialize with the last underlying error.

        Args:
            message: Human-readable description of the failed operation.
            last_error: The error raised by the final attempt.
        """
        super().__init__(f"{message}: {last_error}")
        self.last_error = last_error


class RegenerationFailed(GenerationFailed):
    """Terminal failure of a section rewrite."""


class PlanLimitError(ScriptArcError):
    """Raised when a studio action is not allowed on the user's plan"""  # noqa: D415
