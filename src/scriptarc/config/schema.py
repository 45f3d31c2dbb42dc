"""Configuration schema and validation using Pydantic.

``ScriptArcSettings`` coerces raw values (strings from the environment or
TOML scalars) into typed settings with defaults. Reading it directly picks up
``SCRIPTARC_*`` environment variables; the resolver instead validates an
already merged mapping so precedence stays under its control.
"""

from pathlib import Path
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FLASH_MODEL = "gemini-3-flash-preview"
DEFAULT_PRO_MODEL = "gemini-3-pro-preview"
DEFAULT_THINKING_BUDGET = 4000


def _default_state_path() -> Path:
    return Path.home() / ".local" / "share" / "scriptarc" / "state.json"


class ScriptArcSettings(BaseSettings):
    """Pydantic settings schema for scriptarc."""

    model_config = SettingsConfigDict(
        env_prefix="SCRIPTARC_",
        env_file=None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        description="Google Gemini API key",
    )

    flash_model: str = Field(
        default=DEFAULT_FLASH_MODEL,
        description="Fast model used for research and section rewrites",
        min_length=1,
    )

    pro_model: str = Field(
        default=DEFAULT_PRO_MODEL,
        description="Model used for full script generation",
        min_length=1,
    )

    thinking_budget: int = Field(
        default=DEFAULT_THINKING_BUDGET,
        description="Thinking token budget for full script generation",
        ge=0,
    )

    use_real_api: bool = Field(
        default=False,
        description="Call the Gemini API instead of the offline mock",
    )

    enable_search: bool = Field(
        default=True,
        description="Try search-grounded research before offline research",
    )

    state_path: Path = Field(
        default_factory=_default_state_path,
        description="JSON file holding the studio user state",
    )

    @model_validator(mode="after")
    def validate_api_key_requirement(self) -> "ScriptArcSettings":
        """Ensure api_key is provided when use_real_api is True."""
        if self.use_real_api and not self.api_key:
            raise ValueError(
                "api_key is required when use_real_api=True. "
                "Set SCRIPTARC_API_KEY (or GEMINI_API_KEY), provide it in a "
                "config file, or pass it programmatically."
            )
        return self

    @classmethod
    def defaults(cls) -> dict[str, Any]:
        """Field defaults without consulting the environment."""
        return {
            name: info.get_default(call_default_factory=True)
            for name, info in cls.model_fields.items()
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary keyed by field name."""
        return {name: getattr(self, name) for name in type(self).model_fields}
