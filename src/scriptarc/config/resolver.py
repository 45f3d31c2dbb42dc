"""Configuration resolution with precedence handling.

Precedence, highest first:
Programmatic > Environment (.env file below real env) > Project file >
Home file > Defaults
"""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import ValidationError

from scriptarc.core.exceptions import ConfigurationError

from .file_loader import ConfigFileError, FileConfigLoader
from .schema import ScriptArcSettings
from .types import ConfigOrigin, ResolvedConfig

log = logging.getLogger(__name__)

# Environment variable -> field. Later entries win, so SCRIPTARC_API_KEY
# takes precedence over the generic GEMINI_API_KEY.
ENV_VARS: tuple[tuple[str, str], ...] = (
    ("GEMINI_API_KEY", "api_key"),
    ("SCRIPTARC_API_KEY", "api_key"),
    ("SCRIPTARC_FLASH_MODEL", "flash_model"),
    ("SCRIPTARC_PRO_MODEL", "pro_model"),
    ("SCRIPTARC_THINKING_BUDGET", "thinking_budget"),
    ("SCRIPTARC_USE_REAL_API", "use_real_api"),
    ("SCRIPTARC_ENABLE_SEARCH", "enable_search"),
    ("SCRIPTARC_STATE_PATH", "state_path"),
)


class ConfigResolver:
    """Merges configuration sources into a validated ``ResolvedConfig``."""

    def __init__(self, file_loader: FileConfigLoader | None = None) -> None:
        """Initialize the resolver."""
        self.file_loader = file_loader or FileConfigLoader()

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        profile: str | None = None,
        use_env_file: str | Path | None = None,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources.

        Args:
            programmatic: Overrides with the highest precedence.
            profile: Profile name for file sources; defaults to SCRIPTARC_PROFILE.
            use_env_file: Optional .env file read below the real environment.
            project_root: Where to start looking for pyproject.toml.

        Raises:
            ConfigurationError: If a source is malformed or the merged values
                fail validation.
        """
        if profile is None:
            profile = os.getenv("SCRIPTARC_PROFILE")

        merged: dict[str, Any] = {}
        origin: dict[str, ConfigOrigin] = {}

        def apply(values: dict[str, Any], source: ConfigOrigin) -> None:
            for field, value in values.items():
                if field in ScriptArcSettings.model_fields:
                    merged[field] = value
                    origin[field] = source
                else:
                    log.debug("Ignoring unknown config field '%s' from %s", field, source)

        apply(ScriptArcSettings.defaults(), "default")

        try:
            apply(self.file_loader.load_home_config(profile=profile), "file")
        except ConfigFileError as e:
            # A broken home file should not block project-level configuration
            log.warning("Skipping home configuration: %s", e)

        try:
            apply(
                self.file_loader.load_project_config(
                    project_root=project_root, profile=profile
                ),
                "file",
            )
        except ConfigFileError as e:
            raise ConfigurationError(str(e)) from e

        apply(self._load_env(use_env_file), "env")

        if programmatic:
            apply(programmatic, "programmatic")

        try:
            settings = ScriptArcSettings.model_validate(merged)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

        return ResolvedConfig(**settings.to_dict(), origin=origin)

    def _load_env(self, env_file: str | Path | None) -> dict[str, Any]:
        environ: dict[str, str | None] = {}
        if env_file is not None:
            path = Path(env_file)
            if not path.exists():
                raise ConfigurationError(f"Environment file not found: {path}")
            environ.update(dotenv_values(path))
        environ.update(os.environ)

        values: dict[str, Any] = {}
        for env_var, field in ENV_VARS:
            raw = environ.get(env_var)
            if raw is not None and raw != "":
                values[field] = raw
        return values

    def list_available_profiles(
        self, project_root: Path | None = None
    ) -> dict[str, list[str]]:
        """Profile names available in project and home files."""
        return self.file_loader.list_available_profiles(project_root)
