"""Public entry points for configuration resolution."""

from pathlib import Path
from typing import Any

from .resolver import ConfigResolver
from .scope import get_ambient_resolved_config
from .types import FrozenConfig, ResolvedConfig

_resolver = ConfigResolver()


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    profile: str | None = None,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Inside a ``config_scope`` the scoped config is returned (with
    ``programmatic`` applied on top) and no other source is read.

    Example:
        config = resolve_config({"use_real_api": True, "api_key": "..."})
        frozen = config.to_frozen()

    Raises:
        ConfigurationError: If a source is malformed or validation fails.
    """
    ambient = get_ambient_resolved_config()
    if ambient is not None:
        return ambient.with_overrides(**programmatic) if programmatic else ambient
    return _resolver.resolve(
        programmatic=programmatic,
        profile=profile,
        use_env_file=use_env_file,
        project_root=project_root,
    )


def load_frozen_config(**overrides: Any) -> FrozenConfig:
    """Resolve and freeze in one step."""
    return resolve_config(overrides or None).to_frozen()


def list_available_profiles(project_root: Path | None = None) -> dict[str, list[str]]:
    """List configuration profiles from project and home files."""
    return _resolver.list_available_profiles(project_root)
