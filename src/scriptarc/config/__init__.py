"""Configuration for scriptarc.

Resolve once, freeze, then pass the frozen value around:

    from scriptarc.config import resolve_config
    config = resolve_config().to_frozen()
"""

from .api import list_available_profiles, load_frozen_config, resolve_config
from .file_loader import ConfigFileError, FileConfigLoader
from .resolver import ConfigResolver
from .schema import ScriptArcSettings
from .scope import config_override, config_scope, get_ambient_resolved_config
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

__all__ = [
    "ConfigFileError",
    "ConfigOrigin",
    "ConfigResolver",
    "FileConfigLoader",
    "FrozenConfig",
    "ResolvedConfig",
    "ScriptArcSettings",
    "SourceMap",
    "config_override",
    "config_scope",
    "get_ambient_resolved_config",
    "list_available_profiles",
    "load_frozen_config",
    "resolve_config",
]
