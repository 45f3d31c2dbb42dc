"""File-based configuration loading with profile support.

Two TOML sources are read:

- project: ``[tool.scriptarc]`` in the nearest ``pyproject.toml``
  (profiles under ``[tool.scriptarc.profiles.<name>]``)
- home: ``~/.config/scriptarc.toml`` or the path in ``SCRIPTARC_CONFIG_HOME``
  (profiles under ``[profiles.<name>]``)
"""

import os
from pathlib import Path
import tomllib
from typing import Any


class ConfigFileError(Exception):
    """Raised when a configuration file exists but cannot be used."""

    def __init__(
        self, file_path: Path, message: str, cause: Exception | None = None
    ) -> None:
        """Initialize with file path, message, and optional cause."""
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")


def _select_profile(
    section: dict[str, Any], profile: str | None, path: Path
) -> dict[str, Any]:
    if profile:
        profiles = section.get("profiles", {})
        if profile not in profiles:
            raise ConfigFileError(
                path,
                f"Profile '{profile}' not found. Available profiles: {list(profiles)}",
            )
        return dict(profiles[profile])
    config = dict(section)
    config.pop("profiles", None)
    return config


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open(mode="rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigFileError(path, f"Failed to parse TOML: {e}", cause=e) from e


class FileConfigLoader:
    """Loads configuration from project and home TOML files."""

    def load_project_config(
        self, project_root: Path | None = None, profile: str | None = None
    ) -> dict[str, Any]:
        """Load ``[tool.scriptarc]`` from the nearest pyproject.toml.

        Returns:
            Configuration values; empty when there is no file or section.

        Raises:
            ConfigFileError: If the file cannot be parsed or the profile is missing.
        """
        pyproject_path = self.find_pyproject_toml(project_root)
        if pyproject_path is None:
            return {}
        section = _read_toml(pyproject_path).get("tool", {}).get("scriptarc", {})
        if not section:
            return {}
        return _select_profile(section, profile, pyproject_path)

    def load_home_config(self, profile: str | None = None) -> dict[str, Any]:
        """Load the home configuration file.

        Raises:
            ConfigFileError: If the file cannot be parsed or the profile is missing.
        """
        path = self.home_config_path()
        if not path.exists():
            return {}
        return _select_profile(_read_toml(path), profile, path)

    def list_available_profiles(
        self, project_root: Path | None = None
    ) -> dict[str, list[str]]:
        """Profile names found in the project and home files."""
        profiles: dict[str, list[str]] = {"project": [], "home": []}
        pyproject_path = self.find_pyproject_toml(project_root)
        if pyproject_path is not None:
            try:
                section = _read_toml(pyproject_path).get("tool", {}).get("scriptarc", {})
                profiles["project"] = list(section.get("profiles", {}))
            except ConfigFileError:
                pass
        home = self.home_config_path()
        if home.exists():
            try:
                profiles["home"] = list(_read_toml(home).get("profiles", {}))
            except ConfigFileError:
                pass
        return profiles

    def find_pyproject_toml(self, start_dir: Path | None = None) -> Path | None:
        """Search ``start_dir`` (default: cwd) and its parents for pyproject.toml."""
        current = Path(start_dir or Path.cwd()).resolve()
        while True:
            candidate = current / "pyproject.toml"
            if candidate.exists():
                return candidate
            if current == current.parent:
                return None
            current = current.parent

    def home_config_path(self) -> Path:
        """Path of the home configuration file."""
        override = os.getenv("SCRIPTARC_CONFIG_HOME")
        if override:
            return Path(override)
        return Path.home() / ".config" / "scriptarc.toml"
