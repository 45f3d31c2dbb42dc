"""Core configuration data types.

Configuration is resolved once into a ``ResolvedConfig`` (values plus the
origin of each value) and frozen into a ``FrozenConfig`` that the generator
reads by value. Neither object is ever mutated.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, NamedTuple

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]

FIELD_ORDER = (
    "api_key",
    "flash_model",
    "pro_model",
    "thinking_budget",
    "use_real_api",
    "enable_search",
    "state_path",
)


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources, before freezing."""

    api_key: str | None
    flash_model: str
    pro_model: str
    thinking_budget: int
    use_real_api: bool
    enable_search: bool
    state_path: Path

    # Where each field value came from
    origin: SourceMap

    def __str__(self) -> str:
        """String representation with redacted API key for safe logging."""
        api_key_display = "[REDACTED]" if self.api_key else None
        return (
            f"ResolvedConfig(api_key={api_key_display!r}, "
            f"flash_model={self.flash_model!r}, pro_model={self.pro_model!r}, "
            f"thinking_budget={self.thinking_budget!r}, "
            f"use_real_api={self.use_real_api!r}, "
            f"enable_search={self.enable_search!r}, "
            f"state_path={str(self.state_path)!r}, origin={dict(self.origin)!r})"
        )

    def __repr__(self) -> str:
        """Repr with redacted API key for safe debugging."""
        return self.__str__()

    def to_frozen(self) -> "FrozenConfig":
        """Drop audit metadata and return the immutable runtime config."""
        return FrozenConfig(
            api_key=self.api_key,
            flash_model=self.flash_model,
            pro_model=self.pro_model,
            thinking_budget=self.thinking_budget,
            use_real_api=self.use_real_api,
            enable_search=self.enable_search,
            state_path=self.state_path,
        )

    def with_overrides(self, **overrides: object) -> "ResolvedConfig":
        """Return a copy with programmatic overrides applied.

        Unknown fields are ignored. The origin of every overridden field becomes
        ``"programmatic"``.
        """
        new_values = self._asdict()
        new_origin = dict(self.origin)
        for field, value in overrides.items():
            if field in FIELD_ORDER:
                new_values[field] = value
                new_origin[field] = "programmatic"
        new_values["origin"] = new_origin
        return ResolvedConfig(**new_values)

    def audit(self) -> str:
        """Redacted report of each field's value and origin."""
        lines = []
        for field in FIELD_ORDER:
            origin = self.origin.get(field, "default")
            if field == "api_key":
                value_display = (
                    f"{origin}:None" if self.api_key is None else f"{origin}:<redacted>"
                )
            elif origin == "env":
                value_display = f"env:SCRIPTARC_{field.upper()}={getattr(self, field)}"
            else:
                value_display = f"{origin}:{getattr(self, field)}"
            lines.append(f"{field}: {value_display}")
        return "\n".join(lines)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration handed to the generator and studio."""

    api_key: str | None
    flash_model: str
    pro_model: str
    thinking_budget: int
    use_real_api: bool
    enable_search: bool
    state_path: Path

    def __str__(self) -> str:
        """String representation with redacted API key for safe logging."""
        api_key_display = "[REDACTED]" if self.api_key else None
        return (
            f"FrozenConfig(api_key={api_key_display!r}, "
            f"flash_model={self.flash_model!r}, pro_model={self.pro_model!r}, "
            f"thinking_budget={self.thinking_budget!r}, "
            f"use_real_api={self.use_real_api!r}, "
            f"enable_search={self.enable_search!r}, "
            f"state_path={str(self.state_path)!r})"
        )

    def __repr__(self) -> str:
        """Representation with redacted API key for safe debugging."""
        return self.__str__()
