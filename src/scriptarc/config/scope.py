"""Configuration scoping for entry-time overrides.

A scope only affects ``resolve_config()`` calls made inside it. A
``FrozenConfig`` already handed to a generator never changes.
"""

from collections.abc import Generator
from contextlib import contextmanager
import contextvars
from typing import Any

from .types import ResolvedConfig

_ambient_resolved_config: contextvars.ContextVar[ResolvedConfig] = (
    contextvars.ContextVar("scriptarc_resolved_config")
)


def get_ambient_resolved_config() -> ResolvedConfig | None:
    """Return the config set by the innermost ``config_scope``, if any."""
    try:
        return _ambient_resolved_config.get()
    except LookupError:
        return None


@contextmanager
def config_scope(config: ResolvedConfig) -> Generator[None]:
    """Temporarily use ``config`` for resolution (async safe).

    Example:
        test_config = resolve_config().with_overrides(use_real_api=False)
        with config_scope(test_config):
            generator = create_generator()
    """
    token = _ambient_resolved_config.set(config)
    try:
        yield
    finally:
        _ambient_resolved_config.reset(token)


@contextmanager
def config_override(**overrides: Any) -> Generator[None]:
    """Temporarily apply programmatic overrides on top of the current config."""
    from .api import resolve_config

    with config_scope(resolve_config().with_overrides(**overrides)):
        yield
