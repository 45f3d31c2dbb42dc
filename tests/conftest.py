"""
Global test configuration with support for different test types.
"""

from collections.abc import Callable, Generator
from contextlib import contextmanager, suppress
import dataclasses
import logging
import os
from pathlib import Path
from typing import Any

import pytest

from scriptarc.config import FrozenConfig
from scriptarc.core.types import ChannelProfile, GenerationRequest, RetryPolicy, Tone
from scriptarc.generator import GenerationPolicies, ScriptGenerator
from scriptarc.telemetry import InMemoryReporter, TelemetryContext

_ENV_PREFIXES = ("SCRIPTARC_", "GEMINI_")


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-in escape hatch: mark a test with @pytest.mark.allow_dotenv
    to permit .env loading for that specific test.
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_env(request, monkeypatch):
    """Ensure a clean SCRIPTARC_*/GEMINI_* environment for each test.

    Escape hatches:
      - @pytest.mark.allow_env_pollution: keep current env unchanged
      - tests marked with @pytest.mark.api bypass isolation so the real
        environment can be used when explicitly running API tests.
    """
    if request.node.get_closest_marker("allow_env_pollution") or (
        "api" in request.node.keywords
    ):
        return

    for key in list(os.environ.keys()):
        if key.startswith(_ENV_PREFIXES):
            monkeypatch.delenv(key, raising=False)
    # Avoid DEBUG toggles affecting telemetry
    monkeypatch.delenv("DEBUG", raising=False)


@pytest.fixture(autouse=True)
def neutral_home_config(request, monkeypatch, tmp_path):
    """Point the home config path at an isolated temp file by default.

    Escape hatch: mark test with @pytest.mark.allow_real_home_config to use
    the real path.
    """
    if request.node.get_closest_marker("allow_real_home_config"):
        return

    fake_home_dir = tmp_path / "home_config_isolated"
    fake_home_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("SCRIPTARC_CONFIG_HOME", str(fake_home_dir / "scriptarc.toml"))


@pytest.fixture
def isolated_config_sources(tmp_path, monkeypatch):
    """Isolate configuration sources and seed them with explicit content.

    Returns a context manager factory; inside it the working directory is a
    temp project whose pyproject.toml holds ``pyproject_content``.
    """

    @contextmanager
    def _setup(
        *,
        pyproject_content: str = "",
        home_content: str = "",
        env_vars: dict[str, str] | None = None,
    ) -> Generator[Path]:
        project_dir = tmp_path / "project"
        project_dir.mkdir(exist_ok=True)
        (project_dir / "pyproject.toml").write_text(pyproject_content)

        home_file = tmp_path / "home_config_isolated" / "scriptarc.toml"
        home_file.parent.mkdir(parents=True, exist_ok=True)
        if home_content:
            home_file.write_text(home_content)
        monkeypatch.setenv("SCRIPTARC_CONFIG_HOME", str(home_file))

        for key, value in (env_vars or {}).items():
            monkeypatch.setenv(key, value)

        monkeypatch.chdir(project_dir)
        yield project_dir

    return _setup


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Sets the log level for noisy external libraries to WARNING."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("google_genai").setLevel(logging.WARNING)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with mocked APIs",
        "api: Real API integration tests (requires API key)",
        "allow_dotenv: Permit .env loading",
        "allow_env_pollution: Keep the real environment",
        "allow_real_home_config: Read the real home config file",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


def pytest_collection_modifyitems(config, items):  # noqa: ARG001
    """Automatically skip API tests when API key is unavailable."""
    if not (
        (os.getenv("SCRIPTARC_API_KEY") or os.getenv("GEMINI_API_KEY"))
        and os.getenv("ENABLE_API_TESTS") == "1"
    ):
        skip_api = pytest.mark.skip(
            reason="API tests require SCRIPTARC_API_KEY or GEMINI_API_KEY and ENABLE_API_TESTS=1",
        )
        for item in items:
            if "api" in item.keywords:
                item.add_marker(skip_api)


# --- Core Fixtures ---


class RecordingSleep:
    """Async sleep double that records requested delays without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class ScriptedAdapter:
    """Adapter double that replays a script of replies and errors.

    Each entry is either a string (returned) or an exception (raised). The
    last entry repeats once the script runs out.
    """

    def __init__(self, *replies: str | Exception) -> None:
        self._replies = list(replies)
        self.calls: list[GenerationRequest] = []

    async def generate(self, request: GenerationRequest) -> str:
        self.calls.append(request)
        index = min(len(self.calls) - 1, len(self._replies) - 1)
        reply = self._replies[index]
        if isinstance(reply, Exception):
            raise reply
        return reply


class RoutingAdapter:
    """Adapter double that picks a handler by whether search is enabled."""

    def __init__(
        self,
        *,
        search: Callable[[GenerationRequest], str],
        offline: Callable[[GenerationRequest], str],
    ) -> None:
        self._search = search
        self._offline = offline
        self.calls: list[GenerationRequest] = []

    async def generate(self, request: GenerationRequest) -> str:
        self.calls.append(request)
        handler = self._search if request.use_search else self._offline
        return handler(request)


@pytest.fixture
def mock_api_key():
    """Provide a consistent, fake API key for tests."""
    return "test_api_key_12345_67890_abcdef_ghijkl"


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def frozen_config(tmp_path) -> FrozenConfig:
    """Offline configuration with search enabled."""
    return FrozenConfig(
        api_key=None,
        flash_model="flash-test",
        pro_model="pro-test",
        thinking_budget=4000,
        use_real_api=False,
        enable_search=True,
        state_path=tmp_path / "state.json",
    )


@pytest.fixture
def fast_policies() -> GenerationPolicies:
    """The default policy shapes; backoff is never awaited with recording_sleep."""
    return GenerationPolicies(
        search_research=RetryPolicy(max_attempts=1, initial_delay=1.0),
        offline_research=RetryPolicy(max_attempts=3, initial_delay=2.0),
        full_script=RetryPolicy(max_attempts=3, initial_delay=1.0),
        rewrite=RetryPolicy(max_attempts=3, initial_delay=1.0),
    )


@pytest.fixture
def reporter() -> InMemoryReporter:
    return InMemoryReporter()


@pytest.fixture
def make_generator(frozen_config, fast_policies, recording_sleep, reporter):
    """Factory building a generator around a given adapter double."""

    def _make(adapter: Any, **config_overrides: Any) -> ScriptGenerator:
        config = dataclasses.replace(frozen_config, **config_overrides)
        return ScriptGenerator(
            config,
            adapter,
            policies=fast_policies,
            sleep=recording_sleep,
            telemetry=TelemetryContext(reporter),
        )

    return _make


@pytest.fixture
def profile() -> ChannelProfile:
    return ChannelProfile(
        id="p1",
        name="Deep Space",
        niche="Astronomy",
        target_audience="Curious adults",
        default_tone=Tone.DRAMATIC,
    )


@pytest.fixture
def scripted_adapter() -> type[ScriptedAdapter]:
    """The ``ScriptedAdapter`` class, for building replay doubles in tests."""
    return ScriptedAdapter


@pytest.fixture
def routing_adapter() -> type[RoutingAdapter]:
    """The ``RoutingAdapter`` class, for search/offline split doubles."""
    return RoutingAdapter
