"""
Configuration for real API integration tests.
"""

import os
import time

import pytest

from scriptarc.config import resolve_config
from scriptarc.generator import ScriptGenerator


@pytest.fixture(scope="session")
def real_api_key():
    api_key = os.getenv("SCRIPTARC_API_KEY") or os.getenv("GEMINI_API_KEY")
    if not api_key:
        pytest.skip("SCRIPTARC_API_KEY or GEMINI_API_KEY required for API tests")
    return api_key


@pytest.fixture
def real_generator(real_api_key):
    """Generator talking to the real Gemini API."""
    config = resolve_config({"use_real_api": True, "api_key": real_api_key}).to_frozen()
    return ScriptGenerator(config)


@pytest.fixture
def api_rate_limiter():
    """Ensure API tests don't exceed rate limits."""
    time.sleep(5)  # 5 second delay between API tests
    yield
    time.sleep(1)
