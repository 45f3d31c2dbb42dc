"""Google GenAI adapter.

Translates a ``GenerationRequest`` into a ``generate_content`` call on the
async client and maps SDK/network failures to ``TransportError``.

Gemini 3 and later models accept search grounding together with JSON response
mode. Older models do not, so on those a search-enabled request is sent
without ``response_schema``; its prompt already spells out the JSON shape and
the sanitizer recovers it from the free-form reply.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
import httpx

from scriptarc.core.exceptions import ConfigurationError, TransportError

if TYPE_CHECKING:
    from scriptarc.core.types import GenerationRequest

log = logging.getLogger(__name__)

_MODEL_GENERATION = re.compile(r"gemini-(\d+)")


def supports_search_with_schema(model_name: str) -> bool:
    """Whether ``model_name`` accepts search grounding in JSON response mode."""
    match = _MODEL_GENERATION.search(model_name)
    return match is not None and int(match.group(1)) >= 3


class GoogleGenAIAdapter:
    """Adapter backed by ``google.genai.Client``."""

    def __init__(self, api_key: str | None, *, client: genai.Client | None = None):
        """Create the adapter.

        Args:
            api_key: Gemini API key; required unless ``client`` is given.
            client: Pre-built client, mainly for tests.
        """
        if client is None:
            if not api_key:
                raise ConfigurationError(
                    "An API key is required to use the Gemini API. "
                    "Set SCRIPTARC_API_KEY or GEMINI_API_KEY."
                )
            client = genai.Client(api_key=api_key)
        self._client = client

    def build_config(self, request: GenerationRequest) -> types.GenerateContentConfig:
        """Build the SDK config for ``request``."""
        options: dict[str, Any] = {}
        if request.system_instruction:
            options["system_instruction"] = request.system_instruction
        if request.use_search:
            options["tools"] = [types.Tool(google_search=types.GoogleSearch())]
        if request.response_schema is not None and (
            not request.use_search or supports_search_with_schema(request.model_name)
        ):
            options["response_mime_type"] = "application/json"
            options["response_schema"] = request.response_schema
        if request.thinking_budget is not None:
            options["thinking_config"] = types.ThinkingConfig(
                thinking_budget=request.thinking_budget
            )
        return types.GenerateContentConfig(**options)

    async def generate(self, request: GenerationRequest) -> str:
        """Send ``request`` and return the reply text."""
        config = self.build_config(request)
        log.debug(
            "Calling %s (search=%s, structured=%s)",
            request.model_name,
            request.use_search,
            request.is_structured,
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=request.model_name,
                contents=request.prompt,
                config=config,
            )
        except genai_errors.APIError as e:
            raise TransportError(
                f"Gemini API error {e.code}: {e.message or e.status}",
                status_code=e.code,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Network error calling Gemini API: {e}") from e
        return response.text or ""
