"""Deterministic offline adapter.

Used whenever the real API is disabled (the default). Replies are derived
from the request alone, so the same request always yields the same text, and
structured requests get a reply that satisfies their schema. Replies to
search-enabled requests are fenced and wrapped in a sentence of prose, the
way grounded replies tend to arrive.
"""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Any

from scriptarc.core.schemas import HOOK_COUNT, ResearchReply, ScriptReply

if TYPE_CHECKING:
    from scriptarc.core.types import GenerationRequest

_MOCK_PHASES = (
    "Introduction & Hook",
    "The Stakes",
    "Core Narrative",
    "Conclusion & Retention-CTA",
)


class MockGenerationAdapter:
    """Adapter that fabricates plausible replies without network access."""

    def __init__(self) -> None:
        """Initialize with an empty call log."""
        self.calls: list[GenerationRequest] = []

    async def generate(self, request: GenerationRequest) -> str:
        """Return a deterministic reply for ``request``."""
        self.calls.append(request)
        digest = hashlib.sha256(request.prompt.encode("utf-8")).hexdigest()[:8]
        schema = request.response_schema
        if schema is None:
            return f"[mock rewrite {digest}] {_last_paragraph(request.prompt)}"

        payload: dict[str, Any]
        if schema is ResearchReply:
            payload = {
                "research": f"Mock research summary ({digest}).",
                "hooks": [f"Mock hook {i + 1} ({digest})" for i in range(HOOK_COUNT)],
            }
        elif schema is ScriptReply:
            payload = {
                "sections": [
                    {"label": label, "content": f"Mock narration for {label} ({digest})."}
                    for label in _MOCK_PHASES
                ]
            }
        else:
            payload = {}

        body = json.dumps(payload)
        if request.use_search:
            return f"Here is what I found:\n```json\n{body}\n```\nLet me know!"
        return body


def _last_paragraph(text: str) -> str:
    paragraphs = [p.strip() for p in text.split("\n\n") if p.strip()]
    return paragraphs[-1] if paragraphs else text.strip()
