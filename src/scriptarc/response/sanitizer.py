"""Recover structured data from loosely formatted model replies.

Models asked for JSON still wrap it in code fences or surround it with a
sentence of prose, especially when search grounding is on and the provider
cannot enforce a response schema. The sanitizer strips fences, slices the
outermost brace span and parses it. Anything it cannot recover raises
``MalformedResponse``; it never returns partial data.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import BaseModel, ValidationError

from scriptarc.core.exceptions import MalformedResponse

log = logging.getLogger(__name__)

# Opening fences may carry a language tag (```json, ```JSON5, ...).
_FENCE_RE = re.compile(r"```[A-Za-z0-9_+-]*")

_PREVIEW_CHARS = 200


def strip_code_fences(text: str) -> str:
    """Remove every triple-backtick fence marker, keeping the fenced body."""
    return _FENCE_RE.sub("", text)


def extract_json_span(text: str) -> str:
    """Return the text between the first '{' and the last '}' (inclusive).

    Raises:
        MalformedResponse: If the text is empty or has no such span.
    """
    if not text or not text.strip():
        raise MalformedResponse("Empty response from model", raw_text=text)

    cleaned = strip_code_fences(text).strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise MalformedResponse(
            "No JSON object found in model response", raw_text=text
        )
    return cleaned[start : end + 1]


def sanitize_reply(text: str | None) -> dict[str, Any]:
    """Parse the JSON object embedded in a raw model reply.

    Args:
        text: Raw reply text; may be None or empty.

    Returns:
        The parsed JSON object.

    Raises:
        MalformedResponse: If the text is empty, has no brace span, or the
            span is not valid JSON.
    """
    raw = text or ""
    span = extract_json_span(raw)
    try:
        data = json.loads(span)
    except json.JSONDecodeError as e:
        log.debug("Unparseable reply span: %s", span[:_PREVIEW_CHARS])
        raise MalformedResponse(
            f"Failed to parse JSON response: {e}", raw_text=raw
        ) from e
    return data


def parse_structured[M: BaseModel](text: str | None, schema: type[M]) -> M:
    """Sanitize a raw reply and validate it against ``schema``.

    Missing or mistyped required fields are treated exactly like unparseable
    text: the whole reply is rejected.

    Raises:
        MalformedResponse: On any sanitization or validation failure.
    """
    data = sanitize_reply(text)
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise MalformedResponse(
            f"Response does not match {schema.__name__}: "
            f"{e.error_count()} validation error(s)",
            raw_text=text,
        ) from e


def clean_text_reply(text: str | None) -> str:
    """Normalize a free-text reply, rejecting empty output.

    Fence markers are removed because rewrite replies occasionally come back
    fenced even though plain text was requested.

    Raises:
        MalformedResponse: If nothing but whitespace remains.
    """
    cleaned = strip_code_fences(text or "").strip()
    if not cleaned:
        raise MalformedResponse("Empty response from model", raw_text=text)
    return cleaned
