"""Reply sanitization for structured and free-text model output."""

from .sanitizer import (
    clean_text_reply,
    extract_json_span,
    parse_structured,
    sanitize_reply,
    strip_code_fences,
)

__all__ = [
    "clean_text_reply",
    "extract_json_span",
    "parse_structured",
    "sanitize_reply",
    "strip_code_fences",
]
