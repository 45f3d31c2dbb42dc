"""Provider adapters for remote generation."""

from .base import GenerationAdapter
from .mock import MockGenerationAdapter

__all__ = ["GenerationAdapter", "MockGenerationAdapter"]
