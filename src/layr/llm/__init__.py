"""LLM provider layer for Layr."""
from __future__ import annotations

from .providers import LLMProvider, OutputMode, ProviderType

__all__ = [
    "LLMProvider",
    "OutputMode",
    "ProviderType",
]
