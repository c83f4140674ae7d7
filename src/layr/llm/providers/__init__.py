"""AI provider implementations."""
from __future__ import annotations

from layr.llm.providers.base import (
    LLMProvider,
    OutputMode,
    ProviderType,
)

__all__ = [
    "LLMProvider",
    "OutputMode",
    "ProviderType",
]
