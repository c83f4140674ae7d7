"""Maps configured provider names to adapter instances."""

from __future__ import annotations

import logging
from collections.abc import Callable

from layr.errors import UnsupportedProviderError
from layr.llm.providers.base import LLMProvider, ProviderConfig, ProviderType
from layr.llm.providers.ollama import OllamaProvider
from layr.llm.providers.openai_compat import (
    DeepSeekProvider,
    GeminiProvider,
    GrokProvider,
    KimiProvider,
    OpenAIProvider,
)
from layr.llm.providers.proxy import ProxyProvider

logger = logging.getLogger(__name__)

ProviderConstructor = Callable[[ProviderConfig], LLMProvider]

BUILTIN_PROVIDERS: dict[ProviderType, ProviderConstructor] = {
    ProviderType.GROQ: ProxyProvider,
    ProviderType.OPENAI: OpenAIProvider,
    ProviderType.GEMINI: GeminiProvider,
    ProviderType.DEEPSEEK: DeepSeekProvider,
    ProviderType.GROK: GrokProvider,
    ProviderType.KIMI: KimiProvider,
    ProviderType.OLLAMA: OllamaProvider,
}


class ProviderFactory:
    """Registry of provider constructors keyed by lowercase type name.

    Holds no session state, so one instance can be shared process-wide.
    """

    def __init__(self) -> None:
        self._registry: dict[str, ProviderConstructor] = {
            provider_type.value: constructor
            for provider_type, constructor in BUILTIN_PROVIDERS.items()
        }

    def register(
        self, type_name: str | ProviderType, constructor: ProviderConstructor
    ) -> None:
        """Add or replace a provider constructor."""
        key = _key(type_name)
        self._registry[key] = constructor
        logger.debug("Registered provider %s", key)

    def supported_providers(self) -> list[str]:
        """Registered type names in registration order."""
        return list(self._registry)

    def create_provider(
        self,
        type_name: str | ProviderType,
        config: ProviderConfig | None = None,
    ) -> LLMProvider:
        """Construct the adapter registered under a type name.

        Matching ignores case and surrounding whitespace.

        Raises:
            UnsupportedProviderError: If no provider is registered under the
                name. The error carries the name exactly as given.
        """
        constructor = self._registry.get(_key(type_name))
        if constructor is None:
            raw = type_name.value if isinstance(type_name, ProviderType) else type_name
            raise UnsupportedProviderError(raw)
        provider = constructor(config or ProviderConfig())
        logger.info(
            "Created provider %s (model=%s)", provider.display_name, provider.model
        )
        return provider


def _key(type_name: str | ProviderType) -> str:
    if isinstance(type_name, ProviderType):
        return type_name.value
    return type_name.strip().lower()


# Process-wide default
_factory: ProviderFactory | None = None


def get_provider_factory() -> ProviderFactory:
    """Get the shared factory instance."""
    global _factory
    if _factory is None:
        _factory = ProviderFactory()
    return _factory
