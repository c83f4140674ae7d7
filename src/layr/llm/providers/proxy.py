"""Provider for the hosted Layr proxy (Groq models).

The proxy holds the upstream API key server-side, so clients send no
credential at all. It returns a finished markdown plan rather than JSON.
"""

from __future__ import annotations

import logging
from datetime import datetime

import httpx

from layr.errors import ProviderErrorKind
from layr.llm.prompts import (
    REFINE_SYSTEM_PROMPT,
    build_markdown_system_prompt,
    build_refine_prompt,
)
from layr.llm.providers.base import (
    OutputMode,
    PlanOptions,
    ProviderConfig,
    ProviderType,
)
from layr.llm.providers.http import HTTPProvider

logger = logging.getLogger(__name__)

DEFAULT_PROXY_URL = "https://layr-api.vercel.app/api/chat"

REFINE_MAX_TOKENS = 4000


class ProxyProvider(HTTPProvider):
    """Groq-hosted models reached through the Layr proxy."""

    provider_type = ProviderType.GROQ
    display_name = "Groq"
    output_mode = OutputMode.MARKDOWN
    default_model = "llama-3.3-70b-versatile"
    supported_models = (
        "llama-3.3-70b-versatile",  # recommended
        "llama-3.1-70b-versatile",
        "llama-3.1-8b-instant",
        "mixtral-8x7b-32768",  # long context
        "gemma2-9b-it",
    )

    def __init__(
        self,
        config: ProviderConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(config, http_client)
        self.proxy_url = (self.config.base_url or DEFAULT_PROXY_URL).strip()
        logger.info(
            "ProxyProvider initialized (model=%s, url=%s)", self.model, self.proxy_url
        )

    def _require_proxy(self) -> None:
        if not self.proxy_url:
            raise self.error(
                ProviderErrorKind.NOT_CONFIGURED,
                "Layr AI backend proxy is not configured. "
                "Set LAYR_PROXY_URL or the groq base_url setting.",
            )

    async def _chat(self, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        self._require_proxy()
        payload = {
            "prompt": {"systemPrompt": system_prompt, "userPrompt": user_prompt},
            "model": self.model,
            "maxTokens": max_tokens,
        }
        data = await self._post_json(self.proxy_url, payload)

        if data.get("success") is False:
            logger.warning("Proxy reported failure for model %s", self.model)
            raise self.error(ProviderErrorKind.UNAVAILABLE)

        content = data.get("content")
        if content is not None and not isinstance(content, str):
            raise self.error(ProviderErrorKind.INVALID_RESPONSE)
        if not content or not content.strip():
            raise self.error(ProviderErrorKind.EMPTY_RESPONSE)

        usage = data.get("usage")
        if isinstance(usage, dict):
            logger.debug("Proxy usage: %s", usage)
        return content

    async def generate_plan(
        self, prompt: str, options: PlanOptions | None = None
    ) -> str:
        """Generate a markdown plan that begins with the watermark line."""
        options = options or PlanOptions()
        logger.info(
            "ProxyProvider: generating plan (size=%s, type=%s)",
            options.size.value,
            options.project_type.value,
        )
        system_prompt = build_markdown_system_prompt(options, datetime.now())
        return await self._chat(
            system_prompt, self.bound_prompt(prompt), options.size.max_tokens
        )

    async def refine_section(
        self, section: str, instruction: str, context: str
    ) -> str:
        """Rewrite one section of a plan."""
        section, instruction, context = self.bound_refinement(
            section, instruction, context
        )
        return await self._chat(
            f"{REFINE_SYSTEM_PROMPT}\n\n"
            f"{build_refine_prompt(section, instruction, context)}",
            instruction,
            REFINE_MAX_TOKENS,
        )

    async def validate_api_key(self, api_key: str) -> bool:
        """Keys live on the proxy, so only the proxy URL matters."""
        return await self.is_available()

    async def is_available(self) -> bool:
        """Available when a proxy URL is configured."""
        return bool(self.proxy_url)
