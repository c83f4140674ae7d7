"""Providers for OpenAI-compatible chat-completions APIs.

OpenAI, Gemini, DeepSeek, xAI Grok and Moonshot Kimi all accept the same
request shape, so one adapter built on the openai SDK serves them all and
each backend is a subclass carrying its defaults.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from layr.errors import ProviderErrorKind, classify_api_error, classify_status
from layr.llm.prompts import (
    PLAN_SYSTEM_PROMPT,
    REFINE_SYSTEM_PROMPT,
    build_json_plan_prompt,
    build_refine_prompt,
)
from layr.llm.providers.base import (
    LLMProvider,
    PlanOptions,
    ProviderConfig,
    ProviderType,
)

logger = logging.getLogger(__name__)

REFINE_MAX_TOKENS = 4000


class OpenAICompatibleProvider(LLMProvider):
    """Adapter for any backend speaking the chat-completions protocol.

    Requires an API key (from settings, env var, or passed directly).
    """

    default_base_url: str
    temperature: float = 0.7

    def __init__(
        self,
        config: ProviderConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize provider.

        Args:
            config: Credentials, model and endpoint overrides.
            http_client: Optional HTTP client handed to the SDK, used for
                proxies and tests.
        """
        super().__init__(config)
        self.base_url = self.config.base_url or self.default_base_url
        self._http_client = http_client
        logger.info(
            "%s initialized (model=%s, api_key_len=%d)",
            type(self).__name__,
            self.model,
            len(self.config.api_key or ""),
        )

    def _make_client(self, api_key: str) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key=api_key,
            base_url=self.base_url,
            organization=self.config.organization,
            max_retries=0,
            http_client=self._http_client,
        )

    def _get_client(self) -> AsyncOpenAI:
        """Get an async client, failing if no key is configured."""
        api_key = (self.config.api_key or "").strip()
        if not api_key:
            raise self.error(
                ProviderErrorKind.NOT_CONFIGURED,
                f"{self.display_name} API key required. Configure it in settings "
                "or set the provider's API key environment variable.",
            )
        return self._make_client(api_key)

    def _completion_params(self, max_tokens: int) -> dict[str, Any]:
        """Sampling parameters for a request."""
        return {"max_tokens": max_tokens, "temperature": self.temperature}

    async def _complete(self, system: str, user: str, max_tokens: int) -> str:
        """Run one chat completion and return the message text.

        Raises:
            ProviderError: On any transport, status or payload failure.
        """
        client = self._get_client()
        try:
            return await self._request_completion(client, system, user, max_tokens)
        finally:
            await self._release(client)

    async def _release(self, client: AsyncOpenAI) -> None:
        # A caller-supplied HTTP client outlives the SDK client
        if self._http_client is None:
            await client.close()

    async def _request_completion(
        self, client: AsyncOpenAI, system: str, user: str, max_tokens: int
    ) -> str:
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                **self._completion_params(max_tokens),
            )
        except openai.APIStatusError as e:
            logger.warning(
                "%s request failed with HTTP %d", self.display_name, e.status_code
            )
            raise self.error(
                classify_status(e.status_code), status_code=e.status_code
            ) from e
        except openai.APITimeoutError as e:
            raise self.error(ProviderErrorKind.TIMEOUT) from e
        except openai.APIConnectionError as e:
            logger.warning("%s connection error: %s", self.display_name, e)
            raise self.error(ProviderErrorKind.NETWORK) from e
        except openai.APIResponseValidationError as e:
            raise self.error(ProviderErrorKind.INVALID_RESPONSE) from e
        except openai.APIError as e:
            raise self.error(classify_api_error(e)) from e
        except ValueError as e:
            # Undecodable response body
            raise self.error(ProviderErrorKind.INVALID_RESPONSE) from e

        choices = getattr(response, "choices", None)
        if not choices:
            raise self.error(ProviderErrorKind.EMPTY_RESPONSE)
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise self.error(ProviderErrorKind.EMPTY_RESPONSE)

        logger.debug("%s returned %d chars", self.display_name, len(content))
        return content

    async def generate_plan(
        self, prompt: str, options: PlanOptions | None = None
    ) -> str:
        """Generate a JSON plan."""
        options = options or PlanOptions()
        logger.info(
            "%s: generating plan (size=%s, type=%s)",
            self.display_name,
            options.size.value,
            options.project_type.value,
        )
        user_prompt = build_json_plan_prompt(self.bound_prompt(prompt), options)
        return await self._complete(
            PLAN_SYSTEM_PROMPT, user_prompt, options.size.max_tokens
        )

    async def refine_section(
        self, section: str, instruction: str, context: str
    ) -> str:
        """Rewrite one section of a plan."""
        section, instruction, context = self.bound_refinement(
            section, instruction, context
        )
        return await self._complete(
            REFINE_SYSTEM_PROMPT,
            build_refine_prompt(section, instruction, context),
            REFINE_MAX_TOKENS,
        )

    async def validate_api_key(self, api_key: str) -> bool:
        """Probe the models endpoint with a key."""
        if not api_key or not api_key.strip():
            return False
        client = self._make_client(api_key.strip())
        try:
            await client.models.list()
        except openai.APIError as e:
            logger.info(
                "%s key validation failed: %s", self.display_name, type(e).__name__
            )
            return False
        finally:
            await self._release(client)
        return True

    async def is_available(self) -> bool:
        """Available when a non-empty API key is configured."""
        return bool(self.config.api_key and self.config.api_key.strip())


class OpenAIProvider(OpenAICompatibleProvider):
    """OpenAI reasoning models (o3 family)."""

    provider_type = ProviderType.OPENAI
    display_name = "OpenAI o3"
    default_model = "o3"
    default_base_url = "https://api.openai.com/v1"
    supported_models = ("o3", "o3-mini")

    def _completion_params(self, max_tokens: int) -> dict[str, Any]:
        # Reasoning models reject max_tokens and custom temperatures
        return {"max_completion_tokens": max_tokens}


class GeminiProvider(OpenAICompatibleProvider):
    """Google Gemini through its OpenAI-compatible endpoint."""

    provider_type = ProviderType.GEMINI
    display_name = "Gemini"
    default_model = "gemini-2.5-flash"
    default_base_url = "https://generativelanguage.googleapis.com/v1beta/openai/"
    supported_models = ("gemini-2.5-flash", "gemini-2.5-pro", "gemini-2.0-flash")


class DeepSeekProvider(OpenAICompatibleProvider):
    """DeepSeek chat models."""

    provider_type = ProviderType.DEEPSEEK
    display_name = "DeepSeek"
    default_model = "deepseek-v3.1"
    default_base_url = "https://api.deepseek.com/v1"
    supported_models = ("deepseek-v3.1", "deepseek-chat", "deepseek-coder")


class GrokProvider(OpenAICompatibleProvider):
    """xAI Grok models."""

    provider_type = ProviderType.GROK
    display_name = "Grok"
    default_model = "grok-4"
    default_base_url = "https://api.x.ai/v1"
    supported_models = ("grok-4", "grok-3", "grok-2")


class KimiProvider(OpenAICompatibleProvider):
    """Moonshot Kimi models."""

    provider_type = ProviderType.KIMI
    display_name = "Kimi"
    default_model = "kimi-k2-0905"
    default_base_url = "https://api.moonshot.cn/v1"
    supported_models = ("kimi-k2-0905",)
