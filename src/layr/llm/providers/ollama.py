"""Provider for a locally hosted Ollama server."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from layr.errors import ProviderErrorKind
from layr.llm.prompts import (
    PLAN_SYSTEM_PROMPT,
    REFINE_SYSTEM_PROMPT,
    build_json_plan_prompt,
    build_refine_prompt,
)
from layr.llm.providers.base import PlanOptions, ProviderConfig, ProviderType
from layr.llm.providers.http import HTTPProvider
from layr.models.plan import GeneratedBy

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434"


class OllamaProvider(HTTPProvider):
    """Local models served by Ollama. No API key is involved."""

    provider_type = ProviderType.OLLAMA
    display_name = "Ollama"
    generated_by = GeneratedBy.AI_LOCAL
    default_model = "llama3"
    supported_models = ("llama3", "mistral", "codellama", "deepseek-coder")

    temperature = 0.7
    context_window = 4096

    def __init__(
        self,
        config: ProviderConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(config, http_client)
        self.base_url = (self.config.base_url or DEFAULT_OLLAMA_URL).rstrip("/")
        logger.info(
            "OllamaProvider initialized (model=%s, url=%s)", self.model, self.base_url
        )

    def _network_error_message(self) -> str | None:
        return (
            f"Cannot reach Ollama at {self.base_url}. "
            "Make sure `ollama serve` is running."
        )

    def _status_error_message(self, status_code: int, body: Any) -> str | None:
        if status_code == 404:
            return (
                f"Model '{self.model}' is not available locally. "
                f"Run `ollama pull {self.model}` and try again."
            )
        return None

    async def _generate(self, prompt: str, json_mode: bool) -> str:
        payload: dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": self.temperature},
        }
        if json_mode:
            payload["format"] = "json"
            payload["options"]["num_ctx"] = self.context_window

        data = await self._post_json(f"{self.base_url}/api/generate", payload)

        text = data.get("response")
        if not isinstance(text, str):
            raise self.error(ProviderErrorKind.INVALID_RESPONSE)
        if not text.strip():
            raise self.error(ProviderErrorKind.EMPTY_RESPONSE)
        logger.debug("Ollama returned %d chars", len(text))
        return text

    async def generate_plan(
        self, prompt: str, options: PlanOptions | None = None
    ) -> str:
        """Generate a JSON plan using Ollama's JSON mode."""
        options = options or PlanOptions()
        body = build_json_plan_prompt(self.bound_prompt(prompt), options)
        return await self._generate(f"{PLAN_SYSTEM_PROMPT}\n\n{body}", json_mode=True)

    async def refine_section(
        self, section: str, instruction: str, context: str
    ) -> str:
        """Rewrite one section of a plan."""
        section, instruction, context = self.bound_refinement(
            section, instruction, context
        )
        body = build_refine_prompt(section, instruction, context)
        return await self._generate(
            f"{REFINE_SYSTEM_PROMPT}\n\n{body}", json_mode=False
        )

    async def validate_api_key(self, api_key: str) -> bool:
        """Ollama has no keys; reachability is the only check."""
        return await self.is_available()

    async def is_available(self) -> bool:
        """Check that the server answers on /api/tags."""
        return await self._probe(f"{self.base_url}/api/tags")
