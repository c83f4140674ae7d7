"""Base class for AI plan providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Self

from layr.errors import ProviderError, ProviderErrorKind, describe_error_kind
from layr.models.options import PlanOptions, ProviderConfig
from layr.models.plan import GeneratedBy

# Input bounds applied before any text is sent upstream
MAX_SECTION_CHARS = 50_000
MAX_CONTEXT_CHARS = 50_000
MAX_INSTRUCTION_CHARS = 2_000
MAX_PROMPT_CHARS = 10_000


class ProviderType(Enum):
    """Closed set of supported backends."""

    GROQ = "groq"  # hosted proxy, no client-side credential
    OPENAI = "openai"
    GEMINI = "gemini"
    DEEPSEEK = "deepseek"
    GROK = "grok"
    KIMI = "kimi"
    OLLAMA = "ollama"

    @classmethod
    def parse(cls, value: str) -> Self | None:
        """Match a type name case-insensitively, returning None if unknown."""
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return None


class OutputMode(Enum):
    """Shape of the raw text an adapter returns."""

    JSON = "json"
    MARKDOWN = "markdown"


def truncate(text: str, limit: int) -> str:
    """Clip text to at most ``limit`` characters."""
    if len(text) <= limit:
        return text
    return text[:limit]


class LLMProvider(ABC):
    """Abstract base class for plan providers.

    Every adapter exposes the same five operations so the planner never
    needs to know which backend it is talking to. Transport failures are
    always raised as ProviderError.
    """

    provider_type: ProviderType
    display_name: str
    output_mode: OutputMode = OutputMode.JSON
    generated_by: GeneratedBy = GeneratedBy.AI
    default_model: str
    supported_models: tuple[str, ...] = ()

    def __init__(self, config: ProviderConfig | None = None) -> None:
        """Initialize provider.

        Args:
            config: Credentials and overrides. Missing values fall back to
                the adapter's defaults.
        """
        self.config = config or ProviderConfig()
        self.model = self.config.model or self.default_model

    @abstractmethod
    async def generate_plan(
        self, prompt: str, options: PlanOptions | None = None
    ) -> str:
        """Generate a plan for a project description.

        Returns:
            Raw model output: JSON text for structured adapters, markdown
            for markdown adapters.
        """

    @abstractmethod
    async def refine_section(
        self, section: str, instruction: str, context: str
    ) -> str:
        """Rewrite one plan section according to an instruction."""

    @abstractmethod
    async def validate_api_key(self, api_key: str) -> bool:
        """Probe the backend with a key. Never raises."""

    @abstractmethod
    async def is_available(self) -> bool:
        """Cheap check that the provider can be used. Never raises."""

    def list_supported_models(self) -> list[str]:
        """Static allowlist of model identifiers."""
        return list(self.supported_models)

    def error(
        self,
        kind: ProviderErrorKind,
        message: str | None = None,
        status_code: int | None = None,
    ) -> ProviderError:
        """Build a ProviderError tagged with this provider's name."""
        return ProviderError(
            message or describe_error_kind(kind, status_code),
            provider=self.display_name,
            kind=kind,
            status_code=status_code,
        )

    @staticmethod
    def bound_refinement(
        section: str, instruction: str, context: str
    ) -> tuple[str, str, str]:
        """Clip refinement inputs to their transmission limits."""
        return (
            truncate(section, MAX_SECTION_CHARS),
            truncate(instruction, MAX_INSTRUCTION_CHARS),
            truncate(context, MAX_CONTEXT_CHARS),
        )

    @staticmethod
    def bound_prompt(prompt: str) -> str:
        """Clip a user prompt to its transmission limit."""
        return truncate(prompt, MAX_PROMPT_CHARS)
