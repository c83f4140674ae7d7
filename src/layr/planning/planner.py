"""Plan generation pipeline.

Turns a project description into a canonical ProjectPlan:

    resolve provider -> cache lookup -> provider call -> extract/repair
    -> normalize -> cache store

Provider errors propagate unchanged. Only a response that arrived intact but
cannot be read as a plan is degraded into a fallback plan whose overview is
the raw text.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import datetime

from layr.errors import PlanParseError
from layr.llm.providers.base import LLMProvider, OutputMode, PlanOptions
from layr.models.plan import GeneratedBy, ProjectPlan
from layr.planning.cache import PlanCache
from layr.planning.extraction import parse_plan_payload
from layr.planning.markdown import plan_to_markdown
from layr.planning.validation import normalize_plan

logger = logging.getLogger(__name__)

FALLBACK_TITLE = "AI Generated Plan"
FALLBACK_REQUIREMENTS = ["See the overview for the complete generated plan"]

_TITLE_RE = re.compile(r"^#\s+(.+?)(?:\s+#+)?\s*$", re.MULTILINE)

ProviderResolver = Callable[[], LLMProvider]


def fallback_plan(
    raw_text: str,
    generated_by: GeneratedBy,
    title: str = FALLBACK_TITLE,
) -> ProjectPlan:
    """Wrap raw model output as the overview of a minimal plan."""
    return ProjectPlan(
        title=title,
        overview=raw_text.strip() or raw_text,
        requirements=list(FALLBACK_REQUIREMENTS),
        file_structure=[],
        next_steps=[],
        generated_at=datetime.now(),
        generated_by=generated_by,
    )


def markdown_plan(raw_text: str, generated_by: GeneratedBy) -> ProjectPlan:
    """Wrap a markdown document, titled by its first top-level heading."""
    match = _TITLE_RE.search(raw_text)
    title = match.group(1).strip() if match else FALLBACK_TITLE
    return fallback_plan(raw_text, generated_by, title=title)


class Planner:
    """Generates and refines plans against the active provider.

    The provider is resolved on every call so configuration changes take
    effect without rebuilding the planner. The cache is shared and must be
    passed in.
    """

    def __init__(
        self,
        provider: LLMProvider | ProviderResolver,
        cache: PlanCache,
        options: PlanOptions | None = None,
    ) -> None:
        """Initialize planner.

        Args:
            provider: A provider instance, or a zero-argument callable that
                returns the currently configured provider.
            cache: Plan cache shared across requests.
            options: Size and project-type hints for generation.
        """
        if isinstance(provider, LLMProvider):
            fixed = provider
            self._resolve: ProviderResolver = lambda: fixed
        else:
            self._resolve = provider
        self.cache = cache
        self.options = options or PlanOptions()

    def resolve_provider(self) -> LLMProvider:
        """Return the provider requests will go to."""
        return self._resolve()

    async def generate_plan(self, prompt: str) -> ProjectPlan:
        """Generate a plan for a project description.

        Raises:
            ProviderError: If the provider call fails.
            UnsupportedProviderError: If the configured provider is unknown.
        """
        provider = self.resolve_provider()

        cached = self.cache.get(prompt)
        if cached is not None:
            logger.info("Returning cached plan for prompt (%d chars)", len(prompt))
            return cached

        logger.info(
            "Generating plan with %s (%d char prompt)",
            provider.display_name,
            len(prompt),
        )
        raw = await provider.generate_plan(prompt, self.options)

        # No awaits below: a cancelled request never reaches the cache
        if provider.output_mode is OutputMode.MARKDOWN:
            plan = markdown_plan(raw, provider.generated_by)
        else:
            try:
                data = parse_plan_payload(raw)
            except PlanParseError as e:
                logger.warning(
                    "%s returned an unreadable plan (%s); using raw text",
                    provider.display_name,
                    e,
                )
                return fallback_plan(raw, provider.generated_by)
            plan = normalize_plan(data, provider.generated_by)

        self.cache.set(prompt, plan)
        plan.generated_at = datetime.now()
        return plan

    async def refine_section(
        self, section: str, instruction: str, context: str
    ) -> str:
        """Refine one section through the active provider. Never cached."""
        provider = self.resolve_provider()
        logger.info(
            "Refining %d char section with %s", len(section), provider.display_name
        )
        return await provider.refine_section(section, instruction, context)

    def plan_to_markdown(self, plan: ProjectPlan) -> str:
        """Render a plan as a watermarked markdown document."""
        return plan_to_markdown(plan)
