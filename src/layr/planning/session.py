"""Wires settings, provider factory, cache and history into one object."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from layr.config.settings import Settings
from layr.llm.providers.base import LLMProvider
from layr.llm.providers.factory import ProviderFactory, get_provider_factory
from layr.models.options import PlanOptions
from layr.models.plan import ProjectPlan
from layr.models.version import VersionMetadata, VersionStore
from layr.planning.cache import PlanCache
from layr.planning.planner import Planner

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GenerationResult:
    """A generated plan and, when saved, its history version ID."""

    plan: ProjectPlan
    version_id: str | None = None


class PlanSession:
    """Everything a command needs to generate, refine and save plans."""

    def __init__(
        self,
        settings: Settings,
        workspace: Path | None,
        provider_name: str | None = None,
        options: PlanOptions | None = None,
        factory: ProviderFactory | None = None,
        cache: PlanCache | None = None,
    ) -> None:
        self.settings = settings
        self.provider_name = provider_name or settings.ai_provider
        self.factory = factory or get_provider_factory()
        self.cache = cache or PlanCache(
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        )
        self.planner = Planner(
            self.create_provider,
            self.cache,
            options or PlanOptions(settings.plan_size, settings.plan_type),
        )
        self.versions = VersionStore(
            workspace, max_versions=settings.history_max_versions
        )

    def create_provider(self) -> LLMProvider:
        """Build the configured provider from current settings."""
        return self.factory.create_provider(
            self.provider_name, self.settings.provider_config(self.provider_name)
        )

    async def generate(
        self,
        prompt: str,
        save: bool = False,
        description: str | None = None,
        version_label: str | None = None,
    ) -> GenerationResult:
        """Generate a plan and optionally record it in history."""
        plan = await self.planner.generate_plan(prompt)
        if not save:
            return GenerationResult(plan=plan)

        provider = self.create_provider()
        version_id = self.versions.save_version(
            plan,
            VersionMetadata(
                description=description or f"Plan: {plan.title}",
                model=f"{provider.display_name}/{provider.model}",
                prompt=prompt,
                version_label=version_label,
            ),
        )
        if version_id is None:
            logger.warning("Plan generated but not saved to history")
        return GenerationResult(plan=plan, version_id=version_id)

    async def refine(self, section: str, instruction: str, context: str) -> str:
        """Refine one section of a plan document."""
        return await self.planner.refine_section(section, instruction, context)
