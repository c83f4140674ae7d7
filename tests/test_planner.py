"""Tests for the plan generation pipeline."""

from __future__ import annotations

import asyncio
import json

import pytest

from layr.errors import ProviderError, ProviderErrorKind
from layr.llm.providers.base import LLMProvider, OutputMode, PlanOptions
from layr.models.options import PlanSize
from layr.models.plan import GeneratedBy
from layr.planning.cache import PlanCache
from layr.planning.planner import (
    FALLBACK_REQUIREMENTS,
    FALLBACK_TITLE,
    Planner,
)

MOCK_PLAN = {
    "title": "Mock Project",
    "overview": "A mock project for testing",
    "requirements": ["Requirement 1", "Requirement 2"],
    "fileStructure": [{"name": "src", "type": "directory", "path": "src/"}],
    "nextSteps": [
        {"id": "step-1", "description": "First step", "priority": "high"}
    ],
}


class FakeProvider(LLMProvider):
    display_name = "Fake"
    default_model = "fake-1"

    def __init__(self, responses: list[str] | None = None) -> None:
        super().__init__()
        self.responses = list(responses or [json.dumps(MOCK_PLAN)])
        self.generate_calls: list[tuple[str, PlanOptions | None]] = []
        self.refine_calls: list[tuple[str, str, str]] = []
        self.failure: ProviderError | None = None

    async def generate_plan(
        self, prompt: str, options: PlanOptions | None = None
    ) -> str:
        self.generate_calls.append((prompt, options))
        if self.failure is not None:
            raise self.failure
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]

    async def refine_section(
        self, section: str, instruction: str, context: str
    ) -> str:
        self.refine_calls.append((section, instruction, context))
        return f"{section} (refined)"

    async def validate_api_key(self, api_key: str) -> bool:
        return True

    async def is_available(self) -> bool:
        return True


class MarkdownProvider(FakeProvider):
    output_mode = OutputMode.MARKDOWN


def test_generate_plan_parses_and_normalizes() -> None:
    provider = FakeProvider()
    planner = Planner(provider, PlanCache())

    plan = asyncio.run(planner.generate_plan("Build a todo app"))

    assert plan.title == "Mock Project"
    assert plan.requirements == ["Requirement 1", "Requirement 2"]
    assert plan.file_structure[0].path == "src/"
    assert plan.next_steps[0].id == "step-1"
    assert plan.generated_by is GeneratedBy.AI


def test_generate_plan_passes_options_through() -> None:
    provider = FakeProvider()
    options = PlanOptions(size=PlanSize.CONCISE)
    planner = Planner(provider, PlanCache(), options)

    asyncio.run(planner.generate_plan("Build a todo app"))

    assert provider.generate_calls[0] == ("Build a todo app", options)


def test_identical_prompts_hit_the_cache() -> None:
    provider = FakeProvider()
    planner = Planner(provider, PlanCache())

    first = asyncio.run(planner.generate_plan("Build a todo app"))
    second = asyncio.run(planner.generate_plan("  BUILD A TODO APP "))

    assert len(provider.generate_calls) == 1
    assert first.same_content(second)
    assert first is not second


def test_unparseable_response_degrades_to_fallback_plan() -> None:
    provider = FakeProvider(["This is not JSON"])
    cache = PlanCache()
    planner = Planner(provider, cache)

    plan = asyncio.run(planner.generate_plan("Build a todo app"))

    assert plan.title == FALLBACK_TITLE
    assert plan.overview == "This is not JSON"
    assert plan.requirements == FALLBACK_REQUIREMENTS
    assert plan.file_structure == []
    assert plan.next_steps == []
    # Degraded plans are retried rather than served from cache
    assert len(cache) == 0


def test_provider_errors_propagate_and_are_not_cached() -> None:
    provider = FakeProvider()
    provider.failure = ProviderError(
        "Rate limit exceeded", "Fake", ProviderErrorKind.RATE_LIMITED
    )
    cache = PlanCache()
    planner = Planner(provider, cache)

    with pytest.raises(ProviderError) as exc_info:
        asyncio.run(planner.generate_plan("Build a todo app"))

    assert exc_info.value.kind is ProviderErrorKind.RATE_LIMITED
    assert len(cache) == 0


def test_markdown_provider_output_is_wrapped() -> None:
    document = (
        "*Generated by Layr on Monday, October 19, 2026 at 3:05 PM*\n\n"
        "---\n\n# Recipe Finder\n\n## Overview\n\nFind recipes.\n"
    )
    provider = MarkdownProvider([document])
    planner = Planner(provider, PlanCache())

    plan = asyncio.run(planner.generate_plan("recipes"))

    assert plan.title == "Recipe Finder"
    assert plan.overview == document.strip()
    assert planner.plan_to_markdown(plan) == document.strip()


def test_resolver_is_called_per_request() -> None:
    providers = [FakeProvider(), FakeProvider()]
    calls = []

    def resolve() -> LLMProvider:
        calls.append(len(calls))
        return providers[len(calls) - 1]

    planner = Planner(resolve, PlanCache())
    asyncio.run(planner.generate_plan("first"))
    asyncio.run(planner.generate_plan("second"))

    assert len(calls) == 2
    assert len(providers[0].generate_calls) == 1
    assert len(providers[1].generate_calls) == 1


def test_refine_section_passes_through_uncached() -> None:
    provider = FakeProvider()
    planner = Planner(provider, PlanCache())

    first = asyncio.run(planner.refine_section("## Overview", "expand", "doc"))
    second = asyncio.run(planner.refine_section("## Overview", "expand", "doc"))

    assert first == second == "## Overview (refined)"
    assert provider.refine_calls == [("## Overview", "expand", "doc")] * 2


def test_mock_plan_file_structure_is_preserved() -> None:
    planner = Planner(FakeProvider(), PlanCache())

    plan = asyncio.run(planner.generate_plan("A React todo app"))

    assert [item.to_dict() for item in plan.file_structure] == [
        {"name": "src", "type": "directory", "path": "src/"}
    ]


def test_malformed_json_is_repaired_and_normalized() -> None:
    provider = FakeProvider(['{"title": "X", "requirements": [1,2],}'])
    cache = PlanCache()
    planner = Planner(provider, cache)

    plan = asyncio.run(planner.generate_plan("repair me"))

    assert plan.title == "X"
    assert plan.requirements == ["1", "2"]
    assert plan.next_steps == []
    assert "repair me" in cache


@pytest.mark.parametrize(
    ("heading", "title"),
    [("# Learn C#", "Learn C#"), ("# Closed Heading ##", "Closed Heading")],
)
def test_markdown_title_keeps_inner_hashes(heading: str, title: str) -> None:
    provider = MarkdownProvider([f"{heading}\n\nBody\n"])
    planner = Planner(provider, PlanCache())

    plan = asyncio.run(planner.generate_plan(heading))

    assert plan.title == title
