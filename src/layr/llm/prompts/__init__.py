"""Centralized prompt definitions for plan generation and refinement."""
from __future__ import annotations

from layr.llm.prompts.plan import (
    PLAN_JSON_PROMPT,
    PLAN_MARKDOWN_SYSTEM_PROMPT,
    PLAN_SYSTEM_PROMPT,
    SIZE_INSTRUCTIONS,
    TYPE_INSTRUCTIONS,
    build_json_plan_prompt,
    build_markdown_system_prompt,
)
from layr.llm.prompts.refine import (
    REFINE_SECTION_PROMPT,
    REFINE_SYSTEM_PROMPT,
    build_refine_prompt,
)

__all__ = [
    # Plan generation
    "PLAN_JSON_PROMPT",
    "PLAN_MARKDOWN_SYSTEM_PROMPT",
    "PLAN_SYSTEM_PROMPT",
    "SIZE_INSTRUCTIONS",
    "TYPE_INSTRUCTIONS",
    "build_json_plan_prompt",
    "build_markdown_system_prompt",
    # Refinement
    "REFINE_SECTION_PROMPT",
    "REFINE_SYSTEM_PROMPT",
    "build_refine_prompt",
]
