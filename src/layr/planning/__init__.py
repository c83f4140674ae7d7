"""Plan generation pipeline: cache, parsing, normalization and rendering."""
from __future__ import annotations

from layr.planning.cache import PlanCache
from layr.planning.extraction import (
    extract_json_candidate,
    parse_plan_payload,
    repair_json,
)
from layr.planning.markdown import (
    PlanSection,
    find_section,
    is_layr_plan,
    parse_sections,
    plan_to_markdown,
    replace_section,
    watermark,
)
from layr.planning.planner import Planner, fallback_plan, markdown_plan
from layr.planning.session import GenerationResult, PlanSession
from layr.planning.validation import (
    normalize_plan,
    validate_file_structure,
    validate_next_steps,
)

__all__ = [
    "GenerationResult",
    "PlanCache",
    "PlanSection",
    "PlanSession",
    "Planner",
    "extract_json_candidate",
    "fallback_plan",
    "find_section",
    "is_layr_plan",
    "markdown_plan",
    "normalize_plan",
    "parse_plan_payload",
    "parse_sections",
    "plan_to_markdown",
    "repair_json",
    "replace_section",
    "validate_file_structure",
    "validate_next_steps",
    "watermark",
]
