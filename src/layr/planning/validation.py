"""Normalize untrusted plan payloads into the canonical ProjectPlan shape.

Nothing here raises on bad input: every missing or invalid field is
replaced by a default so downstream code can rely on the plan's shape.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from layr.models.plan import (
    FileStructureItem,
    FileType,
    GeneratedBy,
    PlanStep,
    Priority,
    ProjectPlan,
)

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Generated Project Plan"
DEFAULT_OVERVIEW = "No overview provided"

_PRIORITIES = {priority.value: priority for priority in Priority}


def _text(value: Any) -> str | None:
    """Return a non-blank string form of a scalar, else None."""
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        return str(value)
    return None


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        text = _text(item)
        if text is not None:
            items.append(text)
    return items


def validate_file_structure(items: Any) -> list[FileStructureItem]:
    """Normalize a file tree, recursing into children.

    An entry is a directory only when its type is exactly "directory".
    A missing path falls back to the name, and a missing name to
    ``item-<index>``.
    """
    if not isinstance(items, list):
        return []

    result: list[FileStructureItem] = []
    for index, raw in enumerate(items):
        if isinstance(raw, str):
            raw = {"name": raw}
        elif not isinstance(raw, dict):
            raw = {}

        name = _text(raw.get("name")) or f"item-{index}"
        file_type = (
            FileType.DIRECTORY if raw.get("type") == "directory" else FileType.FILE
        )
        path = _text(raw.get("path")) or name
        description = raw.get("description")
        children = raw.get("children")

        result.append(
            FileStructureItem(
                name=name,
                type=file_type,
                path=path,
                description=description if isinstance(description, str) else None,
                children=(
                    validate_file_structure(children)
                    if isinstance(children, list)
                    else None
                ),
            )
        )
    return result


def validate_next_steps(steps: Any) -> list[PlanStep]:
    """Normalize plan steps.

    Missing ids become ``step-<n+1>`` for the zero-based index n. A repeated
    id gets a numeric suffix until it is unique. Unknown priorities become
    medium.
    """
    if not isinstance(steps, list):
        return []

    result: list[PlanStep] = []
    seen_ids: set[str] = set()
    for index, raw in enumerate(steps):
        if isinstance(raw, str):
            raw = {"description": raw}
        elif not isinstance(raw, dict):
            raw = {}

        base_id = _text(raw.get("id")) or f"step-{index + 1}"
        step_id = base_id
        suffix = index + 1
        while step_id in seen_ids:
            step_id = f"{base_id}-{suffix}"
            suffix += 1
        seen_ids.add(step_id)

        priority_raw = raw.get("priority")
        priority = Priority.MEDIUM
        if isinstance(priority_raw, str):
            priority = _PRIORITIES.get(priority_raw.strip().lower(), Priority.MEDIUM)

        estimated = raw.get("estimatedTime")
        result.append(
            PlanStep(
                id=step_id,
                description=_text(raw.get("description")) or f"Step {index + 1}",
                completed=raw.get("completed") is True,
                priority=priority,
                estimated_time=_text(estimated),
                dependencies=_string_list(raw.get("dependencies")),
            )
        )
    return result


def normalize_plan(
    data: dict[str, Any],
    generated_by: GeneratedBy = GeneratedBy.AI,
) -> ProjectPlan:
    """Build a canonical plan from a loosely shaped payload."""
    requirements = data.get("requirements")
    if requirements is not None and not isinstance(requirements, list):
        logger.debug("Discarding non-list requirements")

    return ProjectPlan(
        title=_text(data.get("title")) or DEFAULT_TITLE,
        overview=_text(data.get("overview")) or DEFAULT_OVERVIEW,
        requirements=_string_list(requirements),
        file_structure=validate_file_structure(data.get("fileStructure")),
        next_steps=validate_next_steps(data.get("nextSteps")),
        generated_at=datetime.now(),
        generated_by=generated_by,
    )
