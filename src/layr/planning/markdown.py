"""Markdown rendering and section handling for plan documents.

Rendered plans begin with a watermark line. The watermark prefix is the only
signal used to recognize a document as a Layr plan, so the rendering must
stay stable across releases or previously saved plans stop being recognized.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from layr.models.plan import (
    WATERMARK_MARKER,
    FileStructureItem,
    FileType,
    PlanStep,
    ProjectPlan,
    format_watermark,
)

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_FENCE_RE = re.compile(r"^\s*(`{3,}|~{3,})")

INTRODUCTION_TITLE = "Introduction"
DOCUMENT_TITLE = "Document"


def watermark(when: datetime | None = None) -> str:
    """Watermark line for a plan generated at ``when`` (default: now)."""
    return format_watermark(when or datetime.now())


def is_layr_plan(text: str) -> bool:
    """Whether a markdown document carries the Layr watermark."""
    return WATERMARK_MARKER in text


def _render_file_item(item: FileStructureItem, depth: int, lines: list[str]) -> None:
    indent = "  " * depth
    is_dir = item.type is FileType.DIRECTORY
    suffix = "/" if is_dir and not item.path.endswith("/") else ""
    line = f"{indent}- `{item.path}{suffix}`"
    if item.description:
        line += f": {item.description}"
    lines.append(line)
    for child in item.children or []:
        _render_file_item(child, depth + 1, lines)


def _render_step(number: int, step: PlanStep, lines: list[str]) -> None:
    check = "x" if step.completed else " "
    details = [f"priority: {step.priority.value}"]
    if step.estimated_time:
        details.append(f"estimate: {step.estimated_time}")
    lines.append(
        f"{number}. [{check}] **{step.description}** ({', '.join(details)})"
    )
    lines.append(f"   - ID: `{step.id}`")
    if step.dependencies:
        lines.append(f"   - Depends on: {', '.join(step.dependencies)}")


def plan_to_markdown(plan: ProjectPlan) -> str:
    """Render a plan as a markdown document.

    Plans from markdown-mode providers already hold a complete document in
    their overview, starting with the watermark, which is returned unchanged.
    """
    if plan.overview.lstrip().startswith(WATERMARK_MARKER):
        return plan.overview

    lines = [watermark(plan.generated_at), "", "---", "", f"# {plan.title}", ""]

    lines += ["## Overview", "", plan.overview, ""]

    lines += ["## Requirements", ""]
    if plan.requirements:
        lines += [f"- {requirement}" for requirement in plan.requirements]
    else:
        lines.append("_No requirements listed._")
    lines.append("")

    lines += ["## File Structure", ""]
    if plan.file_structure:
        for item in plan.file_structure:
            _render_file_item(item, 0, lines)
    else:
        lines.append("_No file structure proposed._")
    lines.append("")

    lines += ["## Next Steps", ""]
    if plan.next_steps:
        for number, step in enumerate(plan.next_steps, start=1):
            _render_step(number, step, lines)
    else:
        lines.append("_No next steps proposed._")
    lines.append("")

    return "\n".join(lines)


@dataclass(slots=True)
class PlanSection:
    """A heading-delimited region of a markdown document.

    ``start_line`` and ``end_line`` are zero-based and inclusive. Level 0
    marks a synthetic section (text before the first heading, or a
    document with no headings at all).
    """

    title: str
    content: str
    start_line: int
    end_line: int
    level: int


def _split_lines(text: str) -> list[str]:
    return text.replace("\r\n", "\n").split("\n")


def _closes_fence(marker: str, fence: str) -> bool:
    """A fence closes only on a run of its own character at least as long."""
    return marker[0] == fence[0] and len(marker) >= len(fence)


def _heading_lines(lines: list[str]) -> list[tuple[int, int, str]]:
    """(line index, level, title) for each heading outside code fences."""
    headings = []
    fence: str | None = None
    for index, line in enumerate(lines):
        match = _FENCE_RE.match(line)
        if fence is not None:
            if match and _closes_fence(match.group(1), fence):
                fence = None
            continue
        if match:
            fence = match.group(1)
            continue
        match = _HEADING_RE.match(line)
        if match:
            headings.append((index, len(match.group(1)), match.group(2).strip()))
    return headings


def parse_sections(text: str) -> list[PlanSection]:
    """Split a document into sections at each markdown heading."""
    if not text.strip():
        return []

    lines = _split_lines(text)
    headings = _heading_lines(lines)
    if not headings:
        return [PlanSection(DOCUMENT_TITLE, text, 0, len(lines) - 1, 0)]

    sections: list[PlanSection] = []
    first_index = headings[0][0]
    if first_index > 0:
        sections.append(
            PlanSection(
                INTRODUCTION_TITLE,
                "\n".join(lines[:first_index]),
                0,
                first_index - 1,
                0,
            )
        )

    for position, (start, level, title) in enumerate(headings):
        end = (
            headings[position + 1][0] - 1
            if position + 1 < len(headings)
            else len(lines) - 1
        )
        sections.append(
            PlanSection(title, "\n".join(lines[start : end + 1]), start, end, level)
        )
    return sections


def find_section(text: str, title: str) -> PlanSection | None:
    """Find the first section whose title matches, ignoring case."""
    wanted = title.strip().lower()
    for section in parse_sections(text):
        if section.title.lower() == wanted:
            return section
    return None


def replace_section(text: str, section: PlanSection, content: str) -> str:
    """Splice new content in place of a section's lines."""
    lines = _split_lines(text)
    replacement = _split_lines(content.rstrip("\n"))
    # Keep the blank line that separated the section from the next heading
    if (
        section.end_line < len(lines)
        and not lines[section.end_line].strip()
        and replacement[-1].strip()
    ):
        replacement.append("")
    return "\n".join(
        lines[: section.start_line] + replacement + lines[section.end_line + 1 :]
    )
