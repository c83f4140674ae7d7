"""Tests for plan payload normalization."""

from __future__ import annotations

from layr.models.plan import FileType, GeneratedBy, Priority
from layr.planning.validation import (
    DEFAULT_OVERVIEW,
    DEFAULT_TITLE,
    normalize_plan,
    validate_file_structure,
    validate_next_steps,
)


def test_empty_payload_gets_defaults() -> None:
    plan = normalize_plan({})
    assert plan.title == DEFAULT_TITLE
    assert plan.overview == DEFAULT_OVERVIEW
    assert plan.requirements == []
    assert plan.file_structure == []
    assert plan.next_steps == []
    assert plan.generated_by is GeneratedBy.AI


def test_blank_strings_fall_back_to_defaults() -> None:
    plan = normalize_plan({"title": "   ", "overview": ""})
    assert plan.title == DEFAULT_TITLE
    assert plan.overview == DEFAULT_OVERVIEW


def test_requirements_keep_strings_and_numbers_only() -> None:
    plan = normalize_plan(
        {"requirements": ["Auth", 3, 2.5, None, True, {"x": 1}, ["y"], "  "]}
    )
    assert plan.requirements == ["Auth", "3", "2.5"]


def test_non_list_collections_become_empty() -> None:
    plan = normalize_plan(
        {"requirements": "Auth", "fileStructure": {}, "nextSteps": "step"}
    )
    assert plan.requirements == []
    assert plan.file_structure == []
    assert plan.next_steps == []


def test_generated_by_is_recorded() -> None:
    plan = normalize_plan({"title": "Local"}, GeneratedBy.AI_LOCAL)
    assert plan.generated_by is GeneratedBy.AI_LOCAL


def test_file_structure_fills_missing_fields() -> None:
    items = validate_file_structure(
        [
            "README.md",
            {
                "name": "src",
                "type": "directory",
                "path": "src/",
                "children": [{"name": "main.py", "description": "Entry point"}],
            },
            42,
            {"name": "docs", "type": "Directory"},
        ]
    )

    assert [item.name for item in items] == ["README.md", "src", "item-2", "docs"]
    assert items[0].path == "README.md"
    assert items[0].type is FileType.FILE
    assert items[1].type is FileType.DIRECTORY
    assert items[1].path == "src/"
    assert items[1].children is not None
    assert items[1].children[0].path == "main.py"
    assert items[1].children[0].description == "Entry point"
    assert items[2].path == "item-2"
    # Only the exact lowercase value marks a directory
    assert items[3].type is FileType.FILE
    assert items[3].children is None


def test_next_steps_get_ids_priorities_and_descriptions() -> None:
    steps = validate_next_steps(
        [
            {"description": "Set up repository"},
            {"id": "build", "priority": " HIGH "},
            {"id": "build", "priority": "urgent", "completed": "yes"},
            "Write docs",
        ]
    )

    assert [step.id for step in steps] == ["step-1", "build", "build-3", "step-4"]
    assert steps[0].priority is Priority.MEDIUM
    assert steps[1].priority is Priority.HIGH
    assert steps[1].description == "Step 2"
    assert steps[2].priority is Priority.MEDIUM
    assert steps[2].completed is False
    assert steps[3].description == "Write docs"


def test_next_step_dependencies_and_estimate() -> None:
    steps = validate_next_steps(
        [
            {
                "id": "api",
                "description": "Build API",
                "completed": True,
                "estimatedTime": "2 days",
                "dependencies": ["setup", 7, None],
            }
        ]
    )
    assert steps[0].completed is True
    assert steps[0].estimated_time == "2 days"
    assert steps[0].dependencies == ["setup", "7"]


def test_step_ids_stay_unique_when_suffix_is_taken() -> None:
    steps = validate_next_steps([{"id": "x"}, {"id": "x-3"}, {"id": "x"}])

    ids = [step.id for step in steps]
    assert ids == ["x", "x-3", "x-4"]
    assert len(set(ids)) == len(ids)
