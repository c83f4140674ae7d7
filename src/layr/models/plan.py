"""Canonical project plan data model."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Self


class FileType(Enum):
    """Kind of entry in a plan's file structure."""

    FILE = "file"
    DIRECTORY = "directory"


class Priority(Enum):
    """Priority of a plan step."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class GeneratedBy(Enum):
    """Which family of generator produced a plan."""

    AI = "ai"
    AI_LOCAL = "ai-local"
    RULES = "rules"


@dataclass(slots=True)
class FileStructureItem:
    """A file or directory in the proposed project layout."""

    name: str
    type: FileType
    path: str
    description: str | None = None
    children: list[FileStructureItem] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "path": self.path,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.children is not None:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create from dictionary."""
        children = data.get("children")
        return cls(
            name=data["name"],
            type=FileType(data.get("type", "file")),
            path=data.get("path", data["name"]),
            description=data.get("description"),
            children=(
                [cls.from_dict(child) for child in children]
                if children is not None
                else None
            ),
        )


@dataclass(slots=True)
class PlanStep:
    """A single actionable step in a plan."""

    id: str
    description: str
    completed: bool = False
    priority: Priority = Priority.MEDIUM
    estimated_time: str | None = None
    dependencies: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {
            "id": self.id,
            "description": self.description,
            "completed": self.completed,
            "priority": self.priority.value,
            "dependencies": list(self.dependencies),
        }
        if self.estimated_time is not None:
            data["estimatedTime"] = self.estimated_time
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create from dictionary."""
        return cls(
            id=data["id"],
            description=data["description"],
            completed=bool(data.get("completed", False)),
            priority=Priority(data.get("priority", "medium")),
            estimated_time=data.get("estimatedTime"),
            dependencies=list(data.get("dependencies", [])),
        )


@dataclass(slots=True)
class ProjectPlan:
    """Structured implementation plan produced from a project description.

    Plans are value objects: the cache and the version store each keep
    their own copy, so mutating a live plan never alters stored history.
    """

    title: str
    overview: str
    requirements: list[str] = field(default_factory=list)
    file_structure: list[FileStructureItem] = field(default_factory=list)
    next_steps: list[PlanStep] = field(default_factory=list)
    generated_at: datetime = field(default_factory=datetime.now)
    generated_by: GeneratedBy = GeneratedBy.AI

    def copy(self) -> ProjectPlan:
        """Return a deep copy that shares no mutable state with this plan."""
        return copy.deepcopy(self)

    def same_content(self, other: ProjectPlan) -> bool:
        """Compare everything except generation metadata."""
        return (
            self.title == other.title
            and self.overview == other.overview
            and self.requirements == other.requirements
            and self.file_structure == other.file_structure
            and self.next_steps == other.next_steps
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "title": self.title,
            "overview": self.overview,
            "requirements": list(self.requirements),
            "fileStructure": [item.to_dict() for item in self.file_structure],
            "nextSteps": [step.to_dict() for step in self.next_steps],
            "generatedAt": self.generated_at.isoformat(),
            "generatedBy": self.generated_by.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create from dictionary."""
        return cls(
            title=data["title"],
            overview=data.get("overview", ""),
            requirements=list(data.get("requirements", [])),
            file_structure=[
                FileStructureItem.from_dict(item)
                for item in data.get("fileStructure", [])
            ],
            next_steps=[
                PlanStep.from_dict(step) for step in data.get("nextSteps", [])
            ],
            generated_at=(
                datetime.fromisoformat(data["generatedAt"])
                if data.get("generatedAt")
                else datetime.now()
            ),
            generated_by=GeneratedBy(data.get("generatedBy", "ai")),
        )


# Marker that identifies a markdown document as a rendered Layr plan.
# Saved plans are recognized by this prefix, so it must never change.
WATERMARK_MARKER = "*Generated by Layr"

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_WEEKDAYS = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)


def format_watermark(when: datetime) -> str:
    """Render the watermark line, e.g.

    ``*Generated by Layr on Monday, October 19, 2026 at 3:05 PM*``
    """
    hour = when.hour % 12 or 12
    meridiem = "AM" if when.hour < 12 else "PM"
    date_text = (
        f"{_WEEKDAYS[when.weekday()]}, {_MONTHS[when.month - 1]} "
        f"{when.day}, {when.year}"
    )
    return f"{WATERMARK_MARKER} on {date_text} at {hour}:{when.minute:02d} {meridiem}*"
