"""Generation options and provider configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PlanSize(Enum):
    """Verbosity tier for generated plans."""

    CONCISE = "concise"
    NORMAL = "normal"
    DESCRIPTIVE = "descriptive"

    @classmethod
    def parse(cls, value: object) -> PlanSize:
        """Parse a stored or user-supplied value, defaulting to NORMAL."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return cls.NORMAL

    @property
    def max_tokens(self) -> int:
        """Completion token budget for this tier."""
        return _SIZE_MAX_TOKENS[self]


_SIZE_MAX_TOKENS = {
    PlanSize.CONCISE: 2500,
    PlanSize.NORMAL: 5000,
    PlanSize.DESCRIPTIVE: 8000,
}


class ProjectType(Enum):
    """Project category used to tailor plan instructions."""

    HOBBY = "hobby"
    SAAS = "saas"
    PRODUCTION = "production"
    ENTERPRISE = "enterprise"
    PROTOTYPE = "prototype"
    OPEN_SOURCE = "open-source"

    @classmethod
    def parse(cls, value: object) -> ProjectType:
        """Parse a stored or user-supplied value, defaulting to SAAS.

        Accepts display spellings such as "Open Source" and "SaaS".
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower().replace(" ", "-").replace("_", "-")
            for member in cls:
                if member.value == normalized:
                    return member
        return cls.SAAS

    @property
    def label(self) -> str:
        """Human-readable name."""
        return _PROJECT_TYPE_LABELS[self]


_PROJECT_TYPE_LABELS = {
    ProjectType.HOBBY: "Hobby",
    ProjectType.SAAS: "SaaS",
    ProjectType.PRODUCTION: "Production",
    ProjectType.ENTERPRISE: "Enterprise",
    ProjectType.PROTOTYPE: "Prototype",
    ProjectType.OPEN_SOURCE: "Open Source",
}


@dataclass(slots=True)
class PlanOptions:
    """Hints that tailor the generation instructions."""

    size: PlanSize = PlanSize.NORMAL
    project_type: ProjectType = ProjectType.SAAS


@dataclass(slots=True)
class ProviderConfig:
    """Credentials and endpoint overrides for one provider."""

    api_key: str | None = None
    model: str | None = None
    base_url: str | None = None
    organization: str | None = None

