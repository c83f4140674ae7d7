"""Data models for Layr."""

from .options import PlanOptions, PlanSize, ProjectType, ProviderConfig
from .plan import (
    WATERMARK_MARKER,
    FileStructureItem,
    FileType,
    GeneratedBy,
    PlanStep,
    Priority,
    ProjectPlan,
    format_watermark,
)
from .version import (
    DEFAULT_MAX_VERSIONS,
    PlanVersion,
    VersionMetadata,
    VersionStore,
    new_version_id,
)

__all__ = [
    "DEFAULT_MAX_VERSIONS",
    "FileStructureItem",
    "FileType",
    "GeneratedBy",
    "PlanOptions",
    "PlanSize",
    "PlanStep",
    "PlanVersion",
    "Priority",
    "ProjectPlan",
    "ProjectType",
    "ProviderConfig",
    "VersionMetadata",
    "VersionStore",
    "WATERMARK_MARKER",
    "format_watermark",
    "new_version_id",
]
