"""Plan version history.

Each saved plan is an immutable JSON snapshot stored one file per version:

    <workspace>/.layr/history/<version-id>.json

History is best-effort: every failure is logged and reported as ``None`` or
``False`` so that it never blocks plan generation.
"""

from __future__ import annotations

import json
import logging
import re
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Self

from layr.config.paths import LayrPaths
from layr.models.plan import ProjectPlan

logger = logging.getLogger(__name__)

DEFAULT_MAX_VERSIONS = 50

_VERSION_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")

_READ_ERRORS = (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError)


@dataclass(slots=True)
class VersionMetadata:
    """Descriptive metadata attached to a saved version."""

    description: str
    model: str | None = None
    prompt: str | None = None
    version_label: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {"description": self.description}
        if self.model is not None:
            data["model"] = self.model
        if self.prompt is not None:
            data["prompt"] = self.prompt
        if self.version_label is not None:
            data["versionLabel"] = self.version_label
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create from dictionary."""
        return cls(
            description=data["description"],
            model=data.get("model"),
            prompt=data.get("prompt"),
            version_label=data.get("versionLabel"),
        )


@dataclass(slots=True)
class PlanVersion:
    """An immutable snapshot of a plan."""

    id: str
    timestamp: int  # epoch milliseconds
    plan: ProjectPlan
    metadata: VersionMetadata = field(
        default_factory=lambda: VersionMetadata(description="")
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "plan": self.plan.to_dict(),
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create from dictionary."""
        return cls(
            id=str(data["id"]),
            timestamp=int(data["timestamp"]),
            plan=ProjectPlan.from_dict(data["plan"]),
            metadata=VersionMetadata.from_dict(data.get("metadata", {})),
        )


def new_version_id() -> str:
    """Generate a collision-resistant version identifier."""
    return uuid.uuid4().hex


class VersionStore:
    """Stores plan snapshots under the workspace history directory."""

    def __init__(
        self,
        workspace: Path | None,
        max_versions: int = DEFAULT_MAX_VERSIONS,
    ) -> None:
        """Initialize the store.

        Args:
            workspace: Workspace root, or None when no workspace is open.
                Without a workspace, history is unavailable and saves
                return None.
            max_versions: Retention cap applied after every save.
        """
        self.workspace = workspace
        self.max_versions = max_versions
        self._last_timestamp = 0

    @property
    def history_dir(self) -> Path | None:
        """Directory holding version files, or None without a workspace."""
        if self.workspace is None:
            return None
        return LayrPaths(workspace=self.workspace).history_dir

    def _version_path(self, version_id: str) -> Path | None:
        history_dir = self.history_dir
        if history_dir is None or not _VERSION_ID_RE.match(version_id):
            return None
        return history_dir / f"{version_id}.json"

    def _next_timestamp(self) -> int:
        """Return a timestamp strictly greater than any previously issued."""
        now = int(time.time() * 1000)
        self._last_timestamp = max(now, self._last_timestamp + 1)
        return self._last_timestamp

    def save_version(
        self,
        plan: ProjectPlan,
        metadata: VersionMetadata,
    ) -> str | None:
        """Persist a snapshot of a plan.

        Args:
            plan: The plan to snapshot. It is serialized immediately, so
                later changes to the live plan do not affect the snapshot.
            metadata: Description and provenance of this version.

        Returns:
            The new version ID, or None if history is unavailable or the
            write failed.
        """
        history_dir = self.history_dir
        if history_dir is None:
            logger.info("No workspace available; version history disabled")
            return None

        version = PlanVersion(
            id=new_version_id(),
            timestamp=self._next_timestamp(),
            plan=plan.copy(),
            metadata=metadata,
        )
        version_path = history_dir / f"{version.id}.json"
        temp_path = history_dir / f"{version.id}.tmp"

        try:
            history_dir.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(
                json.dumps(version.to_dict(), indent=2), encoding="utf-8"
            )
            temp_path.replace(version_path)
        except OSError as e:
            logger.error("Failed to save plan version %s: %s", version.id, e)
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            return None

        logger.info("Saved plan version %s (%s)", version.id, metadata.description)
        self.cleanup_old_versions(self.max_versions)
        return version.id

    def get_versions(self) -> list[PlanVersion]:
        """List all readable versions, newest first.

        Corrupt or unreadable files are logged and skipped.
        """
        history_dir = self.history_dir
        if history_dir is None or not history_dir.exists():
            return []

        versions: list[PlanVersion] = []
        for version_file in history_dir.glob("*.json"):
            try:
                data = json.loads(version_file.read_text(encoding="utf-8"))
                versions.append(PlanVersion.from_dict(data))
            except _READ_ERRORS as e:
                logger.warning(
                    "Skipping unreadable version file %s: %s", version_file, e
                )

        versions.sort(key=lambda v: v.timestamp, reverse=True)
        return versions

    def get_version(self, version_id: str) -> PlanVersion | None:
        """Load a single version by ID."""
        version_path = self._version_path(version_id)
        if version_path is None or not version_path.exists():
            return None

        try:
            data = json.loads(version_path.read_text(encoding="utf-8"))
            return PlanVersion.from_dict(data)
        except _READ_ERRORS as e:
            logger.error("Failed to read version %s: %s", version_id, e)
            return None

    def delete_version(self, version_id: str) -> bool:
        """Delete a version. Returns True if a file was removed."""
        version_path = self._version_path(version_id)
        if version_path is None or not version_path.exists():
            return False

        try:
            version_path.unlink()
        except OSError as e:
            logger.error("Failed to delete version %s: %s", version_id, e)
            return False

        logger.info("Deleted plan version %s", version_id)
        return True

    def cleanup_old_versions(self, keep_count: int) -> int:
        """Delete the oldest versions beyond ``keep_count``.

        Returns:
            Number of versions deleted.
        """
        keep_count = max(0, keep_count)
        versions = self.get_versions()
        if len(versions) <= keep_count:
            return 0

        deleted = 0
        for version in versions[keep_count:]:
            if self.delete_version(version.id):
                deleted += 1

        if deleted:
            logger.info(
                "Evicted %d old plan versions (keeping %d)", deleted, keep_count
            )
        return deleted
