"""Tests for plan version history."""

from __future__ import annotations

import json
from pathlib import Path

from layr.models.plan import PlanStep, ProjectPlan
from layr.models.version import PlanVersion, VersionMetadata, VersionStore


def _plan(title: str = "Todo App") -> ProjectPlan:
    return ProjectPlan(
        title=title,
        overview="A todo list",
        requirements=["CRUD"],
        next_steps=[PlanStep(id="step-1", description="Set up")],
    )


def _metadata(description: str = "Initial") -> VersionMetadata:
    return VersionMetadata(
        description=description,
        model="Groq/llama-3.3-70b-versatile",
        prompt="Build a todo app",
        version_label="v1",
    )


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    store = VersionStore(tmp_path)

    version_id = store.save_version(_plan(), _metadata())

    assert version_id is not None
    assert (tmp_path / ".layr" / "history" / f"{version_id}.json").exists()
    version = store.get_version(version_id)
    assert version is not None
    assert version.plan.title == "Todo App"
    assert version.plan.next_steps[0].id == "step-1"
    assert version.metadata.version_label == "v1"
    assert version.metadata.prompt == "Build a todo app"


def test_snapshot_is_isolated_from_live_plan(tmp_path: Path) -> None:
    store = VersionStore(tmp_path)
    plan = _plan()
    version_id = store.save_version(plan, _metadata())
    assert version_id is not None

    plan.title = "Changed"
    plan.requirements.append("More")

    version = store.get_version(version_id)
    assert version is not None
    assert version.plan.title == "Todo App"
    assert version.plan.requirements == ["CRUD"]


def test_versions_are_newest_first_with_unique_ids(tmp_path: Path) -> None:
    store = VersionStore(tmp_path)
    ids = [store.save_version(_plan(f"Plan {i}"), _metadata()) for i in range(5)]

    versions = store.get_versions()

    assert len(set(ids)) == 5
    assert [v.id for v in versions] == list(reversed(ids))
    timestamps = [v.timestamp for v in versions]
    assert timestamps == sorted(timestamps, reverse=True)
    assert len(set(timestamps)) == 5


def test_cleanup_keeps_most_recent(tmp_path: Path) -> None:
    store = VersionStore(tmp_path)
    ids = [store.save_version(_plan(f"Plan {i}"), _metadata()) for i in range(5)]

    deleted = store.cleanup_old_versions(2)

    assert deleted == 3
    assert [v.id for v in store.get_versions()] == [ids[4], ids[3]]
    for evicted in ids[:3]:
        assert evicted is not None
        assert store.get_version(evicted) is None
    assert store.cleanup_old_versions(2) == 0


def test_save_enforces_retention(tmp_path: Path) -> None:
    store = VersionStore(tmp_path, max_versions=3)
    for i in range(5):
        store.save_version(_plan(f"Plan {i}"), _metadata())

    titles = [v.plan.title for v in store.get_versions()]
    assert titles == ["Plan 4", "Plan 3", "Plan 2"]


def test_delete_version(tmp_path: Path) -> None:
    store = VersionStore(tmp_path)
    version_id = store.save_version(_plan(), _metadata())
    assert version_id is not None

    assert store.delete_version(version_id) is True
    assert store.get_version(version_id) is None
    assert store.delete_version(version_id) is False


def test_unsafe_ids_are_rejected(tmp_path: Path) -> None:
    store = VersionStore(tmp_path)
    assert store.get_version("../settings") is None
    assert store.delete_version("../../etc/passwd") is False


def test_corrupt_files_are_skipped(tmp_path: Path) -> None:
    store = VersionStore(tmp_path)
    version_id = store.save_version(_plan(), _metadata())
    history_dir = store.history_dir
    assert history_dir is not None
    (history_dir / "broken.json").write_text("{not json", encoding="utf-8")
    (history_dir / "partial.json").write_text(
        json.dumps({"id": "partial"}), encoding="utf-8"
    )

    versions = store.get_versions()

    assert [v.id for v in versions] == [version_id]
    assert store.get_version("broken") is None


def test_no_workspace_disables_history() -> None:
    store = VersionStore(None)
    assert store.history_dir is None
    assert store.save_version(_plan(), _metadata()) is None
    assert store.get_versions() == []
    assert store.cleanup_old_versions(1) == 0


def test_version_wire_format() -> None:
    version = PlanVersion(
        id="abc123",
        timestamp=1_760_000_000_000,
        plan=_plan(),
        metadata=VersionMetadata(description="Initial", version_label="v1"),
    )

    data = version.to_dict()

    assert data["metadata"] == {"description": "Initial", "versionLabel": "v1"}
    assert data["plan"]["nextSteps"][0]["id"] == "step-1"
    restored = PlanVersion.from_dict(data)
    assert restored.plan.same_content(version.plan)
    assert restored.timestamp == version.timestamp
