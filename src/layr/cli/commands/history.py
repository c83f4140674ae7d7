"""History command for browsing saved plan versions."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

from rich.markdown import Markdown
from rich.table import Table

from layr.cli.context import console
from layr.config.settings import settings
from layr.models.version import PlanVersion, VersionStore
from layr.planning.markdown import plan_to_markdown

HISTORY_ACTIONS = {"list", "show", "delete", "cleanup", "export"}


def _format_timestamp(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M:%S")


def _load_or_error(store: VersionStore, version_id: str) -> PlanVersion | None:
    version = store.get_version(version_id)
    if version is None:
        print(f"Error: Version '{version_id}' not found", file=sys.stderr)
    return version


def cmd_history(args: argparse.Namespace) -> int:
    """Manage the workspace plan history."""
    if args.history_action not in HISTORY_ACTIONS:
        print("Error: Unknown history action", file=sys.stderr)
        return 2

    store = VersionStore(Path.cwd(), max_versions=settings.history_max_versions)

    if args.history_action == "list":
        versions = store.get_versions()
        if not versions:
            print("No saved versions.")
            return 0
        table = Table(title=f"Plan history ({len(versions)})")
        table.add_column("ID", no_wrap=True)
        table.add_column("Saved")
        table.add_column("Title")
        table.add_column("Description")
        table.add_column("Label")
        for version in versions:
            table.add_row(
                version.id,
                _format_timestamp(version.timestamp),
                version.plan.title,
                version.metadata.description,
                version.metadata.version_label or "",
            )
        console.print(table)
        return 0

    if args.history_action == "cleanup":
        if args.keep < 0:
            print("Error: --keep must not be negative", file=sys.stderr)
            return 1
        deleted = store.cleanup_old_versions(args.keep)
        print(f"Deleted {deleted} old version(s), kept at most {args.keep}")
        return 0

    if args.history_action == "delete":
        if not store.delete_version(args.version_id):
            print(f"Error: Version '{args.version_id}' not found", file=sys.stderr)
            return 1
        print(f"Deleted version {args.version_id}")
        return 0

    version = _load_or_error(store, args.version_id)
    if version is None:
        return 1

    markdown = plan_to_markdown(version.plan)
    if args.history_action == "show":
        console.print(
            f"[bold]{version.id}[/bold]  {_format_timestamp(version.timestamp)}"
            f"  {version.metadata.model or ''}"
        )
        console.print(Markdown(markdown))
        return 0

    output_path = args.output or Path(f"layr-plan-{version.id}.md")
    try:
        output_path.write_text(markdown, encoding="utf-8")
    except OSError as e:
        print(f"Error: Could not write {output_path}: {e}", file=sys.stderr)
        return 1
    print(f"Exported version {version.id} to {output_path}")
    return 0
