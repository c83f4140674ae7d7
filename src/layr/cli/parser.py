"""Argument parser construction for the Layr CLI."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from layr.llm.providers.base import ProviderType
from layr.models.options import PlanSize, ProjectType


def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="layr",
        description="Layr - AI project planning from a plain-language description",
    )
    parser.add_argument(
        "--workdir",
        "-w",
        type=Path,
        help="Workspace directory for plan history (default: current directory)",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Plan command
    plan_parser = subparsers.add_parser(
        "plan",
        help="Generate a project plan",
    )
    plan_parser.add_argument(
        "prompt",
        help="Plain-language project description",
    )
    plan_parser.add_argument(
        "--provider",
        "-p",
        help=(
            "Provider to use (default: configured provider). One of: "
            + ", ".join(t.value for t in ProviderType)
        ),
    )
    plan_parser.add_argument(
        "--size",
        choices=[s.value for s in PlanSize],
        help="Plan size tier (default: configured size)",
    )
    plan_parser.add_argument(
        "--type",
        "-t",
        dest="project_type",
        choices=[t.value for t in ProjectType],
        help="Project type (default: configured type)",
    )
    plan_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write the markdown plan to a file instead of the terminal",
    )
    plan_parser.add_argument(
        "--save",
        action="store_true",
        help="Save the plan to workspace history",
    )
    plan_parser.add_argument(
        "--description",
        "-d",
        help="History description (with --save)",
    )
    plan_parser.add_argument(
        "--label",
        help="History version label (with --save)",
    )

    # Refine command
    refine_parser = subparsers.add_parser(
        "refine",
        help="Refine one section of a markdown plan",
    )
    refine_parser.add_argument(
        "file",
        type=Path,
        help="Markdown plan document",
    )
    refine_parser.add_argument(
        "--section",
        "-s",
        required=True,
        help="Heading text of the section to refine",
    )
    refine_parser.add_argument(
        "--instruction",
        "-i",
        required=True,
        help="How the section should change",
    )
    refine_parser.add_argument(
        "--provider",
        "-p",
        help="Provider to use (default: configured provider)",
    )
    refine_parser.add_argument(
        "--in-place",
        action="store_true",
        help="Write the refined document back to the file",
    )

    # History command
    history_parser = subparsers.add_parser(
        "history",
        help="Plan version history",
    )
    history_subparsers = history_parser.add_subparsers(
        dest="history_action",
        help="History actions",
    )
    history_subparsers.add_parser(
        "list",
        help="List saved versions, newest first",
    )
    show_parser = history_subparsers.add_parser(
        "show",
        help="Show a saved version",
    )
    show_parser.add_argument("version_id", help="Version ID")
    delete_parser = history_subparsers.add_parser(
        "delete",
        help="Delete a saved version",
    )
    delete_parser.add_argument("version_id", help="Version ID")
    cleanup_parser = history_subparsers.add_parser(
        "cleanup",
        help="Delete the oldest versions beyond a count",
    )
    cleanup_parser.add_argument(
        "--keep",
        type=int,
        required=True,
        help="Number of most recent versions to keep",
    )
    export_parser = history_subparsers.add_parser(
        "export",
        help="Export a saved version as markdown",
    )
    export_parser.add_argument("version_id", help="Version ID")
    export_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file path (default: layr-plan-{id}.md)",
    )

    # Providers command
    providers_parser = subparsers.add_parser(
        "providers",
        help="List supported providers and models",
    )
    providers_parser.add_argument(
        "--check",
        action="store_true",
        help="Check that the configured provider is available",
    )
    providers_parser.add_argument(
        "--provider",
        "-p",
        help="Provider to check (default: configured provider)",
    )

    # Check command
    check_parser = subparsers.add_parser(
        "check",
        help="Check whether a markdown file is a Layr plan",
    )
    check_parser.add_argument(
        "file",
        type=Path,
        help="Markdown document to check",
    )

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments from argv (or sys.argv when omitted)."""
    parser = build_parser()
    if argv is None:
        return parser.parse_args()
    return parser.parse_args(list(argv))
