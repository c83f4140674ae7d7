"""Plan command for generating project plans."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.markdown import Markdown

from layr.cli.context import build_session, console, print_error
from layr.errors import LayrError

logger = logging.getLogger(__name__)


def cmd_plan(args: argparse.Namespace) -> int:
    """Generate a plan and print or save it."""
    if not args.prompt.strip():
        print("Error: Project description must not be empty", file=sys.stderr)
        return 1

    try:
        session = build_session(args.provider, args.size, args.project_type)
        result = asyncio.run(
            session.generate(
                args.prompt,
                save=args.save,
                description=args.description,
                version_label=args.label,
            )
        )
    except LayrError as e:
        logger.error("Plan generation failed: %s", e)
        print_error(e)
        return 1

    markdown = session.planner.plan_to_markdown(result.plan)

    if args.output:
        try:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(markdown, encoding="utf-8")
        except OSError as e:
            print(f"Error: Could not write {args.output}: {e}", file=sys.stderr)
            return 1
        print(f"Wrote plan '{result.plan.title}' to {args.output}")
    else:
        console.print(Markdown(markdown))

    if args.save:
        if result.version_id is None:
            print("Warning: Plan was not saved to history", file=sys.stderr)
        else:
            print(f"Saved version {result.version_id}")

    return 0
