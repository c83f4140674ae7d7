"""Refine command for rewriting one section of a plan document."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.markdown import Markdown

from layr.cli.context import build_session, console, print_error, read_text_or_error
from layr.errors import LayrError
from layr.planning.markdown import (
    find_section,
    is_layr_plan,
    parse_sections,
    replace_section,
)

logger = logging.getLogger(__name__)


def cmd_refine(args: argparse.Namespace) -> int:
    """Refine a section of a markdown plan through the configured provider."""
    text = read_text_or_error(args.file)
    if text is None:
        return 1

    if not args.instruction.strip():
        print("Error: Instruction must not be empty", file=sys.stderr)
        return 1

    section = find_section(text, args.section)
    if section is None:
        print(f"Error: Section '{args.section}' not found", file=sys.stderr)
        titles = [s.title for s in parse_sections(text)]
        if titles:
            print(f"  Available sections: {', '.join(titles)}", file=sys.stderr)
        return 1

    if not is_layr_plan(text):
        print(
            f"Warning: {args.file} does not look like a Layr plan",
            file=sys.stderr,
        )

    try:
        session = build_session(args.provider)
        refined = asyncio.run(session.refine(section.content, args.instruction, text))
    except LayrError as e:
        logger.error("Section refinement failed: %s", e)
        print_error(e)
        return 1

    if not args.in_place:
        console.print(Markdown(refined))
        return 0

    try:
        args.file.write_text(replace_section(text, section, refined), encoding="utf-8")
    except OSError as e:
        print(f"Error: Could not write {args.file}: {e}", file=sys.stderr)
        return 1
    print(f"Refined section '{section.title}' in {args.file}")
    return 0
