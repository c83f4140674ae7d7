"""Check command for recognizing Layr plan documents."""

from __future__ import annotations

import argparse

from layr.cli.context import read_text_or_error
from layr.planning.markdown import is_layr_plan


def cmd_check(args: argparse.Namespace) -> int:
    """Exit 0 if the file carries the Layr watermark, 1 otherwise."""
    text = read_text_or_error(args.file)
    if text is None:
        return 1

    if is_layr_plan(text):
        print(f"{args.file}: Layr plan")
        return 0
    print(f"{args.file}: not a Layr plan")
    return 1
