"""Shared context helpers for CLI command modules."""

from __future__ import annotations

import sys
from pathlib import Path

from rich.console import Console

from layr.config.settings import get_settings_path, settings
from layr.errors import LayrError, ProviderError, ProviderErrorKind
from layr.models.options import PlanOptions, PlanSize, ProjectType
from layr.planning.session import PlanSession

console = Console()


def build_session(
    provider: str | None = None,
    size: str | None = None,
    project_type: str | None = None,
) -> PlanSession:
    """Build a plan session for the current working directory.

    Command-line values override the configured plan options.
    """
    options = PlanOptions(
        size=PlanSize.parse(size) if size else settings.plan_size,
        project_type=(
            ProjectType.parse(project_type) if project_type else settings.plan_type
        ),
    )
    return PlanSession(
        settings,
        Path.cwd(),
        provider_name=provider,
        options=options,
    )


def print_error(error: LayrError) -> None:
    """Print a user-facing error, with a setup hint for missing credentials."""
    print(f"Error: {error}", file=sys.stderr)
    if (
        isinstance(error, ProviderError)
        and error.kind is ProviderErrorKind.NOT_CONFIGURED
    ):
        print(
            f"  Configure it in {get_settings_path()} "
            f"or set the provider's API key environment variable.",
            file=sys.stderr,
        )


def read_text_or_error(path: Path) -> str | None:
    """Read a UTF-8 text file or print a user-facing error and return None."""
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Could not read {path}: {e}", file=sys.stderr)
        return None
