"""Providers command for listing and checking AI providers."""

from __future__ import annotations

import argparse
import asyncio

from rich.table import Table

from layr.cli.context import console, print_error
from layr.config.settings import settings
from layr.errors import LayrError
from layr.llm.providers.factory import get_provider_factory


def cmd_providers(args: argparse.Namespace) -> int:
    """List registered providers, or check that one is reachable."""
    factory = get_provider_factory()

    if args.check:
        name = args.provider or settings.ai_provider
        try:
            provider = factory.create_provider(name, settings.provider_config(name))
        except LayrError as e:
            print_error(e)
            return 1
        available = asyncio.run(provider.is_available())
        status = "available" if available else "unavailable"
        print(f"{provider.display_name} ({provider.model}): {status}")
        return 0 if available else 1

    active = settings.ai_provider.strip().lower()
    table = Table(title="AI providers")
    table.add_column("Name", no_wrap=True)
    table.add_column("Provider")
    table.add_column("Model")
    table.add_column("Supported models")
    for name in factory.supported_providers():
        provider = factory.create_provider(name, settings.provider_config(name))
        marker = " *" if name == active else ""
        table.add_row(
            f"{name}{marker}",
            provider.display_name,
            provider.model,
            ", ".join(provider.list_supported_models()) or "-",
        )
    console.print(table)
    return 0
