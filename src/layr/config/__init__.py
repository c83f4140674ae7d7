"""Configuration management for Layr."""
from __future__ import annotations

from layr.config.paths import LayrPaths, get_paths, reset_paths
from layr.config.settings import (
    Settings,
    get_settings_path,
    load_workspace_config,
    settings,
)

__all__ = [
    "LayrPaths",
    "Settings",
    "get_paths",
    "get_settings_path",
    "load_workspace_config",
    "reset_paths",
    "settings",
]
