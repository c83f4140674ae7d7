"""Centralized path management for Layr.

Follows XDG Base Directory Specification:
- Config: $XDG_CONFIG_HOME/layr (default: ~/.config/layr)

Workspace artifacts live under <workspace>/.layr/.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path


def _xdg_config_home() -> Path:
    """Get XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


@dataclass
class LayrPaths:
    """Centralized path management following XDG spec."""

    workspace: Path  # Current working directory

    # XDG config home (computed once at init)
    _config_home: Path = field(default_factory=_xdg_config_home)

    # === WORKSPACE PATHS (project-local) ===

    @property
    def workspace_dir(self) -> Path:
        """Workspace .layr/ directory."""
        return self.workspace / ".layr"

    @property
    def history_dir(self) -> Path:
        """Plan version history: .layr/history/"""
        return self.workspace_dir / "history"

    @property
    def workspace_config(self) -> Path:
        """Workspace overrides: .layr/config.yaml"""
        return self.workspace_dir / "config.yaml"

    @property
    def debug_log(self) -> Path:
        """Debug log: .layr/debug.log"""
        return self.workspace_dir / "debug.log"

    # === GLOBAL PATHS (XDG compliant) ===

    @property
    def global_config_dir(self) -> Path:
        """Global config: ~/.config/layr/"""
        return self._config_home / "layr"

    @property
    def global_settings(self) -> Path:
        """Global settings file: ~/.config/layr/settings.json"""
        return self.global_config_dir / "settings.json"


# Singleton instance
_paths: LayrPaths | None = None


def get_paths(workspace: Path | None = None) -> LayrPaths:
    """Get the paths singleton.

    On first call, optionally set the workspace directory.
    Subsequent calls return the same instance.

    Args:
        workspace: The workspace directory. If not provided on first call,
                   defaults to current working directory.

    Returns:
        The LayrPaths singleton instance.
    """
    global _paths
    if _paths is None:
        _paths = LayrPaths(workspace=workspace or Path.cwd())
    return _paths


def reset_paths() -> None:
    """Reset paths singleton (for testing)."""
    global _paths
    _paths = None
