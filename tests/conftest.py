from __future__ import annotations

import copy
from collections.abc import Iterator
from pathlib import Path

import pytest

from layr.config.paths import reset_paths
from layr.config.settings import (
    PROVIDER_API_KEY_ENV,
    PROVIDER_BASE_URL_ENV,
    settings,
)


@pytest.fixture(autouse=True)
def isolate_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Iterator[None]:
    """Prevent tests from persisting settings or reading the real environment."""
    original_data = copy.deepcopy(settings._data)

    def _noop_save() -> None:
        return None

    monkeypatch.setattr(settings, "_save", _noop_save)
    for env_var in [*PROVIDER_API_KEY_ENV.values(), *PROVIDER_BASE_URL_ENV.values()]:
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))

    workspace = tmp_path / "workspace"
    workspace.mkdir()
    monkeypatch.chdir(workspace)
    reset_paths()
    settings._data = {}
    try:
        yield
    finally:
        settings._data = original_data
        reset_paths()
