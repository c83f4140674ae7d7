"""Tests for settings resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from layr.config.paths import get_paths
from layr.config.settings import load_workspace_config, settings
from layr.models.options import PlanSize, ProjectType


def _write_workspace_config(text: str) -> Path:
    path = get_paths().workspace_config
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults() -> None:
    assert settings.ai_provider == "groq"
    assert settings.plan_size is PlanSize.NORMAL
    assert settings.plan_type is ProjectType.SAAS
    assert settings.history_max_versions == 50
    assert settings.cache_ttl_seconds == 3600.0
    assert settings.cache_max_entries == 20


def test_setters_store_normalized_values() -> None:
    settings.ai_provider = "gemini"
    settings.plan_size = "DESCRIPTIVE"
    settings.plan_type = "Open Source"

    assert settings.ai_provider == "gemini"
    assert settings.plan_size is PlanSize.DESCRIPTIVE
    assert settings.plan_type is ProjectType.OPEN_SOURCE
    assert settings._data["ai"]["plan_type"] == "open-source"


def test_workspace_config_overrides_global() -> None:
    settings.ai_provider = "gemini"
    settings.history_max_versions = 10
    _write_workspace_config(
        "provider: ollama\n"
        "plan_size: concise\n"
        "plan_type: hobby\n"
        "history:\n"
        "  max_versions: 5\n"
    )

    assert settings.ai_provider == "ollama"
    assert settings.plan_size is PlanSize.CONCISE
    assert settings.plan_type is ProjectType.HOBBY
    assert settings.history_max_versions == 5


@pytest.mark.parametrize("text", ["provider: [unclosed", "- just\n- a list\n"])
def test_bad_workspace_config_is_ignored(text: str) -> None:
    _write_workspace_config(text)
    assert load_workspace_config() == {}
    assert settings.ai_provider == "groq"


def test_invalid_stored_values_fall_back() -> None:
    settings._data = {
        "ai": {"plan_size": "huge", "plan_type": 7},
        "history": {"max_versions": "many"},
        "cache": {"ttl_seconds": -5, "max_entries": "lots"},
    }

    assert settings.plan_size is PlanSize.NORMAL
    assert settings.plan_type is ProjectType.SAAS
    assert settings.history_max_versions == 50
    assert settings.cache_ttl_seconds == 3600.0
    assert settings.cache_max_entries == 20


def test_provider_config_prefers_settings_over_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    assert settings.provider_config("openai").api_key == "env-key"

    settings.set_provider_value("OpenAI", "api_key", "stored-key")
    settings.set_provider_value("openai", "model", "o3-mini")
    config = settings.provider_config("openai")
    assert config.api_key == "stored-key"
    assert config.model == "o3-mini"

    settings.set_provider_value("openai", "api_key", None)
    assert settings.provider_config("openai").api_key == "env-key"


def test_provider_endpoints_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OLLAMA_HOST", "http://gpu-box:11434")
    monkeypatch.setenv("LAYR_PROXY_URL", "https://proxy.example/api/chat")

    assert settings.provider_config("ollama").base_url == "http://gpu-box:11434"
    assert settings.provider_config("groq").base_url == (
        "https://proxy.example/api/chat"
    )
    assert settings.provider_config("kimi").api_key is None


def test_global_settings_live_under_xdg_config_home(tmp_path: Path) -> None:
    paths = get_paths()
    assert paths.global_settings == tmp_path / "xdg-config" / "layr" / "settings.json"
    assert paths.history_dir == Path.cwd() / ".layr" / "history"
