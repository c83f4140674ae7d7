"""Configuration and settings persistence.

Global settings are stored as JSON in the XDG config directory. A workspace
may override the provider selection and plan defaults in
``.layr/config.yaml``; resolution order is workspace > global > default.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from layr.config.paths import get_paths
from layr.models.options import PlanSize, ProjectType, ProviderConfig

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "groq"
DEFAULT_HISTORY_MAX_VERSIONS = 50
DEFAULT_CACHE_TTL_SECONDS = 3600.0
DEFAULT_CACHE_MAX_ENTRIES = 20

# Environment fallbacks for provider credentials and endpoints
PROVIDER_API_KEY_ENV: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "grok": "XAI_API_KEY",
    "kimi": "MOONSHOT_API_KEY",
}

PROVIDER_BASE_URL_ENV: dict[str, str] = {
    "ollama": "OLLAMA_HOST",
    "groq": "LAYR_PROXY_URL",
}


def get_settings_path() -> Path:
    """Get the path to the settings file."""
    return get_paths().global_settings


def load_workspace_config(path: Path | None = None) -> dict[str, Any]:
    """Load workspace overrides from .layr/config.yaml.

    Missing or malformed files yield an empty mapping.
    """
    config_path = path or get_paths().workspace_config
    if not config_path.exists():
        return {}
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Ignoring unreadable workspace config %s: %s", config_path, e)
        return {}
    if not isinstance(raw, dict):
        logger.warning("Ignoring workspace config %s: not a mapping", config_path)
        return {}
    return raw


class Settings:
    """Persistent settings for Layr."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        """Load settings from disk."""
        path = get_settings_path()
        if path.exists():
            try:
                self._data = json.loads(path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError):
                self._data = {}
        else:
            self._data = {}

    def _save(self) -> None:
        """Save settings to disk."""
        path = get_settings_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
            logger.info("Saved settings to %s", path)
        except OSError as e:
            logger.error("Failed to save settings: %s", e)

    def set(self, key: str, value: Any) -> None:
        """Set a setting value and persist to disk."""
        self._data[key] = value
        self._save()

    def _section(self, name: str) -> dict[str, Any]:
        raw = self._data.get(name, {})
        if isinstance(raw, dict):
            return raw
        return {}

    # --- AI Settings ---

    @property
    def ai_provider(self) -> str:
        """Get the configured provider type name."""
        workspace = load_workspace_config()
        if workspace.get("provider"):
            return str(workspace["provider"])
        ai = self._section("ai")
        return str(ai.get("provider", DEFAULT_PROVIDER))

    @ai_provider.setter
    def ai_provider(self, value: str) -> None:
        """Set the provider type name."""
        ai = self._section("ai")
        ai["provider"] = value
        self.set("ai", ai)

    @property
    def plan_size(self) -> PlanSize:
        """Get the plan size tier, defaulting to normal."""
        workspace = load_workspace_config()
        raw = workspace.get("plan_size") or self._section("ai").get("plan_size")
        return PlanSize.parse(raw)

    @plan_size.setter
    def plan_size(self, value: PlanSize | str) -> None:
        """Set the plan size tier."""
        ai = self._section("ai")
        ai["plan_size"] = PlanSize.parse(value).value
        self.set("ai", ai)

    @property
    def plan_type(self) -> ProjectType:
        """Get the project type tier, defaulting to SaaS."""
        workspace = load_workspace_config()
        raw = workspace.get("plan_type") or self._section("ai").get("plan_type")
        return ProjectType.parse(raw)

    @plan_type.setter
    def plan_type(self, value: ProjectType | str) -> None:
        """Set the project type tier."""
        ai = self._section("ai")
        ai["plan_type"] = ProjectType.parse(value).value
        self.set("ai", ai)

    def provider_config(self, provider: str) -> ProviderConfig:
        """Get credentials and endpoint settings for a provider.

        Priority: settings > environment variable > provider default.
        """
        name = provider.strip().lower()
        providers = self._section("providers")
        raw = providers.get(name, {})
        if not isinstance(raw, dict):
            raw = {}

        api_key = raw.get("api_key")
        if not api_key and name in PROVIDER_API_KEY_ENV:
            api_key = os.environ.get(PROVIDER_API_KEY_ENV[name])

        base_url = raw.get("base_url")
        if not base_url and name in PROVIDER_BASE_URL_ENV:
            base_url = os.environ.get(PROVIDER_BASE_URL_ENV[name])

        return ProviderConfig(
            api_key=str(api_key) if api_key else None,
            model=str(raw["model"]) if raw.get("model") else None,
            base_url=str(base_url) if base_url else None,
            organization=(
                str(raw["organization"]) if raw.get("organization") else None
            ),
        )

    def set_provider_value(self, provider: str, key: str, value: str | None) -> None:
        """Set or clear a single provider setting (api_key, model, base_url)."""
        name = provider.strip().lower()
        providers = self._section("providers")
        entry = providers.get(name, {})
        if not isinstance(entry, dict):
            entry = {}
        if value:
            entry[key] = value
        else:
            entry.pop(key, None)
        providers[name] = entry
        self.set("providers", providers)

    # --- History Settings ---

    @property
    def history_max_versions(self) -> int:
        """Maximum number of plan versions retained per workspace."""
        workspace_history = load_workspace_config().get("history", {})
        raw: Any = None
        if isinstance(workspace_history, dict):
            raw = workspace_history.get("max_versions")
        if raw is None:
            raw = self._section("history").get(
                "max_versions", DEFAULT_HISTORY_MAX_VERSIONS
            )
        try:
            value = int(raw)
        except (TypeError, ValueError):
            return DEFAULT_HISTORY_MAX_VERSIONS
        if value <= 0:
            return DEFAULT_HISTORY_MAX_VERSIONS
        return value

    @history_max_versions.setter
    def history_max_versions(self, value: int) -> None:
        history = self._section("history")
        history["max_versions"] = max(1, int(value))
        self.set("history", history)

    # --- Cache Settings ---

    @property
    def cache_ttl_seconds(self) -> float:
        """Time-to-live for cached plans."""
        raw = self._section("cache").get("ttl_seconds", DEFAULT_CACHE_TTL_SECONDS)
        try:
            value = float(raw)
        except (TypeError, ValueError):
            return DEFAULT_CACHE_TTL_SECONDS
        if value <= 0:
            return DEFAULT_CACHE_TTL_SECONDS
        return value

    @cache_ttl_seconds.setter
    def cache_ttl_seconds(self, value: float) -> None:
        cache = self._section("cache")
        cache["ttl_seconds"] = float(value)
        self.set("cache", cache)

    @property
    def cache_max_entries(self) -> int:
        """Maximum number of cached plans."""
        raw = self._section("cache").get("max_entries", DEFAULT_CACHE_MAX_ENTRIES)
        try:
            value = int(raw)
        except (TypeError, ValueError):
            return DEFAULT_CACHE_MAX_ENTRIES
        if value <= 0:
            return DEFAULT_CACHE_MAX_ENTRIES
        return value

    @cache_max_entries.setter
    def cache_max_entries(self, value: int) -> None:
        cache = self._section("cache")
        cache["max_entries"] = max(1, int(value))
        self.set("cache", cache)


# Global settings instance
settings = Settings()
