"""Application configuration loader.

Loads data/config/studysync_v1.yaml (or the file named by $STUDYSYNC_CONFIG)
and merges it over built-in defaults. A missing file means defaults only.

Usage:
    from studysync.config.app_config import load_app_config, get_provider_config

    config = load_app_config()
    provider = get_provider_config("googleai")
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

CONFIG_FILE = Path("data/config/studysync_v1.yaml")
CONFIG_ENV_VAR = "STUDYSYNC_CONFIG"
DATA_DIR_ENV_VAR = "STUDYSYNC_DATA_DIR"


@dataclass
class ProviderConfig:
    """Configuration for a single LLM provider."""

    base_url: str | None
    default_model: str
    api_key_env: str | None = None

    def get_api_key(self) -> str | None:
        """Get API key from environment variable."""
        if self.api_key_env:
            return os.environ.get(self.api_key_env)
        return None


@dataclass
class AssistantConfig:
    """Defaults for the AI study assistant."""

    default_provider: str = "googleai"
    temperature: float = 0.7
    max_tokens: int = 4096
    timeout: int = 120


@dataclass
class TimerConfig:
    """Focus timer durations in minutes."""

    work_minutes: int = 25
    break_minutes: int = 5


@dataclass
class AppConfig:
    """Application-wide configuration."""

    providers: dict[str, ProviderConfig] = field(default_factory=dict)
    assistant: AssistantConfig = field(default_factory=AssistantConfig)
    timer: TimerConfig = field(default_factory=TimerConfig)
    paths: dict[str, str] = field(default_factory=dict)

    @property
    def state_dir(self) -> Path:
        return Path(self.paths.get("state_dir", "data/state"))


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    return {
        "providers": {
            "googleai": {
                "base_url": "https://generativelanguage.googleapis.com/v1beta/openai/",
                "default_model": "gemini-2.0-flash",
                "api_key_env": "GEMINI_API_KEY",
            },
            "openai": {
                "base_url": None,
                "default_model": "gpt-4o-mini",
                "api_key_env": "OPENAI_API_KEY",
            },
            "lmstudio": {
                "base_url": "http://localhost:1234/v1",
                "default_model": "llama-3.2-3b-instruct",
                "api_key_env": None,
            },
        },
        "assistant": {
            "default_provider": "googleai",
            "temperature": 0.7,
            "max_tokens": 4096,
            "timeout": 120,
        },
        "timer": {
            "work_minutes": 25,
            "break_minutes": 5,
        },
        "paths": {
            "state_dir": "data/state",
        },
    }


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def _parse_config(data: dict[str, Any]) -> AppConfig:
    providers = {}
    for name, pconfig in data.get("providers", {}).items():
        providers[name] = ProviderConfig(
            base_url=pconfig.get("base_url"),
            default_model=pconfig.get("default_model", "default"),
            api_key_env=pconfig.get("api_key_env"),
        )

    assistant_data = data.get("assistant", {})
    assistant = AssistantConfig(
        default_provider=assistant_data.get("default_provider", "googleai"),
        temperature=float(assistant_data.get("temperature", 0.7)),
        max_tokens=int(assistant_data.get("max_tokens", 4096)),
        timeout=int(assistant_data.get("timeout", 120)),
    )

    timer_data = data.get("timer", {})
    timer = TimerConfig(
        work_minutes=int(timer_data.get("work_minutes", 25)),
        break_minutes=int(timer_data.get("break_minutes", 5)),
    )

    return AppConfig(
        providers=providers,
        assistant=assistant,
        timer=timer,
        paths=dict(data.get("paths", {})),
    )


def config_path() -> Path:
    """Resolve the config file location."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return CONFIG_FILE


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config, cached after the first call.

    Args:
        force_reload: If True, ignore cached config and reload from file.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data = _get_defaults()
    path = config_path()

    if path.exists():
        logger.debug("loading_app_config", source=str(path))
        loaded = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")
        data = _merge(data, loaded)
    else:
        logger.info("using_default_config", looked_at=str(path))

    _cached_config = _parse_config(data)
    return _cached_config


def resolve_state_dir() -> Path:
    """State directory from $STUDYSYNC_DATA_DIR, else from config."""
    env_dir = os.environ.get(DATA_DIR_ENV_VAR)
    if env_dir:
        return Path(env_dir)
    return load_app_config().state_dir


def get_provider_config(provider: str) -> ProviderConfig | None:
    """Get configuration for a specific provider, or None if unknown."""
    config = load_app_config()
    return config.providers.get(provider)


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
