"""Configuration package for StudySync."""

from studysync.config.app_config import (
    AppConfig,
    AssistantConfig,
    ProviderConfig,
    TimerConfig,
    clear_config_cache,
    get_provider_config,
    load_app_config,
    resolve_state_dir,
)

__all__ = [
    "AppConfig",
    "AssistantConfig",
    "ProviderConfig",
    "TimerConfig",
    "clear_config_cache",
    "get_provider_config",
    "load_app_config",
    "resolve_state_dir",
]
