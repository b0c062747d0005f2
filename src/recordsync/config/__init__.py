"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_int_env_var, require_env_var, require_env_vars
from .errors import (
    ConfigurationError,
    InvalidOptionsError,
    MissingConfigurationError,
    UnknownPresetError,
)
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .options import OptionsModel, validate_options
from .presets import (
    ConnectorConfig,
    FixtureConfig,
    PresetConfig,
    PresetOptionsConfig,
    PresetsConfig,
    get_presets_path,
    load_presets_config,
    presets_config_from_mapping,
)
from .storage import StorageConfig, get_http_cache_path, get_storage_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "ConnectorConfig",
    "FixtureConfig",
    "InvalidOptionsError",
    "MissingConfigurationError",
    "OptionsModel",
    "PresetConfig",
    "PresetOptionsConfig",
    "PresetsConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SyncConfig",
    "UnknownPresetError",
    "configure_logging",
    "get_http_cache_path",
    "get_presets_path",
    "get_storage_config",
    "get_sync_config",
    "load_presets_config",
    "optional_int_env_var",
    "presets_config_from_mapping",
    "require_env_var",
    "require_env_vars",
    "validate_options",
]
