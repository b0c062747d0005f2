"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration values are absent or blank."""


class InvalidOptionsError(ConfigurationError):
    """Raised when connector or preset options do not match their schema."""


class UnknownPresetError(ConfigurationError):
    """Raised when a preset name is not configured."""
