"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when a storage location or transport setting is unusable."""


class MissingConfigurationError(ConfigurationError):
    """Raised when a required environment variable is absent or blank."""
