"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .remote import get_remote_config
from .storage import StorageConfig, get_data_dir, get_http_cache_path, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_data_dir",
    "get_http_cache_path",
    "get_remote_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_vars",
]
