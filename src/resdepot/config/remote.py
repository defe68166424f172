"""Remote manifest transport configuration."""

from __future__ import annotations

from typing import Final

from .env import optional_env_var, optional_float_env_var
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

REMOTE_TIMEOUT_SECONDS: Final[float] = 15.0
HTTP_TIMEOUT_ENV: Final[str] = "RESDEPOT_HTTP_TIMEOUT"
HTTP_CACHE_ENV: Final[str] = "RESDEPOT_HTTP_CACHE"


def _cache_from_environment() -> CacheConfig | None:
    backend = optional_env_var(HTTP_CACHE_ENV)
    if backend is None or backend.lower() in {"off", "none", "0"}:
        return None
    if backend == "sqlite":
        return CacheConfig(backend="sqlite")
    if backend == "memory":
        return CacheConfig(backend="memory")
    raise ConfigurationError(f"{HTTP_CACHE_ENV} must be 'sqlite', 'memory' or 'off'")


def get_remote_config(*, resilience: ResilienceConfig | None = None) -> ResilienceConfig:
    """Return the HTTP settings used to fetch manifests from a remote root."""

    if resilience is not None:
        return resilience
    timeout = optional_float_env_var(HTTP_TIMEOUT_ENV)
    return ResilienceConfig(
        name="manifest",
        timeout_seconds=timeout if timeout is not None else REMOTE_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=8, per_seconds=1.0),
        cache=_cache_from_environment(),
    )
