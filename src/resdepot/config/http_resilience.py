"""HTTP settings for downloading manifests from a remote root."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Literal

import httpx

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_USER_AGENT: Final[str] = "resdepot"

TRANSIENT_STATUS_CODES: Final[frozenset[int]] = frozenset({408, 429, 500, 502, 503, 504})
TRANSIENT_ERRORS: Final[tuple[type[httpx.HTTPError], ...]] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """How often a manifest download is retried after a transient failure."""

    total: int = 3
    backoff_factor: float = 0.5
    retry_statuses: frozenset[int] = TRANSIENT_STATUS_CODES


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """HTTP cache for manifests served with caching headers.

    ``path`` only applies to the sqlite backend and defaults to the data directory.
    """

    enabled: bool = True
    backend: Literal["sqlite", "memory"] = "memory"
    path: Path | None = None
    ttl_seconds: float | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    user_agent: str = DEFAULT_USER_AGENT
