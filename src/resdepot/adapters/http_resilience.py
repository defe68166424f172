"""Async HTTP client used to download remote manifests."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final, TypedDict

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from resdepot.config.http_resilience import TRANSIENT_ERRORS
from resdepot.config.storage import get_http_cache_path

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._types import URLTypes

    from resdepot.config.http_resilience import CacheConfig, ResilienceConfig, RetryPolicy

log = getLogger(__name__)

IDEMPOTENT_METHODS: Final[tuple[str, ...]] = ("GET", "HEAD")


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        allowed_methods=IDEMPOTENT_METHODS,
        status_forcelist=tuple(sorted(policy.retry_statuses)),
        retry_on_exceptions=TRANSIENT_ERRORS,
    )


class AsyncClientOptions(TypedDict):
    timeout: float
    transport: httpx.AsyncBaseTransport
    headers: dict[str, str]
    follow_redirects: bool


class ResilientClient:
    """Fetch manifest bytes with retries, an optional rate limit and an optional cache."""

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter: AsyncLimiter | None = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )

        options: AsyncClientOptions = {
            "timeout": config.timeout_seconds,
            "transport": RetryTransport(retry=build_retry(config.retry)),
            "headers": {"User-Agent": config.user_agent},
            "follow_redirects": True,
        }
        storage = _build_cache_storage(config.cache)
        if storage is not None:
            self._client = AsyncCacheClient(**options, storage=storage)
        else:
            self._client = httpx.AsyncClient(**options)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_bytes(self, url: URLTypes) -> bytes:
        """GET ``url`` and return the body, raising for non-success status codes."""

        response = await self._send("GET", url)
        response.raise_for_status()
        log.debug(
            f"[{self.config.name}] {url} -> {response.status_code}, "
            f"{len(response.content)} bytes"
        )
        return response.content

    async def _send(self, method: str, url: URLTypes) -> httpx.Response:
        if self._limiter is None:
            return await self._client.request(method, url)
        async with self._limiter:
            return await self._client.request(method, url)


def _build_cache_storage(config: CacheConfig | None) -> AsyncSqliteStorage | None:
    if config is None or not config.enabled:
        return None

    if config.backend not in {"sqlite", "memory"}:
        msg = f"Unsupported cache backend: {config.backend}"
        raise ValueError(msg)

    database_path = (
        str(config.path or get_http_cache_path()) if config.backend == "sqlite" else ":memory:"
    )
    return AsyncSqliteStorage(database_path=database_path, default_ttl=config.ttl_seconds)
