"""``ByteLoader`` adapter running loads as tasks on an asyncio event loop."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

import httpx

from resdepot.adapters.http_resilience import ResilientClient
from resdepot.config.http_resilience import ResilienceConfig
from resdepot.domain.errors import CheckError
from resdepot.domain.ports.loading import ByteLoader, LoadBytesCallback, LoadResult

log = getLogger(__name__)

type Fetch = Callable[[str], Awaitable[bytes]]

HTTP_SCHEMES = frozenset({"http", "https"})


def uri_to_path(uri: str) -> Path:
    """Map a plain path or a ``file://`` URI onto a local ``Path``."""

    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(url2pathname(unquote(parsed.path)))
    return Path(uri)


async def read_file_bytes(uri: str) -> bytes:
    return await asyncio.to_thread(uri_to_path(uri).read_bytes)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class AsyncByteLoader:
    """Load local files and HTTP resources without blocking the running loop.

    Each ``load_bytes`` call schedules one task. The task reports exactly one
    ``LoadResult``; transport failures are reported through ``LoadResult.error``
    rather than raised. The loader must be used from inside a running loop.
    """

    def __init__(
        self,
        *,
        resilience: ResilienceConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] = _default_client_factory,
        file_fetch: Fetch = read_file_bytes,
    ) -> None:
        self._resilience = resilience or ResilienceConfig(name="manifest")
        self._client_factory = client_factory
        self._file_fetch = file_fetch
        self._client: ResilientClient | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def load_bytes(self, uri: str, callback: LoadBytesCallback) -> None:
        task = asyncio.get_running_loop().create_task(self._load(uri, callback))
        self._tasks.add(task)
        task.add_done_callback(self._forget)

    async def wait(self) -> None:
        """Wait for every load issued so far to report its result."""

        while self._tasks:
            await asyncio.gather(*tuple(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> AsyncByteLoader:
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.wait()
        await self.aclose()

    async def _load(self, uri: str, callback: LoadBytesCallback) -> None:
        try:
            payload = await self._fetch(uri)
        except FileNotFoundError:
            result = LoadResult(uri=uri, error=f"File not found: {uri}")
        except (OSError, httpx.HTTPError) as exc:
            log.debug(f"Loading {uri} failed: {exc!r}")
            result = LoadResult(uri=uri, error=str(exc) or type(exc).__name__)
        else:
            result = LoadResult(uri=uri, payload=payload)
        callback(result)

    async def _fetch(self, uri: str) -> bytes:
        if urlparse(uri).scheme in HTTP_SCHEMES:
            return await self._http_client().get_bytes(uri)
        return await self._file_fetch(uri)

    def _http_client(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._resilience)
        return self._client

    def _forget(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if isinstance(exc, CheckError):
            log.debug(f"Load callback aborted its check: {exc!r}")
        elif exc is not None:
            log.error("Load callback raised", exc_info=exc)


if TYPE_CHECKING:
    _loader_check: ByteLoader = AsyncByteLoader()
