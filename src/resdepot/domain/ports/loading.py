"""Port for the byte-level transport that reads manifests."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class LoadResult:
    """Completion of one byte load.

    ``payload`` is ``None`` when the transport failed, in which case ``error``
    carries the transport's message.
    """

    uri: str
    payload: bytes | None = None
    error: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.payload


type LoadBytesCallback = Callable[[LoadResult], None]


@runtime_checkable
class ByteLoader(Protocol):
    """Issue a non-blocking load and report it through ``callback`` exactly once."""

    def load_bytes(self, uri: str, callback: LoadBytesCallback) -> None: ...


__all__ = ["ByteLoader", "LoadBytesCallback", "LoadResult"]
