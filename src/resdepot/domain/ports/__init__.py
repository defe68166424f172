"""Domain port definitions for adapters."""

from __future__ import annotations

from .codec import ManifestCodec
from .loading import ByteLoader, LoadBytesCallback, LoadResult
from .storage import ResourceStorage

__all__ = [
    "ByteLoader",
    "LoadBytesCallback",
    "LoadResult",
    "ManifestCodec",
    "ResourceStorage",
]
