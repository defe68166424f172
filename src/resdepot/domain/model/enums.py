"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class LoadType(IntEnum):
    """How the resource loader opens a resource file."""

    LOAD_FROM_FILE = 0
    LOAD_FROM_MEMORY = 1
    LOAD_FROM_MEMORY_AND_QUICK_DECRYPT = 2
    LOAD_FROM_MEMORY_AND_DECRYPT = 3
    LOAD_FROM_BINARY = 4
    LOAD_FROM_BINARY_AND_QUICK_DECRYPT = 5
    LOAD_FROM_BINARY_AND_DECRYPT = 6


class Disposition(StrEnum):
    """Outcome of reconciling one resource against the three manifests."""

    STORAGE_IN_READ_ONLY = "storage_in_read_only"
    STORAGE_IN_READ_WRITE = "storage_in_read_write"
    NEED_UPDATE = "need_update"
    DISUSE = "disuse"
    UNAVAILABLE = "unavailable"


class StorageSource(StrEnum):
    """Storage area a resolved resource is served from."""

    READ_ONLY = "read_only"
    READ_WRITE = "read_write"


class ManifestSource(StrEnum):
    """The three manifests joined by one check."""

    TARGET = "target"
    READ_ONLY = "read_only"
    READ_WRITE = "read_write"
