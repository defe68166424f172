"""Domain model for resource reconciliation."""

from __future__ import annotations

from .enums import Disposition, LoadType, ManifestSource, StorageSource
from .manifest import (
    LocalManifest,
    LocalResource,
    TargetAsset,
    TargetManifest,
    TargetResource,
    TargetResourceGroup,
)
from .resource import (
    AssetInfo,
    CachedResourceEntry,
    ResolvedResourceEntry,
    ResourceGroup,
    ResourceName,
)
from .snapshot import DEFAULT_GROUP_NAME, ResourceSnapshot

__all__ = [
    "DEFAULT_GROUP_NAME",
    "AssetInfo",
    "CachedResourceEntry",
    "Disposition",
    "LoadType",
    "LocalManifest",
    "LocalResource",
    "ManifestSource",
    "ResolvedResourceEntry",
    "ResourceGroup",
    "ResourceName",
    "ResourceSnapshot",
    "StorageSource",
    "TargetAsset",
    "TargetManifest",
    "TargetResource",
    "TargetResourceGroup",
]
