"""Decoded manifest value objects.

Indexes inside a target manifest refer to positions in its ``assets`` and
``resources`` tuples. The codec checks that they are in range and reports the
result through ``is_valid``; consumers only read a manifest once it is valid.
"""

from __future__ import annotations

from dataclasses import dataclass

from .enums import LoadType
from .resource import ResourceName


@dataclass(frozen=True, slots=True, kw_only=True)
class TargetAsset:
    name: str
    dependency_asset_indexes: tuple[int, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class TargetResource:
    name: str
    variant: str | None = None
    load_type: LoadType = LoadType.LOAD_FROM_FILE
    length: int
    hash: int
    compressed_length: int
    compressed_hash: int
    asset_indexes: tuple[int, ...] = ()

    @property
    def resource_name(self) -> ResourceName:
        return ResourceName(self.name, self.variant)


@dataclass(frozen=True, slots=True, kw_only=True)
class TargetResourceGroup:
    name: str
    resource_indexes: tuple[int, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class TargetManifest:
    """Remote-authoritative list of the resources that should exist."""

    is_valid: bool
    applicable_version: str | None = None
    internal_version: int = 0
    assets: tuple[TargetAsset, ...] = ()
    resources: tuple[TargetResource, ...] = ()
    resource_groups: tuple[TargetResourceGroup, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class LocalResource:
    name: str
    variant: str | None = None
    load_type: LoadType = LoadType.LOAD_FROM_FILE
    length: int
    hash: int

    @property
    def resource_name(self) -> ResourceName:
        return ResourceName(self.name, self.variant)


@dataclass(frozen=True, slots=True, kw_only=True)
class LocalManifest:
    """List of resources present in one local storage area."""

    is_valid: bool
    resources: tuple[LocalResource, ...] = ()
