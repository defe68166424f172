"""Shared check contract components.

This module holds only:
- the per-source observations merged into check records
- the outcome values returned by the manifest parse sites
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from resdepot.domain.errors import CheckError
    from resdepot.domain.model import AssetInfo, LoadType, ResourceGroup, ResourceName


@dataclass(frozen=True, slots=True)
class TargetObservation:
    """What the remote manifest says a resource should look like."""

    load_type: LoadType
    length: int
    hash: int
    compressed_length: int
    compressed_hash: int


@dataclass(frozen=True, slots=True)
class LocalObservation:
    """What a local manifest says is present in one storage area."""

    load_type: LoadType
    length: int
    hash: int

    def matches(self, target: TargetObservation) -> bool:
        return self.hash == target.hash and self.length == target.length


@dataclass(slots=True, kw_only=True)
class TargetContribution:
    """Everything a valid target manifest contributes to one check."""

    applicable_version: str | None
    internal_version: int
    observations: tuple[tuple[ResourceName, TargetObservation], ...] = ()
    assets: dict[str, AssetInfo] = field(default_factory=dict["str", "AssetInfo"])
    groups: dict[str, ResourceGroup] = field(default_factory=dict["str", "ResourceGroup"])


@dataclass(slots=True, kw_only=True)
class LocalContribution:
    """Everything a local manifest contributes to one check."""

    observations: tuple[tuple[ResourceName, LocalObservation], ...] = ()


class ParseStatus(StrEnum):
    PARSED = "parsed"
    TOLERATED = "tolerated"
    FATAL = "fatal"


@dataclass(slots=True, kw_only=True)
class Parsed[T]:
    """Manifest decoded and projected."""

    contribution: T
    status: Literal[ParseStatus.PARSED] = ParseStatus.PARSED


@dataclass(slots=True, kw_only=True)
class Tolerated:
    """Manifest missing where absence just means "nothing recorded yet"."""

    reason: str
    status: Literal[ParseStatus.TOLERATED] = ParseStatus.TOLERATED


@dataclass(slots=True, kw_only=True)
class Fatal:
    """Manifest failure that aborts the whole check."""

    error: CheckError
    status: Literal[ParseStatus.FATAL] = ParseStatus.FATAL


type ParseOutcome[T] = Parsed[T] | Tolerated | Fatal


@dataclass(frozen=True, slots=True)
class ResourceUpdate:
    """One resource the updater has to fetch."""

    name: ResourceName
    load_type: LoadType
    length: int
    hash: int
    compressed_length: int
    compressed_hash: int


@dataclass(frozen=True, slots=True)
class CheckSummary:
    removed_count: int = 0
    update_count: int = 0
    update_total_length: int = 0
    update_total_compressed_length: int = 0
