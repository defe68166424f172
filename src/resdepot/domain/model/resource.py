"""Resource identity and per-resource records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import LoadType, StorageSource

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class ResourceName:
    """Identity of a resource file: base name plus optional variant tag."""

    name: str
    variant: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Resource name must not be empty")
        if self.variant == "":
            raise ValueError("Resource variant must be None or non-empty")

    @property
    def full_name(self) -> str:
        if self.variant is None:
            return self.name
        return f"{self.name}.{self.variant}"

    def matches_variant(self, current_variant: str | None) -> bool:
        return self.variant is None or self.variant == current_variant

    def sort_key(self) -> tuple[str, bool, str]:
        return (self.name, self.variant is not None, self.variant or "")

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ResourceName):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True, slots=True)
class ResolvedResourceEntry:
    """A resource that is usable as-is from one of the local storage areas."""

    name: ResourceName
    load_type: LoadType
    length: int
    hash: int
    storage: StorageSource

    @property
    def in_read_only(self) -> bool:
        return self.storage is StorageSource.READ_ONLY


@dataclass(frozen=True, slots=True)
class CachedResourceEntry:
    """A resource file physically present in the mutable storage area."""

    load_type: LoadType
    length: int
    hash: int


@dataclass(frozen=True, slots=True)
class AssetInfo:
    """Asset to resource mapping with the asset's direct dependencies."""

    asset_name: str
    resource_name: ResourceName
    dependency_asset_names: tuple[str, ...] = ()


@dataclass(slots=True)
class ResourceGroup:
    """Named aggregate over resources with running size totals."""

    name: str
    _resource_names: set[ResourceName] = field(default_factory=set["ResourceName"], repr=False)
    total_length: int = 0
    total_compressed_length: int = 0

    @property
    def resource_names(self) -> frozenset[ResourceName]:
        return frozenset(self._resource_names)

    @property
    def resource_count(self) -> int:
        return len(self._resource_names)

    def has_resource(self, name: ResourceName) -> bool:
        return name in self._resource_names

    def add_resource(self, name: ResourceName, length: int, compressed_length: int) -> bool:
        """Add ``name`` and its sizes. Returns ``False`` if it was already a member."""

        if name in self._resource_names:
            return False
        self._resource_names.add(name)
        self.total_length += length
        self.total_compressed_length += compressed_length
        return True

    def ready_names(
        self, resolved: Mapping[ResourceName, ResolvedResourceEntry]
    ) -> tuple[ResourceName, ...]:
        return tuple(sorted(name for name in self._resource_names if name in resolved))

    def ready_count(self, resolved: Mapping[ResourceName, ResolvedResourceEntry]) -> int:
        return len(self.ready_names(resolved))

    def ready_length(self, resolved: Mapping[ResourceName, ResolvedResourceEntry]) -> int:
        return sum(resolved[name].length for name in self.ready_names(resolved))

    def is_ready(self, resolved: Mapping[ResourceName, ResolvedResourceEntry]) -> bool:
        return self.ready_count(resolved) == self.resource_count
