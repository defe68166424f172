"""Published result of a successful resource check."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .resource import (
        AssetInfo,
        CachedResourceEntry,
        ResolvedResourceEntry,
        ResourceGroup,
        ResourceName,
    )

DEFAULT_GROUP_NAME = ""


def _empty_mapping() -> Mapping[object, object]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True, kw_only=True)
class ResourceSnapshot:
    """Read-only view of the resource tables rebuilt by one check."""

    applicable_version: str | None = None
    internal_version: int = 0
    resolved: Mapping[ResourceName, ResolvedResourceEntry] = field(default_factory=_empty_mapping)
    cached: Mapping[ResourceName, CachedResourceEntry] = field(default_factory=_empty_mapping)
    assets: Mapping[str, AssetInfo] = field(default_factory=_empty_mapping)
    groups: Mapping[str, ResourceGroup] = field(default_factory=_empty_mapping)

    @classmethod
    def freeze(
        cls,
        *,
        applicable_version: str | None,
        internal_version: int,
        resolved: dict[ResourceName, ResolvedResourceEntry],
        cached: dict[ResourceName, CachedResourceEntry],
        assets: dict[str, AssetInfo],
        groups: dict[str, ResourceGroup],
    ) -> ResourceSnapshot:
        return cls(
            applicable_version=applicable_version,
            internal_version=internal_version,
            resolved=MappingProxyType(dict(resolved)),
            cached=MappingProxyType(dict(cached)),
            assets=MappingProxyType(dict(assets)),
            groups=MappingProxyType(dict(groups)),
        )

    @property
    def default_group(self) -> ResourceGroup | None:
        return self.groups.get(DEFAULT_GROUP_NAME)
