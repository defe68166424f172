"""Translate validated manifest payloads into domain manifests.

Schema validation only covers the shape of each entry. Cross-references between
entries are checked here, and an inconsistent manifest is returned with
``is_valid=False`` instead of raising.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from logging import getLogger
from typing import TYPE_CHECKING

from resdepot.domain.model import (
    LocalManifest,
    LocalResource,
    TargetAsset,
    TargetManifest,
    TargetResource,
    TargetResourceGroup,
)

if TYPE_CHECKING:
    from collections.abc import Hashable

    from .schema import LocalManifestPayload, LocalResourcePayload, TargetManifestPayload

log = getLogger(__name__)


def _has_duplicates(keys: Iterable[Hashable]) -> bool:
    seen: set[Hashable] = set()
    for key in keys:
        if key in seen:
            return True
        seen.add(key)
    return False


def _indexes_in_range(indexes: Sequence[int], size: int) -> bool:
    return all(index < size for index in indexes)


def _resource_keys(resources: Iterable[LocalResourcePayload]) -> Iterable[tuple[str, str | None]]:
    return ((resource.name, resource.variant) for resource in resources)


def target_consistency_problems(payload: TargetManifestPayload) -> list[str]:
    problems: list[str] = []
    asset_count = len(payload.assets)
    resource_count = len(payload.resources)

    if _has_duplicates(asset.name for asset in payload.assets):
        problems.append("duplicate asset names")
    if _has_duplicates(_resource_keys(payload.resources)):
        problems.append("duplicate resource names")
    if _has_duplicates(group.name for group in payload.resource_groups):
        problems.append("duplicate resource group names")

    for asset in payload.assets:
        if not _indexes_in_range(asset.dependencies, asset_count):
            problems.append(f"asset '{asset.name}' depends on an unknown asset index")

    owners: dict[int, str] = {}
    for resource in payload.resources:
        if not _indexes_in_range(resource.assets, asset_count):
            problems.append(f"resource '{resource.name}' lists an unknown asset index")
            continue
        for index in resource.assets:
            owner = owners.setdefault(index, resource.name)
            if owner != resource.name:
                problems.append(f"asset index {index} belongs to more than one resource")

    for group in payload.resource_groups:
        if not _indexes_in_range(group.resources, resource_count):
            problems.append(f"resource group '{group.name}' lists an unknown resource index")

    return problems


def translate_target_manifest(payload: TargetManifestPayload) -> TargetManifest:
    problems = target_consistency_problems(payload)
    for problem in problems:
        log.warning(f"Inconsistent target manifest: {problem}")

    return TargetManifest(
        is_valid=not problems,
        applicable_version=payload.applicable_version,
        internal_version=payload.internal_version,
        assets=tuple(
            TargetAsset(name=asset.name, dependency_asset_indexes=tuple(asset.dependencies))
            for asset in payload.assets
        ),
        resources=tuple(
            TargetResource(
                name=resource.name,
                variant=resource.variant,
                load_type=resource.load_type,
                length=resource.length,
                hash=resource.hash,
                compressed_length=resource.compressed_length,
                compressed_hash=resource.compressed_hash,
                asset_indexes=tuple(resource.assets),
            )
            for resource in payload.resources
        ),
        resource_groups=tuple(
            TargetResourceGroup(name=group.name, resource_indexes=tuple(group.resources))
            for group in payload.resource_groups
        ),
    )


def translate_local_manifest(payload: LocalManifestPayload) -> LocalManifest:
    duplicated = _has_duplicates(_resource_keys(payload.resources))
    if duplicated:
        log.warning("Inconsistent local manifest: duplicate resource names")

    return LocalManifest(
        is_valid=not duplicated,
        resources=tuple(
            LocalResource(
                name=resource.name,
                variant=resource.variant,
                load_type=resource.load_type,
                length=resource.length,
                hash=resource.hash,
            )
            for resource in payload.resources
        ),
    )
