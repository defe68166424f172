"""Project decoded manifests onto the current content variant.

Target resources whose variant is neither ``None`` nor the current variant are
skipped entirely: they contribute no observation, no asset info and no group
membership.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from resdepot.domain.model import DEFAULT_GROUP_NAME, AssetInfo, ResourceGroup

from .contracts import LocalContribution, LocalObservation, TargetContribution, TargetObservation

if TYPE_CHECKING:
    from resdepot.domain.model import (
        LocalManifest,
        ResourceName,
        TargetAsset,
        TargetManifest,
        TargetResource,
    )


def _dependency_names(asset: TargetAsset, assets: tuple[TargetAsset, ...]) -> tuple[str, ...]:
    return tuple(assets[index].name for index in asset.dependency_asset_indexes)


def _group_for(groups: dict[str, ResourceGroup], name: str) -> ResourceGroup:
    group = groups.get(name)
    if group is None:
        group = ResourceGroup(name)
        groups[name] = group
    return group


def project_target_manifest(
    manifest: TargetManifest,
    *,
    current_variant: str | None,
) -> TargetContribution:
    """Build observations, asset infos and resource groups for ``current_variant``."""

    observations: list[tuple[ResourceName, TargetObservation]] = []
    assets: dict[str, AssetInfo] = {}
    groups: dict[str, ResourceGroup] = {}
    default_group = _group_for(groups, DEFAULT_GROUP_NAME)

    for resource in manifest.resources:
        resource_name = resource.resource_name
        if not resource_name.matches_variant(current_variant):
            continue

        for asset_index in resource.asset_indexes:
            asset = manifest.assets[asset_index]
            assets[asset.name] = AssetInfo(
                asset_name=asset.name,
                resource_name=resource_name,
                dependency_asset_names=_dependency_names(asset, manifest.assets),
            )

        observations.append((resource_name, _target_observation(resource)))
        default_group.add_resource(resource_name, resource.length, resource.compressed_length)

    for declared in manifest.resource_groups:
        group = _group_for(groups, declared.name)
        for resource_index in declared.resource_indexes:
            resource = manifest.resources[resource_index]
            resource_name = resource.resource_name
            if resource_name.matches_variant(current_variant):
                group.add_resource(resource_name, resource.length, resource.compressed_length)

    return TargetContribution(
        applicable_version=manifest.applicable_version,
        internal_version=manifest.internal_version,
        observations=tuple(observations),
        assets=assets,
        groups=groups,
    )


def project_local_manifest(manifest: LocalManifest) -> LocalContribution:
    return LocalContribution(
        observations=tuple(
            (
                resource.resource_name,
                LocalObservation(
                    load_type=resource.load_type,
                    length=resource.length,
                    hash=resource.hash,
                ),
            )
            for resource in manifest.resources
        )
    )


def _target_observation(resource: TargetResource) -> TargetObservation:
    return TargetObservation(
        load_type=resource.load_type,
        length=resource.length,
        hash=resource.hash,
        compressed_length=resource.compressed_length,
        compressed_hash=resource.compressed_hash,
    )
