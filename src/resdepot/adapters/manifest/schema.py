"""Pydantic models describing the JSON manifest payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

from resdepot.domain.model import LoadType


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class ManifestBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class AssetPayload(ManifestBaseModel):
    name: str = Field(min_length=1)
    dependencies: list[NonNegativeInt] = Field(default_factory=list)


class LocalResourcePayload(ManifestBaseModel):
    name: str = Field(min_length=1)
    variant: str | None = None
    load_type: LoadType = Field(default=LoadType.LOAD_FROM_FILE, alias="loadType")
    length: NonNegativeInt
    hash: int

    _normalize_variant = field_validator("variant", mode="before")(_blank_to_none)


class TargetResourcePayload(LocalResourcePayload):
    compressed_length: NonNegativeInt = Field(alias="compressedLength")
    compressed_hash: int = Field(alias="compressedHash")
    assets: list[NonNegativeInt] = Field(default_factory=list)


class ResourceGroupPayload(ManifestBaseModel):
    name: str = Field(min_length=1)
    resources: list[NonNegativeInt] = Field(default_factory=list)


class TargetManifestPayload(ManifestBaseModel):
    applicable_version: str | None = Field(default=None, alias="applicableVersion")
    internal_version: NonNegativeInt = Field(default=0, alias="internalVersion")
    assets: list[AssetPayload] = Field(default_factory=list)
    resources: list[TargetResourcePayload] = Field(default_factory=list)
    resource_groups: list[ResourceGroupPayload] = Field(
        default_factory=list, alias="resourceGroups"
    )

    _normalize_version = field_validator("applicable_version", mode="before")(_blank_to_none)


class LocalManifestPayload(ManifestBaseModel):
    resources: list[LocalResourcePayload] = Field(default_factory=list)
