"""Public interface for the JSON manifest adapter."""

from __future__ import annotations

from .codec import JsonManifestCodec
from .schema import (
    LocalManifestPayload,
    LocalResourcePayload,
    TargetManifestPayload,
    TargetResourcePayload,
)
from .translator import translate_local_manifest, translate_target_manifest

__all__ = [
    "JsonManifestCodec",
    "LocalManifestPayload",
    "LocalResourcePayload",
    "TargetManifestPayload",
    "TargetResourcePayload",
    "translate_local_manifest",
    "translate_target_manifest",
]
