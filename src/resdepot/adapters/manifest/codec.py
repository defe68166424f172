"""JSON implementation of the ``ManifestCodec`` port."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError

from resdepot.domain.errors import DecodeError
from resdepot.domain.ports.codec import ManifestCodec

from .schema import LocalManifestPayload, TargetManifestPayload
from .translator import translate_local_manifest, translate_target_manifest

if TYPE_CHECKING:
    from resdepot.domain.model import LocalManifest, TargetManifest


class JsonManifestCodec:
    def decode_target(self, payload: bytes) -> TargetManifest:
        try:
            validated = TargetManifestPayload.model_validate_json(payload)
        except ValidationError as exc:
            raise DecodeError(f"Invalid target manifest payload: {exc}") from exc
        return translate_target_manifest(validated)

    def decode_local(self, payload: bytes) -> LocalManifest:
        try:
            validated = LocalManifestPayload.model_validate_json(payload)
        except ValidationError as exc:
            raise DecodeError(f"Invalid local manifest payload: {exc}") from exc
        return translate_local_manifest(validated)


if TYPE_CHECKING:
    _codec_check: ManifestCodec = JsonManifestCodec()
