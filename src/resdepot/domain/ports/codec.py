"""Port for decoding manifest payloads."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from resdepot.domain.model import LocalManifest, TargetManifest


@runtime_checkable
class ManifestCodec(Protocol):
    """Turn raw manifest bytes into validated manifest value objects.

    Implementations raise ``DecodeError`` for payloads they cannot read at all
    and return a manifest with ``is_valid=False`` for payloads that parse but are
    internally inconsistent.
    """

    def decode_target(self, payload: bytes) -> TargetManifest: ...

    def decode_local(self, payload: bytes) -> LocalManifest: ...


__all__ = ["ManifestCodec"]
