"""Errors raised while checking resources."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from resdepot.config.errors import ConfigurationError

from .model.enums import ManifestSource


class CheckError(RuntimeError):
    """Base class for failures that abort a resource check."""


class TransportError(CheckError):
    """Raised when a manifest that must exist could not be loaded."""

    def __init__(self, message: str, *, source: ManifestSource, uri: str) -> None:
        super().__init__(message)
        self.source = source
        self.uri = uri


class DecodeError(CheckError):
    """Raised when a manifest payload is present but cannot be decoded."""

    def __init__(self, message: str, *, source: ManifestSource | None = None) -> None:
        super().__init__(message)
        self.source = source


class ProtocolViolation(CheckError):
    """Raised when the check orchestration reaches a state it must never reach."""


class BestEffortOperation(StrEnum):
    RECOVER_MANIFEST = "recover_manifest"
    DELETE_RESOURCE = "delete_resource"
    REMOVE_EMPTY_DIRECTORIES = "remove_empty_directories"


@dataclass(frozen=True, slots=True)
class BestEffortFailure:
    """A filesystem operation that failed without aborting the check."""

    operation: BestEffortOperation
    path: str
    reason: str

    def describe(self) -> str:
        return f"{self.operation} failed for {self.path}: {self.reason}"


__all__ = [
    "BestEffortFailure",
    "BestEffortOperation",
    "CheckError",
    "ConfigurationError",
    "DecodeError",
    "ProtocolViolation",
    "TransportError",
]
