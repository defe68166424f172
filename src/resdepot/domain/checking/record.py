"""Per-resource accumulator and the disposition state machine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from resdepot.domain.errors import ProtocolViolation
from resdepot.domain.model import Disposition, ResolvedResourceEntry, StorageSource

if TYPE_CHECKING:
    from resdepot.domain.model import ResourceName

    from .contracts import LocalObservation, TargetObservation


def classify(
    target: TargetObservation | None,
    local: LocalObservation | None,
    cache: LocalObservation | None,
) -> tuple[Disposition, bool]:
    """Return ``(disposition, needs_removal)`` for one resource.

    Rules are checked in order and the first match wins. Only hash and length
    take part in a match; a load type difference alone does not force an update.
    """

    if target is not None:
        if local is not None and local.matches(target):
            return Disposition.STORAGE_IN_READ_ONLY, False
        if cache is not None and cache.matches(target):
            return Disposition.STORAGE_IN_READ_WRITE, False
        return Disposition.NEED_UPDATE, False
    if cache is not None:
        return Disposition.DISUSE, True
    return Disposition.UNAVAILABLE, False


@dataclass(slots=True)
class CheckRecord:
    """Merge of up to three observations of one resource."""

    name: ResourceName
    target: TargetObservation | None = None
    local: LocalObservation | None = None
    cache: LocalObservation | None = None
    disposition: Disposition | None = None
    needs_removal: bool = False

    def set_target(self, observation: TargetObservation) -> None:
        if self.target is not None:
            raise ProtocolViolation(f"Target info for '{self.name}' has already been set")
        self.target = observation

    def set_local(self, observation: LocalObservation) -> None:
        if self.local is not None:
            raise ProtocolViolation(f"Read-only info for '{self.name}' has already been set")
        self.local = observation

    def set_cache(self, observation: LocalObservation) -> None:
        if self.cache is not None:
            raise ProtocolViolation(f"Read-write info for '{self.name}' has already been set")
        self.cache = observation

    def refresh(self) -> Disposition:
        self.disposition, self.needs_removal = classify(self.target, self.local, self.cache)
        return self.disposition

    def resolved_entry(self) -> ResolvedResourceEntry:
        """Build the index entry for a record that resolved to a storage area."""

        if self.target is None:
            raise ProtocolViolation(f"Resource '{self.name}' has no target info to resolve")
        if self.disposition is Disposition.STORAGE_IN_READ_ONLY:
            storage = StorageSource.READ_ONLY
        elif self.disposition is Disposition.STORAGE_IN_READ_WRITE:
            storage = StorageSource.READ_WRITE
        else:
            raise ProtocolViolation(
                f"Resource '{self.name}' is not stored locally ({self.disposition})"
            )
        return ResolvedResourceEntry(
            name=self.name,
            load_type=self.target.load_type,
            length=self.target.length,
            hash=self.target.hash,
            storage=storage,
        )
