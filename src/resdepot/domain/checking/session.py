"""State owned by one ``check_resources`` invocation.

The three load callbacks may run on different threads. Every state transition
goes through ``_lock`` so that the reconciliation pass is entered at most once,
and only after all three sources have completed.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from resdepot.domain.errors import ProtocolViolation
from resdepot.domain.model import CachedResourceEntry, ManifestSource, ResourceSnapshot

from .record import CheckRecord

if TYPE_CHECKING:
    from resdepot.domain.errors import BestEffortFailure, CheckError
    from resdepot.domain.model import (
        AssetInfo,
        ResolvedResourceEntry,
        ResourceGroup,
        ResourceName,
    )

    from .contracts import CheckSummary, LocalContribution, TargetContribution

ALL_SOURCES: Final[frozenset[ManifestSource]] = frozenset(ManifestSource)


class SessionState(StrEnum):
    PENDING = "pending"
    RECONCILING = "reconciling"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(slots=True, eq=False)
class CheckSession:
    """Check records, ready flags and staged tables for one check."""

    current_variant: str | None
    records: dict[ResourceName, CheckRecord] = field(
        default_factory=dict["ResourceName", "CheckRecord"]
    )
    applicable_version: str | None = None
    internal_version: int = 0
    assets: dict[str, AssetInfo] = field(default_factory=dict["str", "AssetInfo"])
    groups: dict[str, ResourceGroup] = field(default_factory=dict["str", "ResourceGroup"])
    cached: dict[ResourceName, CachedResourceEntry] = field(
        default_factory=dict["ResourceName", "CachedResourceEntry"]
    )
    failures: list[BestEffortFailure] = field(default_factory=list["BestEffortFailure"])
    summary: CheckSummary | None = None
    error: CheckError | None = None
    _state: SessionState = field(default=SessionState.PENDING, repr=False)
    _received: set[ManifestSource] = field(default_factory=set["ManifestSource"], repr=False)
    _ready: set[ManifestSource] = field(default_factory=set["ManifestSource"], repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_failed(self) -> bool:
        return self._state is SessionState.FAILED

    @property
    def is_completed(self) -> bool:
        return self._state is SessionState.COMPLETED

    def is_ready(self, source: ManifestSource) -> bool:
        with self._lock:
            return source in self._ready

    def begin(self, source: ManifestSource) -> bool:
        """Claim the single completion of ``source``.

        Returns ``False`` when the session already failed and the completion
        should be ignored.
        """

        with self._lock:
            if self._state is SessionState.FAILED:
                return False
            if source in self._received:
                raise ProtocolViolation(f"The {source} manifest has already been parsed")
            self._received.add(source)
            return True

    def complete_target(self, contribution: TargetContribution) -> bool:
        with self._lock:
            self.applicable_version = contribution.applicable_version
            self.internal_version = contribution.internal_version
            self.assets = contribution.assets
            self.groups = contribution.groups
            for name, observation in contribution.observations:
                self._record(name).set_target(observation)
            return self._mark_ready(ManifestSource.TARGET)

    def complete_local(
        self,
        source: ManifestSource,
        contribution: LocalContribution | None,
    ) -> bool:
        if source is ManifestSource.TARGET:
            raise ProtocolViolation("The target manifest is not a local manifest")
        with self._lock:
            if contribution is not None:
                for name, observation in contribution.observations:
                    record = self._record(name)
                    if source is ManifestSource.READ_ONLY:
                        record.set_local(observation)
                    else:
                        record.set_cache(observation)
                        self.cached[name] = CachedResourceEntry(
                            load_type=observation.load_type,
                            length=observation.length,
                            hash=observation.hash,
                        )
            return self._mark_ready(source)

    def fail(self, error: CheckError) -> bool:
        """Mark the session failed. Returns ``False`` if it already finished."""

        with self._lock:
            if self._state in {SessionState.COMPLETED, SessionState.FAILED}:
                return False
            self._state = SessionState.FAILED
            self.error = error
            return True

    def finish(self, summary: CheckSummary) -> None:
        with self._lock:
            if self._state is not SessionState.RECONCILING:
                raise ProtocolViolation(f"Cannot complete a check in state {self._state}")
            self._state = SessionState.COMPLETED
            self.summary = summary

    def build_snapshot(
        self, resolved: dict[ResourceName, ResolvedResourceEntry]
    ) -> ResourceSnapshot:
        return ResourceSnapshot.freeze(
            applicable_version=self.applicable_version,
            internal_version=self.internal_version,
            resolved=resolved,
            cached=self.cached,
            assets=self.assets,
            groups=self.groups,
        )

    def clear(self) -> None:
        with self._lock:
            self.records.clear()

    def _record(self, name: ResourceName) -> CheckRecord:
        record = self.records.get(name)
        if record is None:
            record = CheckRecord(name)
            self.records[name] = record
        return record

    def _mark_ready(self, source: ManifestSource) -> bool:
        self._ready.add(source)
        if self._ready == ALL_SOURCES and self._state is SessionState.PENDING:
            self._state = SessionState.RECONCILING
            return True
        return False
