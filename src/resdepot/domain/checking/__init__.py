"""Resource check: join three manifests and reconcile them per resource.

Flow of one check:
1) restore the read-write manifest from a leftover backup
2) load the target, read-only and read-write manifests concurrently
3) project each manifest into check records as it arrives
4) once all three arrived, classify every record exactly once
5) publish the resolved index and report updates and removals
"""

from __future__ import annotations

from .checker import (
    BestEffortFailureHook,
    CheckCompleteHook,
    CheckFailedHook,
    ResourceChecker,
    ResourceNeedsUpdateHook,
)
from .contracts import (
    CheckSummary,
    LocalObservation,
    ResourceUpdate,
    TargetObservation,
)
from .record import CheckRecord, classify
from .recovery import RecoveryOutcome, RecoveryResult, recover_manifest
from .session import CheckSession, SessionState

__all__ = [
    "BestEffortFailureHook",
    "CheckCompleteHook",
    "CheckFailedHook",
    "CheckRecord",
    "CheckSession",
    "CheckSummary",
    "LocalObservation",
    "RecoveryOutcome",
    "RecoveryResult",
    "ResourceChecker",
    "ResourceNeedsUpdateHook",
    "ResourceUpdate",
    "SessionState",
    "TargetObservation",
    "classify",
    "recover_manifest",
]
