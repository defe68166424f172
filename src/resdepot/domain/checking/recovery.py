"""Restore the mutable-area manifest from its crash-safety backup.

An update writes the new manifest next to a backup of the previous one and
removes the backup last. A crash in between leaves the backup behind, and the
manifest itself may be half written. The backup is the last complete state, so
it wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from resdepot.domain.errors import BestEffortFailure, BestEffortOperation

if TYPE_CHECKING:
    from pathlib import Path

    from resdepot.domain.ports import ResourceStorage

log = getLogger(__name__)


class RecoveryOutcome(StrEnum):
    NOTHING_TO_RECOVER = "nothing_to_recover"
    RECOVERED = "recovered"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class RecoveryResult:
    outcome: RecoveryOutcome
    failure: BestEffortFailure | None = None

    @property
    def failed(self) -> bool:
        return self.outcome is RecoveryOutcome.FAILED


def recover_manifest(
    storage: ResourceStorage,
    *,
    manifest_path: Path,
    backup_path: Path,
) -> RecoveryResult:
    """Move ``backup_path`` over ``manifest_path`` if a backup exists. Never raises."""

    try:
        if not storage.exists(backup_path):
            return RecoveryResult(RecoveryOutcome.NOTHING_TO_RECOVER)

        if storage.exists(manifest_path):
            storage.delete(manifest_path)

        storage.move(backup_path, manifest_path)
    except OSError as exc:
        failure = BestEffortFailure(
            operation=BestEffortOperation.RECOVER_MANIFEST,
            path=str(backup_path),
            reason=str(exc),
        )
        log.debug(f"Could not recover read-write manifest: {failure.describe()}")
        return RecoveryResult(RecoveryOutcome.FAILED, failure=failure)

    log.info("Recovered read-write manifest from %s", backup_path)
    return RecoveryResult(RecoveryOutcome.RECOVERED)
