from __future__ import annotations

from typing import TYPE_CHECKING

from resdepot.adapters.filesystem import LocalResourceStorage
from resdepot.domain.checking import RecoveryOutcome, recover_manifest
from resdepot.domain.errors import BestEffortOperation

if TYPE_CHECKING:
    from pathlib import Path


class BrokenMoveStorage(LocalResourceStorage):
    def move(self, source: Path, destination: Path) -> None:
        raise PermissionError(f"cannot move {source}")


def _paths(tmp_path: Path) -> tuple[Path, Path]:
    return tmp_path / "ResourceList.dat", tmp_path / "ResourceList.dat.bak"


def test_nothing_to_recover_without_backup(tmp_path: Path) -> None:
    manifest, backup = _paths(tmp_path)
    manifest.write_text("current")

    result = recover_manifest(LocalResourceStorage(), manifest_path=manifest, backup_path=backup)

    assert result.outcome is RecoveryOutcome.NOTHING_TO_RECOVER
    assert manifest.read_text() == "current"


def test_backup_replaces_existing_manifest(tmp_path: Path) -> None:
    manifest, backup = _paths(tmp_path)
    manifest.write_text("torn")
    backup.write_text("previous")

    result = recover_manifest(LocalResourceStorage(), manifest_path=manifest, backup_path=backup)

    assert result.outcome is RecoveryOutcome.RECOVERED
    assert manifest.read_text() == "previous"
    assert not backup.exists()


def test_backup_is_moved_when_manifest_is_missing(tmp_path: Path) -> None:
    manifest, backup = _paths(tmp_path)
    backup.write_text("previous")

    result = recover_manifest(LocalResourceStorage(), manifest_path=manifest, backup_path=backup)

    assert result.outcome is RecoveryOutcome.RECOVERED
    assert manifest.read_text() == "previous"


def test_second_recovery_is_a_no_op(tmp_path: Path) -> None:
    manifest, backup = _paths(tmp_path)
    backup.write_text("previous")
    storage = LocalResourceStorage()

    first = recover_manifest(storage, manifest_path=manifest, backup_path=backup)
    second = recover_manifest(storage, manifest_path=manifest, backup_path=backup)

    assert first.outcome is RecoveryOutcome.RECOVERED
    assert second.outcome is RecoveryOutcome.NOTHING_TO_RECOVER
    assert manifest.read_text() == "previous"


def test_recovery_failure_is_returned_not_raised(tmp_path: Path) -> None:
    manifest, backup = _paths(tmp_path)
    backup.write_text("previous")

    result = recover_manifest(BrokenMoveStorage(), manifest_path=manifest, backup_path=backup)

    assert result.failed
    assert result.failure is not None
    assert result.failure.operation is BestEffortOperation.RECOVER_MANIFEST
    assert "cannot move" in result.failure.reason
    assert backup.exists()
