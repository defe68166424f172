"""Orchestrator that joins the three manifests and reconciles them.

``check_resources`` validates its collaborators, restores the read-write
manifest from a backup if one was left behind, and issues the three loads. It
returns right away. Each load completion is parsed into its session; the last
one to arrive runs the reconciliation pass, which publishes a new snapshot to
the context and fires the completion event.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING, NoReturn

from resdepot.config.errors import ConfigurationError
from resdepot.domain.errors import (
    BestEffortFailure,
    BestEffortOperation,
    CheckError,
    ProtocolViolation,
)
from resdepot.domain.model import Disposition, LoadType, ManifestSource, ResourceName

from .contracts import CheckSummary, Fatal, Parsed
from .parsing import parse_local_result, parse_target_result
from .recovery import recover_manifest
from .session import CheckSession

if TYPE_CHECKING:
    from resdepot.config.storage import StorageConfig
    from resdepot.domain.context import ResourceContext
    from resdepot.domain.model import ResolvedResourceEntry
    from resdepot.domain.ports import ByteLoader, LoadResult, ManifestCodec, ResourceStorage

    from .contracts import (
        LocalContribution,
        ParseOutcome,
        TargetContribution,
        TargetObservation,
    )
    from .record import CheckRecord

log = getLogger(__name__)

_STORED_LOCALLY = frozenset({Disposition.STORAGE_IN_READ_ONLY, Disposition.STORAGE_IN_READ_WRITE})

type ResourceNeedsUpdateHook = Callable[[ResourceName, LoadType, int, int, int, int], None]
type CheckCompleteHook = Callable[[int, int, int, int], None]
type CheckFailedHook = Callable[[CheckError], None]
type BestEffortFailureHook = Callable[[BestEffortFailure], None]


@dataclass(slots=True, eq=False)
class ResourceChecker:
    """Decide which resources are usable, which to fetch and which to purge."""

    context: ResourceContext
    storage_config: StorageConfig
    loader: ByteLoader | None
    codec: ManifestCodec
    storage: ResourceStorage
    on_resource_needs_update: ResourceNeedsUpdateHook | None = None
    on_check_complete: CheckCompleteHook | None = None
    on_check_failed: CheckFailedHook | None = None
    on_best_effort_failure: BestEffortFailureHook | None = None
    _session: CheckSession | None = field(default=None, init=False, repr=False)

    @property
    def session(self) -> CheckSession | None:
        return self._session

    def check_resources(self, current_variant: str | None = None) -> CheckSession:
        """Start a check for ``current_variant`` and return its session."""

        loader = self._require_configured()
        session = CheckSession(current_variant=current_variant)
        self._session = session

        recovery = recover_manifest(
            self.storage,
            manifest_path=self.storage_config.read_write_manifest_path(),
            backup_path=self.storage_config.read_write_backup_path(),
        )
        if recovery.failure is not None:
            self._report_failure(session, recovery.failure)

        log.info("Checking resources for variant %s", current_variant or "<none>")
        loader.load_bytes(
            self.storage_config.target_manifest_uri(),
            partial(self._on_target_loaded, session),
        )
        loader.load_bytes(
            self.storage_config.read_only_manifest_uri(),
            partial(self._on_local_loaded, session, ManifestSource.READ_ONLY),
        )
        loader.load_bytes(
            self.storage_config.read_write_manifest_uri(),
            partial(self._on_local_loaded, session, ManifestSource.READ_WRITE),
        )
        return session

    def shutdown(self) -> None:
        if self._session is not None:
            self._session.clear()
            self._session = None

    def _require_configured(self) -> ByteLoader:
        if self.loader is None:
            raise ConfigurationError("Byte loader is invalid.")
        if not self.storage_config.read_only_path:
            raise ConfigurationError("Read-only path is invalid.")
        if not self.storage_config.read_write_path:
            raise ConfigurationError("Read-write path is invalid.")
        return self.loader

    def _on_target_loaded(self, session: CheckSession, result: LoadResult) -> None:
        source = ManifestSource.TARGET
        if not self._begin(session, source):
            return
        outcome: ParseOutcome[TargetContribution] = parse_target_result(
            result,
            codec=self.codec,
            current_variant=session.current_variant,
        )
        if isinstance(outcome, Fatal):
            self._abort(session, outcome.error)
        if not isinstance(outcome, Parsed):
            self._abort(session, ProtocolViolation("The target manifest cannot be tolerated"))
        self._settle(session, partial(session.complete_target, outcome.contribution))

    def _on_local_loaded(
        self,
        session: CheckSession,
        source: ManifestSource,
        result: LoadResult,
    ) -> None:
        if not self._begin(session, source):
            return
        outcome: ParseOutcome[LocalContribution] = parse_local_result(
            result,
            codec=self.codec,
            source=source,
        )
        if isinstance(outcome, Fatal):
            self._abort(session, outcome.error)
        contribution = outcome.contribution if isinstance(outcome, Parsed) else None
        self._settle(session, partial(session.complete_local, source, contribution))

    def _begin(self, session: CheckSession, source: ManifestSource) -> bool:
        try:
            started = session.begin(source)
        except ProtocolViolation as exc:
            self._abort(session, exc)
        if not started:
            log.debug("Ignoring %s manifest for a failed check", source)
        return started

    def _settle(self, session: CheckSession, complete: Callable[[], bool]) -> None:
        try:
            if complete():
                self._reconcile(session)
        except CheckError as exc:
            self._abort(session, exc)
        except Exception as exc:
            error = ProtocolViolation(f"Resource check stopped by an unexpected error: {exc!r}")
            error.__cause__ = exc
            self._abort(session, error)

    def _abort(self, session: CheckSession, error: CheckError) -> NoReturn:
        if session.fail(error):
            log.error(f"Resource check failed: {error}")
            if self.on_check_failed is not None:
                self.on_check_failed(error)
        raise error

    def _reconcile(self, session: CheckSession) -> None:
        resolved: dict[ResourceName, ResolvedResourceEntry] = {}
        removed_count = 0
        update_count = 0
        update_total_length = 0
        update_total_compressed_length = 0

        for record in session.records.values():
            disposition = record.refresh()
            log.debug("Resource %s: %s", record.name, disposition)

            if disposition in _STORED_LOCALLY:
                resolved[record.name] = record.resolved_entry()
            elif disposition is Disposition.NEED_UPDATE:
                target = self._notify_update(record)
                update_count += 1
                update_total_length += target.length
                update_total_compressed_length += target.compressed_length
            elif disposition in {Disposition.DISUSE, Disposition.UNAVAILABLE}:
                pass
            else:
                raise ProtocolViolation(
                    f"Check resources '{record.name.full_name}' error with unknown status."
                )

            if record.needs_removal and self._remove_disused(session, record.name):
                removed_count += 1

        if removed_count > 0:
            self._prune_read_write_area(session)

        summary = CheckSummary(
            removed_count=removed_count,
            update_count=update_count,
            update_total_length=update_total_length,
            update_total_compressed_length=update_total_compressed_length,
        )
        snapshot = session.build_snapshot(resolved)
        session.finish(summary)
        self.context.replace(snapshot)
        log.info(
            f"Resource check complete: resolved={len(resolved)}, removed={removed_count}, "
            f"updates={update_count}, update_length={update_total_length}, "
            f"update_compressed_length={update_total_compressed_length}"
        )
        if self.on_check_complete is not None:
            self.on_check_complete(
                removed_count,
                update_count,
                update_total_length,
                update_total_compressed_length,
            )

    def _notify_update(self, record: CheckRecord) -> TargetObservation:
        target = record.target
        if target is None:
            raise ProtocolViolation(f"Resource '{record.name}' needs update without target info")
        if self.on_resource_needs_update is not None:
            self.on_resource_needs_update(
                record.name,
                target.load_type,
                target.length,
                target.hash,
                target.compressed_length,
                target.compressed_hash,
            )
        return target

    def _remove_disused(self, session: CheckSession, name: ResourceName) -> bool:
        path = self.storage_config.read_write_resource_path(name.full_name)
        if not self.storage_config.is_in_read_write_area(path):
            self._report_failure(
                session,
                BestEffortFailure(
                    operation=BestEffortOperation.DELETE_RESOURCE,
                    path=str(path),
                    reason="path escapes the read-write area",
                ),
            )
            return False
        try:
            self.storage.delete(path)
        except FileNotFoundError:
            log.debug("Disused resource %s was already gone", path)
        except OSError as exc:
            self._report_failure(
                session,
                BestEffortFailure(
                    operation=BestEffortOperation.DELETE_RESOURCE,
                    path=str(path),
                    reason=str(exc),
                ),
            )
            return False
        session.cached.pop(name, None)
        log.debug("Removed disused resource %s", name)
        return True

    def _prune_read_write_area(self, session: CheckSession) -> None:
        root = self.storage_config.read_write_manifest_path().parent
        try:
            self.storage.remove_empty_directories(root)
        except OSError as exc:
            self._report_failure(
                session,
                BestEffortFailure(
                    operation=BestEffortOperation.REMOVE_EMPTY_DIRECTORIES,
                    path=str(root),
                    reason=str(exc),
                ),
            )

    def _report_failure(self, session: CheckSession, failure: BestEffortFailure) -> None:
        session.failures.append(failure)
        log.warning(failure.describe())
        if self.on_best_effort_failure is not None:
            self.on_best_effort_failure(failure)
