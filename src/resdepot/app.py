"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from resdepot.adapters.filesystem import LocalResourceStorage
from resdepot.adapters.loading import AsyncByteLoader
from resdepot.adapters.manifest import JsonManifestCodec
from resdepot.config import get_remote_config, get_storage_config
from resdepot.domain.checking import (
    CheckSummary,
    RecoveryResult,
    ResourceChecker,
    ResourceUpdate,
    recover_manifest,
)
from resdepot.domain.context import ResourceContext

if TYPE_CHECKING:
    from resdepot.config import ResilienceConfig, StorageConfig
    from resdepot.domain.errors import BestEffortFailure, CheckError
    from resdepot.domain.model import LoadType, ResourceName, ResourceSnapshot
    from resdepot.domain.ports import ByteLoader, ManifestCodec, ResourceStorage


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CheckReport:
    """Outcome of one completed resource check."""

    summary: CheckSummary
    updates: tuple[ResourceUpdate, ...]
    failures: tuple[BestEffortFailure, ...]
    snapshot: ResourceSnapshot


def _resolve(future: asyncio.Future[CheckSummary], summary: CheckSummary) -> None:
    if not future.done():
        future.set_result(summary)


def _reject(future: asyncio.Future[CheckSummary], error: CheckError) -> None:
    if not future.done():
        future.set_exception(error)


async def check_resources(
    current_variant: str | None = None,
    *,
    storage: StorageConfig | None = None,
    context: ResourceContext | None = None,
    loader: ByteLoader | None = None,
    codec: ManifestCodec | None = None,
    resource_storage: ResourceStorage | None = None,
    resilience: ResilienceConfig | None = None,
    timeout: float | None = None,
) -> CheckReport:
    """Run one resource check with the configured adapters and wait for it to finish.

    Raises the ``CheckError`` that aborted the check, if any. ``timeout`` bounds
    the wait for the three manifest loads.
    """

    storage_config = storage or get_storage_config()
    resource_context = context or ResourceContext()
    loop = asyncio.get_running_loop()
    completed: asyncio.Future[CheckSummary] = loop.create_future()
    updates: list[ResourceUpdate] = []
    failures: list[BestEffortFailure] = []

    def on_resource_needs_update(
        name: ResourceName,
        load_type: LoadType,
        length: int,
        hash_code: int,
        compressed_length: int,
        compressed_hash: int,
    ) -> None:
        updates.append(
            ResourceUpdate(name, load_type, length, hash_code, compressed_length, compressed_hash)
        )

    def on_check_complete(
        removed_count: int,
        update_count: int,
        update_total_length: int,
        update_total_compressed_length: int,
    ) -> None:
        summary = CheckSummary(
            removed_count=removed_count,
            update_count=update_count,
            update_total_length=update_total_length,
            update_total_compressed_length=update_total_compressed_length,
        )
        loop.call_soon_threadsafe(_resolve, completed, summary)

    def on_check_failed(error: CheckError) -> None:
        loop.call_soon_threadsafe(_reject, completed, error)

    owned_loader = (
        AsyncByteLoader(resilience=get_remote_config(resilience=resilience))
        if loader is None
        else None
    )
    checker = ResourceChecker(
        context=resource_context,
        storage_config=storage_config,
        loader=loader or owned_loader,
        codec=codec or JsonManifestCodec(),
        storage=resource_storage or LocalResourceStorage(),
        on_resource_needs_update=on_resource_needs_update,
        on_check_complete=on_check_complete,
        on_check_failed=on_check_failed,
        on_best_effort_failure=failures.append,
    )

    try:
        checker.check_resources(current_variant)
        async with asyncio.timeout(timeout):
            summary = await completed
    finally:
        checker.shutdown()
        if owned_loader is not None:
            await owned_loader.wait()
            await owned_loader.aclose()

    log.info(
        f"Checked resources: updates={summary.update_count}, removed={summary.removed_count}, "
        f"failures={len(failures)}"
    )
    return CheckReport(
        summary=summary,
        updates=tuple(updates),
        failures=tuple(failures),
        snapshot=resource_context.snapshot,
    )


def run_check(
    current_variant: str | None = None,
    *,
    storage: StorageConfig | None = None,
    resilience: ResilienceConfig | None = None,
    timeout: float | None = None,
) -> CheckReport:
    """Synchronous wrapper around ``check_resources`` for scripts and the CLI."""

    return asyncio.run(
        check_resources(
            current_variant,
            storage=storage,
            resilience=resilience,
            timeout=timeout,
        )
    )


def recover_read_write_manifest(
    *,
    storage: StorageConfig | None = None,
    resource_storage: ResourceStorage | None = None,
) -> RecoveryResult:
    """Restore the read-write manifest from its backup without running a check."""

    storage_config = storage or get_storage_config()
    return recover_manifest(
        resource_storage or LocalResourceStorage(),
        manifest_path=storage_config.read_write_manifest_path(),
        backup_path=storage_config.read_write_backup_path(),
    )
