from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import pytest

from resdepot.adapters.filesystem import LocalResourceStorage
from resdepot.adapters.manifest import JsonManifestCodec
from resdepot.config import StorageConfig
from resdepot.domain.checking import ResourceChecker
from resdepot.domain.context import ResourceContext
from tests.helpers.events import RecordedEvents

if TYPE_CHECKING:
    from pathlib import Path

    from resdepot.domain.ports import ByteLoader, ResourceStorage


class CheckerFactory(Protocol):
    def __call__(
        self,
        loader: ByteLoader | None,
        *,
        storage: ResourceStorage | None = None,
    ) -> ResourceChecker: ...


@pytest.fixture
def storage_config(tmp_path: Path) -> StorageConfig:
    read_only = tmp_path / "read-only"
    read_write = tmp_path / "read-write"
    read_only.mkdir()
    read_write.mkdir()
    return StorageConfig(read_only_path=str(read_only), read_write_path=str(read_write))


@pytest.fixture
def resource_context() -> ResourceContext:
    return ResourceContext()


@pytest.fixture
def events() -> RecordedEvents:
    return RecordedEvents()


@pytest.fixture
def make_checker(
    storage_config: StorageConfig,
    resource_context: ResourceContext,
    events: RecordedEvents,
) -> CheckerFactory:
    def factory(
        loader: ByteLoader | None,
        *,
        storage: ResourceStorage | None = None,
    ) -> ResourceChecker:
        return ResourceChecker(
            context=resource_context,
            storage_config=storage_config,
            loader=loader,
            codec=JsonManifestCodec(),
            storage=storage or LocalResourceStorage(),
            on_resource_needs_update=events.on_resource_needs_update,
            on_check_complete=events.on_check_complete,
            on_check_failed=events.failures.append,
            on_best_effort_failure=events.best_effort.append,
        )

    return factory
