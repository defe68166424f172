from __future__ import annotations

from itertools import permutations
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from resdepot.adapters.filesystem import LocalResourceStorage
from resdepot.config import ConfigurationError, StorageConfig
from resdepot.domain.errors import (
    BestEffortOperation,
    DecodeError,
    ProtocolViolation,
    TransportError,
)
from resdepot.domain.model import Disposition, LoadType, ResourceName, StorageSource
from tests.helpers.loaders import DeferredLoader, SyncFileLoader
from tests.helpers.manifests import (
    asset,
    group,
    local_manifest_bytes,
    local_resource,
    target_manifest_bytes,
    target_resource,
    write_manifests,
    write_resource,
)

if TYPE_CHECKING:
    from resdepot.domain.context import ResourceContext
    from tests.conftest import CheckerFactory
    from tests.helpers.events import RecordedEvents


class RefusingDeleteStorage(LocalResourceStorage):
    def delete(self, path: Path) -> None:
        if path.suffix == ".dat" and path.stem != "ResourceList":
            raise PermissionError(f"Permission denied: '{path}'")
        super().delete(path)


def _uris(config: StorageConfig) -> dict[str, str]:
    return {
        "target": config.target_manifest_uri(),
        "read_only": config.read_only_manifest_uri(),
        "read_write": config.read_write_manifest_uri(),
    }


def test_missing_loader_is_a_configuration_error(make_checker: CheckerFactory) -> None:
    checker = make_checker(None)

    with pytest.raises(ConfigurationError, match="Byte loader is invalid"):
        checker.check_resources()


@pytest.mark.parametrize(
    ("read_only_path", "read_write_path", "message"),
    [
        ("", "rw", "Read-only path is invalid"),
        ("ro", "", "Read-write path is invalid"),
    ],
)
def test_missing_roots_fail_before_any_load(
    make_checker: CheckerFactory,
    read_only_path: str,
    read_write_path: str,
    message: str,
) -> None:
    loader = DeferredLoader()
    checker = make_checker(loader)
    checker.storage_config = StorageConfig(
        read_only_path=read_only_path, read_write_path=read_write_path
    )

    with pytest.raises(ConfigurationError, match=message):
        checker.check_resources()

    assert loader.order == []


def test_check_issues_the_three_manifest_loads(
    make_checker: CheckerFactory, storage_config: StorageConfig
) -> None:
    loader = DeferredLoader()

    make_checker(loader).check_resources()

    assert sorted(loader.order) == sorted(_uris(storage_config).values())
    assert storage_config.target_manifest_uri().endswith("ResourceVersion.dat")
    assert storage_config.read_only_manifest_uri().endswith("ResourceList.dat")


@pytest.mark.parametrize("order", list(permutations(["target", "read_only", "read_write"])))
def test_reconciliation_runs_once_after_all_three_loads(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    events: RecordedEvents,
    order: tuple[str, ...],
) -> None:
    payloads = {
        "target": target_manifest_bytes(
            [target_resource("res1", hash_code=1), target_resource("res2", hash_code=2)]
        ),
        "read_only": local_manifest_bytes([local_resource("res1", hash_code=1)]),
        "read_write": local_manifest_bytes([]),
    }
    uris = _uris(storage_config)
    loader = DeferredLoader()
    checker = make_checker(loader)
    session = checker.check_resources()

    for index, key in enumerate(order):
        assert events.completions == []
        loader.deliver(uris[key], payloads[key])
        assert session.is_completed == (index == len(order) - 1)

    assert events.completions == [(0, 1, 100, 50)]
    assert events.updated_names == {ResourceName("res2")}
    assert session.records[ResourceName("res1")].disposition is Disposition.STORAGE_IN_READ_ONLY


def test_resource_cached_in_read_write_area_is_resolved_without_update(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    resource_context: ResourceContext,
    events: RecordedEvents,
) -> None:
    write_manifests(
        storage_config,
        target=target_manifest_bytes([target_resource("res1", length=100, hash_code=11)]),
        read_only=local_manifest_bytes([]),
        read_write=local_manifest_bytes([local_resource("res1", length=100, hash_code=11)]),
    )

    session = make_checker(SyncFileLoader()).check_resources()

    record = session.records[ResourceName("res1")]
    assert record.disposition is Disposition.STORAGE_IN_READ_WRITE
    entry = resource_context.resolved_entry(ResourceName("res1"))
    assert entry is not None
    assert entry.storage is StorageSource.READ_WRITE
    assert events.updates == []
    assert events.completions == [(0, 0, 0, 0)]


def test_resources_for_other_variants_never_get_target_info(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    events: RecordedEvents,
) -> None:
    write_manifests(
        storage_config,
        target=target_manifest_bytes(
            [
                target_resource("res1"),
                target_resource("res2", variant="hd", length=300, compressed_length=120),
            ]
        ),
    )

    session = make_checker(SyncFileLoader()).check_resources("sd")

    assert ResourceName("res2", "hd") not in session.records
    assert events.updated_names == {ResourceName("res1")}
    assert events.completions == [(0, 1, 100, 50)]


def test_matching_variant_is_checked(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    events: RecordedEvents,
) -> None:
    write_manifests(
        storage_config,
        target=target_manifest_bytes(
            [target_resource("res2", variant="hd", length=300, compressed_length=120)]
        ),
    )

    make_checker(SyncFileLoader()).check_resources("hd")

    assert events.updates == [(ResourceName("res2", "hd"), LoadType.LOAD_FROM_FILE, 300, 1, 120, 2)]


def test_missing_local_manifests_are_tolerated(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    events: RecordedEvents,
) -> None:
    write_manifests(
        storage_config,
        target=target_manifest_bytes(
            [
                target_resource("a", length=10, compressed_length=4),
                target_resource("b", length=20, compressed_length=6),
            ]
        ),
    )

    make_checker(SyncFileLoader()).check_resources()

    assert events.updated_names == {ResourceName("a"), ResourceName("b")}
    assert events.completions == [(0, 2, 30, 10)]
    assert events.failures == []


def test_missing_target_manifest_aborts_without_completion(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    resource_context: ResourceContext,
    events: RecordedEvents,
) -> None:
    uris = _uris(storage_config)
    loader = DeferredLoader()
    previous = resource_context.snapshot
    session = make_checker(loader).check_resources()

    loader.deliver(uris["read_only"], local_manifest_bytes([local_resource("a")]))
    with pytest.raises(TransportError, match="is invalid, error message is 'connection reset'"):
        loader.deliver(uris["target"], error="connection reset")
    loader.deliver(uris["read_write"], local_manifest_bytes([]))

    assert session.is_failed
    assert isinstance(session.error, TransportError)
    assert len(events.failures) == 1
    assert events.completions == []
    assert resource_context.snapshot is previous


def test_empty_target_payload_is_fatal(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
) -> None:
    loader = DeferredLoader()
    make_checker(loader).check_resources()

    with pytest.raises(TransportError, match="<Empty>"):
        loader.deliver(storage_config.target_manifest_uri(), b"")


def test_undecodable_local_manifest_is_fatal(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    events: RecordedEvents,
) -> None:
    write_manifests(
        storage_config,
        target=target_manifest_bytes([target_resource("a")]),
        read_only=b"{not json",
    )

    with pytest.raises(DecodeError) as excinfo:
        make_checker(SyncFileLoader()).check_resources()

    assert excinfo.value.__cause__ is not None
    assert events.completions == []


def test_inconsistent_target_manifest_is_fatal(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
) -> None:
    write_manifests(
        storage_config,
        target=target_manifest_bytes([target_resource("a", assets=[3])], assets=[asset("x")]),
    )

    with pytest.raises(DecodeError, match="Deserialize target manifest failure"):
        make_checker(SyncFileLoader()).check_resources()


def test_duplicate_load_completion_is_a_protocol_violation(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    events: RecordedEvents,
) -> None:
    loader = DeferredLoader()
    session = make_checker(loader).check_resources()
    uri = storage_config.read_write_manifest_uri()
    loader.deliver(uri, local_manifest_bytes([]))

    with pytest.raises(ProtocolViolation):
        loader.deliver(uri, local_manifest_bytes([]))

    assert session.is_failed
    assert [type(error) for error in events.failures] == [ProtocolViolation]


def test_disused_resources_are_deleted(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    resource_context: ResourceContext,
    events: RecordedEvents,
) -> None:
    write_manifests(
        storage_config,
        target=target_manifest_bytes([target_resource("a", hash_code=5)]),
        read_write=local_manifest_bytes(
            [
                local_resource("a", hash_code=5),
                local_resource("b"),
                local_resource("c", variant="hd"),
            ]
        ),
    )
    kept = write_resource(storage_config, "a")
    stale_b = write_resource(storage_config, "b")
    stale_c = write_resource(storage_config, "c.hd")

    make_checker(SyncFileLoader()).check_resources()

    assert kept.exists()
    assert not stale_b.exists()
    assert not stale_c.exists()
    assert events.completions == [(2, 0, 0, 0)]
    assert set(resource_context.snapshot.cached) == {ResourceName("a")}


def test_emptied_directories_are_pruned_after_removal(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
) -> None:
    write_manifests(
        storage_config,
        target=target_manifest_bytes([target_resource("a")]),
        read_write=local_manifest_bytes([local_resource("textures/old")]),
    )
    stale = write_resource(storage_config, "textures/old")

    make_checker(SyncFileLoader()).check_resources()

    assert not stale.parent.exists()
    assert Path(storage_config.read_write_path).is_dir()


def test_already_missing_disused_file_counts_as_removed(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    events: RecordedEvents,
) -> None:
    write_manifests(
        storage_config,
        target=target_manifest_bytes([]),
        read_write=local_manifest_bytes([local_resource("gone")]),
    )

    make_checker(SyncFileLoader()).check_resources()

    assert events.completions == [(1, 0, 0, 0)]
    assert events.best_effort == []


def test_failed_deletion_is_reported_and_check_completes(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    resource_context: ResourceContext,
    events: RecordedEvents,
) -> None:
    write_manifests(
        storage_config,
        target=target_manifest_bytes([]),
        read_write=local_manifest_bytes([local_resource("locked")]),
    )
    locked = write_resource(storage_config, "locked")

    make_checker(SyncFileLoader(), storage=RefusingDeleteStorage()).check_resources()

    assert locked.exists()
    assert events.completions == [(0, 0, 0, 0)]
    assert [failure.operation for failure in events.best_effort] == [
        BestEffortOperation.DELETE_RESOURCE
    ]
    assert ResourceName("locked") in resource_context.snapshot.cached


def test_disused_entry_outside_read_write_area_is_not_deleted(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    resource_context: ResourceContext,
    events: RecordedEvents,
) -> None:
    bundled = Path(storage_config.read_only_path) / "bundled.dat"
    bundled.write_bytes(b"shipped")
    write_manifests(
        storage_config,
        target=target_manifest_bytes([target_resource("a")]),
        read_write=local_manifest_bytes([local_resource("../read-only/bundled")]),
    )

    make_checker(SyncFileLoader()).check_resources()

    assert bundled.read_bytes() == b"shipped"
    assert events.completions == [(0, 1, 100, 50)]
    assert [failure.operation for failure in events.best_effort] == [
        BestEffortOperation.DELETE_RESOURCE
    ]
    assert ResourceName("../read-only/bundled") in resource_context.snapshot.cached


def test_unexpected_error_during_reconciliation_fails_the_check(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    resource_context: ResourceContext,
    events: RecordedEvents,
) -> None:
    def broken_hook(*_: object) -> None:
        raise ValueError("listener crashed")

    initial = resource_context.snapshot
    uris = _uris(storage_config)
    loader = DeferredLoader()
    checker = make_checker(loader)
    checker.on_resource_needs_update = broken_hook
    session = checker.check_resources()
    loader.deliver(uris["target"], target_manifest_bytes([target_resource("a")]))
    loader.deliver(uris["read_only"], local_manifest_bytes([]))

    with pytest.raises(ProtocolViolation) as excinfo:
        loader.deliver(uris["read_write"], local_manifest_bytes([]))

    assert isinstance(excinfo.value.__cause__, ValueError)
    assert session.is_failed
    assert events.failures == [excinfo.value]
    assert events.completions == []
    assert resource_context.snapshot is initial


def test_duplicate_completion_during_reconciliation_publishes_nothing(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    resource_context: ResourceContext,
    events: RecordedEvents,
) -> None:
    initial = resource_context.snapshot
    uris = _uris(storage_config)
    loader = DeferredLoader()
    checker = make_checker(loader)
    rejected: list[ProtocolViolation] = []

    def redeliver(*_: object) -> None:
        try:
            loader.deliver(uris["read_only"], local_manifest_bytes([]))
        except ProtocolViolation as exc:
            rejected.append(exc)

    checker.on_resource_needs_update = redeliver
    session = checker.check_resources()
    loader.deliver(uris["target"], target_manifest_bytes([target_resource("a")]))
    loader.deliver(uris["read_only"], local_manifest_bytes([]))

    with pytest.raises(ProtocolViolation):
        loader.deliver(uris["read_write"], local_manifest_bytes([]))

    assert len(rejected) == 1
    assert session.is_failed
    assert events.failures == rejected
    assert events.completions == []
    assert resource_context.snapshot is initial


def test_backup_manifest_is_restored_before_loading(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    events: RecordedEvents,
) -> None:
    write_manifests(
        storage_config,
        target=target_manifest_bytes([target_resource("a", hash_code=5)]),
        read_write=b"half written",
    )
    storage_config.read_write_backup_path().write_bytes(
        local_manifest_bytes([local_resource("a", hash_code=5)])
    )

    make_checker(SyncFileLoader()).check_resources()

    assert not storage_config.read_write_backup_path().exists()
    assert events.updates == []
    assert events.completions == [(0, 0, 0, 0)]


def test_shuffled_target_manifest_gives_same_result(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    resource_context: ResourceContext,
    events: RecordedEvents,
) -> None:
    resources = [
        target_resource("a", hash_code=1, length=10, compressed_length=1),
        target_resource("b", hash_code=2, length=20, compressed_length=2),
        target_resource("c", hash_code=3, length=30, compressed_length=3),
        target_resource("d", hash_code=4, length=40, compressed_length=4),
    ]
    local = local_manifest_bytes([local_resource("a", hash_code=1, length=10)])
    cache = local_manifest_bytes([local_resource("c", hash_code=3, length=30)])
    checker = make_checker(SyncFileLoader())

    write_manifests(
        storage_config, target=target_manifest_bytes(resources), read_only=local, read_write=cache
    )
    checker.check_resources()
    first = dict(resource_context.snapshot.resolved)

    write_manifests(storage_config, target=target_manifest_bytes(list(reversed(resources))))
    checker.check_resources()
    second = dict(resource_context.snapshot.resolved)

    assert first == second
    assert events.completions[0] == events.completions[1] == (0, 2, 60, 6)


def test_snapshot_exposes_assets_and_groups(
    make_checker: CheckerFactory,
    storage_config: StorageConfig,
    resource_context: ResourceContext,
) -> None:
    write_manifests(
        storage_config,
        target=target_manifest_bytes(
            [
                target_resource("core", hash_code=1, assets=[0]),
                target_resource("level1", hash_code=2, assets=[1]),
            ],
            assets=[asset("Main"), asset("Level", 0)],
            groups=[group("startup", 0), group("levels", 1)],
            applicable_version="2.1.0",
            internal_version=42,
        ),
        read_only=local_manifest_bytes([local_resource("core", hash_code=1)]),
    )

    make_checker(SyncFileLoader()).check_resources()

    assert resource_context.applicable_version == "2.1.0"
    assert resource_context.internal_version == 42
    assert resource_context.resources_for_asset("Level") == (
        ResourceName("level1"),
        ResourceName("core"),
    )
    assert resource_context.group_is_ready("startup")
    assert not resource_context.group_is_ready("levels")
    assert not resource_context.group_is_ready()
