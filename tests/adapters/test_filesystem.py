from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from resdepot.adapters.filesystem import LocalResourceStorage
from resdepot.domain.ports import ResourceStorage


def test_local_storage_satisfies_port() -> None:
    assert isinstance(LocalResourceStorage(), ResourceStorage)


def test_exists_delete_and_move(tmp_path: Path) -> None:
    storage = LocalResourceStorage()
    source = tmp_path / "a.dat"
    destination = tmp_path / "b.dat"
    source.write_bytes(b"a")

    assert storage.exists(source)
    assert not storage.exists(tmp_path)

    storage.move(source, destination)
    assert not storage.exists(source)
    assert destination.read_bytes() == b"a"

    storage.delete(destination)
    assert not destination.exists()


def test_delete_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        LocalResourceStorage().delete(tmp_path / "missing.dat")


def test_remove_empty_directories_keeps_root_and_files(tmp_path: Path) -> None:
    (tmp_path / "empty" / "nested").mkdir(parents=True)
    (tmp_path / "full").mkdir()
    (tmp_path / "full" / "keep.dat").write_bytes(b"k")

    removed = LocalResourceStorage().remove_empty_directories(tmp_path)

    assert removed
    assert not (tmp_path / "empty").exists()
    assert (tmp_path / "full" / "keep.dat").exists()
    assert tmp_path.is_dir()


def test_remove_empty_directories_reports_nothing_to_do(tmp_path: Path) -> None:
    storage = LocalResourceStorage()

    assert not storage.remove_empty_directories(tmp_path)
    assert not storage.remove_empty_directories(tmp_path / "missing")
