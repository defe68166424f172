"""``ResourceStorage`` adapter backed by the local filesystem."""

from __future__ import annotations

import os
from logging import getLogger
from typing import TYPE_CHECKING

from resdepot.domain.ports.storage import ResourceStorage

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)


class LocalResourceStorage:
    def exists(self, path: Path) -> bool:
        return path.is_file()

    def delete(self, path: Path) -> None:
        path.unlink()

    def move(self, source: Path, destination: Path) -> None:
        os.replace(source, destination)

    def remove_empty_directories(self, root: Path) -> bool:
        """Remove every empty directory below ``root``, bottom-up.

        ``root`` itself is kept. Returns ``True`` if anything was removed.
        """

        if not root.is_dir():
            return False

        removed = False
        for current, _dirs, _files in os.walk(root, topdown=False):
            directory = root.joinpath(os.path.relpath(current, root))
            if directory == root or any(directory.iterdir()):
                continue
            directory.rmdir()
            log.debug("Removed empty directory %s", directory)
            removed = True
        return removed


if TYPE_CHECKING:
    _storage_check: ResourceStorage = LocalResourceStorage()
