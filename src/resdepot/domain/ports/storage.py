"""Port for the filesystem operations performed on the mutable storage area."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path


@runtime_checkable
class ResourceStorage(Protocol):
    def exists(self, path: Path) -> bool: ...

    def delete(self, path: Path) -> None: ...

    def move(self, source: Path, destination: Path) -> None: ...

    def remove_empty_directories(self, root: Path) -> bool: ...


__all__ = ["ResourceStorage"]
