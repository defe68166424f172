"""Storage area configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var, require_env_vars

APP_DIR_NAME: Final[str] = "resdepot"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"

DEFAULT_RESOURCE_LIST_FILE_NAME: Final[str] = "ResourceList"
DEFAULT_VERSION_LIST_FILE_NAME: Final[str] = "ResourceVersion"
DEFAULT_FILE_SUFFIX: Final[str] = ".dat"
DEFAULT_BACKUP_SUFFIX: Final[str] = ".bak"

READ_ONLY_PATH_ENV: Final[str] = "RESDEPOT_READ_ONLY_PATH"
READ_WRITE_PATH_ENV: Final[str] = "RESDEPOT_READ_WRITE_PATH"
REMOTE_ROOT_ENV: Final[str] = "RESDEPOT_REMOTE_ROOT"


def join_location(root: str, file_name: str) -> str:
    """Join ``file_name`` onto a filesystem root or a URL root."""

    if "://" in root:
        return f"{root.rstrip('/')}/{file_name}"
    return str(Path(root) / file_name)


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Locations of the three manifests and the mutable resource area.

    ``remote_root`` holds the target version list. When unset it falls back to
    ``read_write_path``, which is where the updater drops the downloaded list.
    """

    read_only_path: str
    read_write_path: str
    remote_root: str | None = None
    resource_list_file_name: str = DEFAULT_RESOURCE_LIST_FILE_NAME
    version_list_file_name: str = DEFAULT_VERSION_LIST_FILE_NAME
    file_suffix: str = DEFAULT_FILE_SUFFIX
    backup_suffix: str = DEFAULT_BACKUP_SUFFIX

    def with_suffix(self, name: str) -> str:
        return f"{name}{self.file_suffix}"

    def target_manifest_uri(self) -> str:
        root = self.remote_root or self.read_write_path
        return join_location(root, self.with_suffix(self.version_list_file_name))

    def read_only_manifest_uri(self) -> str:
        return join_location(self.read_only_path, self.with_suffix(self.resource_list_file_name))

    def read_write_manifest_uri(self) -> str:
        return join_location(self.read_write_path, self.with_suffix(self.resource_list_file_name))

    def read_write_manifest_path(self) -> Path:
        return Path(self.read_write_path) / self.with_suffix(self.resource_list_file_name)

    def read_write_backup_path(self) -> Path:
        manifest = self.read_write_manifest_path()
        return manifest.with_name(manifest.name + self.backup_suffix)

    def read_write_resource_path(self, full_name: str) -> Path:
        return Path(self.read_write_path) / self.with_suffix(full_name)

    def is_in_read_write_area(self, path: Path) -> bool:
        """Whether ``path`` resolves to a location under the read-write root."""

        root = Path(self.read_write_path).resolve()
        return path.resolve().is_relative_to(root)


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_data_dir() -> Path:
    """Return the directory where resdepot keeps its own bookkeeping files."""

    env_dir = os.getenv("RESDEPOT_DATA_DIR")
    if env_dir:
        return Path(env_dir).expanduser().resolve()
    return _default_data_dir()


def get_http_cache_path(*, ensure: bool = True) -> Path:
    data_dir = get_data_dir()
    if ensure:
        data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / HTTP_CACHE_FILENAME


def get_storage_config(
    *,
    read_only_path: str | None = None,
    read_write_path: str | None = None,
    remote_root: str | None = None,
    require_read_only: bool = True,
) -> StorageConfig:
    """Build the storage config, filling unspecified locations from the environment.

    With ``require_read_only=False`` a missing read-only root is left empty, for
    callers such as manifest recovery that only touch the read-write area.
    """

    required = [(READ_WRITE_PATH_ENV, read_write_path)]
    if require_read_only:
        required.append((READ_ONLY_PATH_ENV, read_only_path))
    missing = [name for name, value in required if not value]
    values = require_env_vars(missing) if missing else {}
    return StorageConfig(
        read_only_path=read_only_path or optional_env_var(READ_ONLY_PATH_ENV) or "",
        read_write_path=read_write_path or values[READ_WRITE_PATH_ENV],
        remote_root=remote_root or optional_env_var(REMOTE_ROOT_ENV),
    )
