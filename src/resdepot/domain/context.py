"""Owner of the resource tables published by successful checks."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from resdepot.domain.model import DEFAULT_GROUP_NAME, ResourceSnapshot

if TYPE_CHECKING:
    from resdepot.domain.model import (
        AssetInfo,
        ResolvedResourceEntry,
        ResourceGroup,
        ResourceName,
    )

log = getLogger(__name__)


@dataclass(slots=True, eq=False)
class ResourceContext:
    """Double-buffered holder of the current ``ResourceSnapshot``.

    A check stages its tables privately and swaps them in with ``replace`` once
    it succeeds. Readers holding the previous snapshot keep a consistent view.
    """

    _snapshot: ResourceSnapshot = field(default_factory=ResourceSnapshot)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def snapshot(self) -> ResourceSnapshot:
        with self._lock:
            return self._snapshot

    def replace(self, snapshot: ResourceSnapshot) -> ResourceSnapshot:
        """Publish ``snapshot`` and return the one it replaces."""

        with self._lock:
            previous = self._snapshot
            self._snapshot = snapshot
        log.debug(
            f"Published resource snapshot: internal_version={snapshot.internal_version}, "
            f"resolved={len(snapshot.resolved)}, cached={len(snapshot.cached)}"
        )
        return previous

    @property
    def applicable_version(self) -> str | None:
        return self.snapshot.applicable_version

    @property
    def internal_version(self) -> int:
        return self.snapshot.internal_version

    def resolved_entry(self, name: ResourceName) -> ResolvedResourceEntry | None:
        return self.snapshot.resolved.get(name)

    def asset_info(self, asset_name: str) -> AssetInfo | None:
        return self.snapshot.assets.get(asset_name)

    def dependency_closure(self, asset_name: str) -> tuple[str, ...]:
        """Return every asset ``asset_name`` depends on, directly or not, in visit order.

        Dependencies missing from the current projection are skipped. Cycles are
        tolerated.
        """

        assets = self.snapshot.assets
        root = assets.get(asset_name)
        if root is None:
            return ()

        ordered: list[str] = []
        seen = {asset_name}
        pending = deque(root.dependency_asset_names)
        while pending:
            name = pending.popleft()
            if name in seen:
                continue
            seen.add(name)
            info = assets.get(name)
            if info is None:
                continue
            ordered.append(name)
            pending.extend(info.dependency_asset_names)
        return tuple(ordered)

    def resources_for_asset(self, asset_name: str) -> tuple[ResourceName, ...]:
        """Resources needed to load ``asset_name`` together with its dependencies."""

        assets = self.snapshot.assets
        names = (asset_name, *self.dependency_closure(asset_name))
        resources: list[ResourceName] = []
        for name in names:
            info = assets.get(name)
            if info is not None and info.resource_name not in resources:
                resources.append(info.resource_name)
        return tuple(resources)

    def group(self, name: str = DEFAULT_GROUP_NAME) -> ResourceGroup | None:
        return self.snapshot.groups.get(name)

    def group_is_ready(self, name: str = DEFAULT_GROUP_NAME) -> bool:
        snapshot = self.snapshot
        group = snapshot.groups.get(name)
        if group is None:
            return False
        return group.is_ready(snapshot.resolved)
