"""Cross-client change watcher.

Polls the shared storage area for ``:updated`` stamps written by other
clients and delivers them as external invalidations. The writing client
never hears its own writes through this path; it already got them
synchronously from :meth:`Broadcaster.emit`.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from vacsite.cache.events import Broadcaster
from vacsite.cache.store import DurableStore

_logger = logging.getLogger(__name__)


class StorageWatcher:
    """Background poller turning foreign stamp changes into signals."""

    def __init__(self, store: DurableStore, broadcaster: Broadcaster, *, interval: float = 1.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._store = store
        self._broadcaster = broadcaster
        self._interval = interval
        self._seen: dict[str, str] = {}
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def prime(self) -> None:
        """Mark every current stamp as seen without signalling."""
        self._seen = self._store.stamps()

    def poll_once(self) -> list[str]:
        """Check stamps once; return the resource keys signalled."""
        changed: list[str] = []
        for resource_key, stamp in self._store.stamps().items():
            if self._seen.get(resource_key) == stamp:
                continue
            self._seen[resource_key] = stamp
            if self._store.is_own_write(resource_key, stamp):
                continue
            changed.append(resource_key)
        for resource_key in changed:
            self._broadcaster.receive(resource_key)
        return changed

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.poll_once()
            except Exception:
                _logger.exception("Storage watcher poll failed")

    def start(self) -> None:
        """Start polling on the running loop (no-op if already running)."""
        if self.is_running:
            return
        self.prime()
        self._task = asyncio.get_running_loop().create_task(self._run(), name="vacsite-storage-watcher")
        _logger.debug("Storage watcher started interval=%.2fs", self._interval)

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        _logger.debug("Storage watcher stopped")
