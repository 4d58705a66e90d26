"""Mounted view of one resource that stays current.

A :class:`LiveResource` is what a page component holds: it loads once on
mount, re-runs the full read-through load on every invalidation of its
resource (from this client or another one), and reports each new value
through ``on_change``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from vacsite.cache.events import Broadcaster
from vacsite.cache.loader import Provenance, ReadThroughLoader, Resolved

_logger = logging.getLogger(__name__)

T = TypeVar("T")

ChangeCallback = Callable[[T, Provenance], None]


class LiveResource(Generic[T]):
    """Consumer-side binding of a loader to the broadcaster.

    ``loading`` is ``True`` only until the first resolution; later
    refreshes swap the value in place. Invalidations that arrive while a
    load is running are coalesced into one follow-up refresh, except the
    one raised by that load's own cache write.
    """

    def __init__(
        self,
        loader: ReadThroughLoader[Any, T],
        broadcaster: Broadcaster,
        *,
        on_change: ChangeCallback[T] | None = None,
    ) -> None:
        self._loader = loader
        self._broadcaster = broadcaster
        self._on_change = on_change
        self._unsubscribe: Callable[[], None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._generation = 0
        self._loading_task: asyncio.Task[Any] | None = None
        self._busy = False
        self._dirty = False
        self._refresh_task: asyncio.Task[None] | None = None
        self._mount_task: asyncio.Task[None] | None = None

        self.value: T | None = None
        self.provenance: Provenance | None = None
        self.loading = True

    @property
    def resource_key(self) -> str:
        return self._loader.resource_key

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    async def mount(self) -> T:
        """Subscribe, then run the initial load."""
        if self.mounted:
            if self.loading:
                await self.settle()
            return self.value  # type: ignore[return-value]
        self._loop = asyncio.get_running_loop()
        self._generation += 1
        self._unsubscribe = self._broadcaster.subscribe(self.resource_key, self._on_invalidate)
        self._mount_task = self._loop.create_task(self._initial_load(self._generation))
        await self._mount_task
        return self.value  # type: ignore[return-value]

    async def _initial_load(self, generation: int) -> None:
        await self._load(generation)
        if self._dirty and self.mounted and generation == self._generation:
            self._refresh_task = asyncio.get_running_loop().create_task(self._refresh())

    def unmount(self) -> None:
        """Unsubscribe. In-flight loads finish but no longer touch this object."""
        unsubscribe = self._unsubscribe
        self._unsubscribe = None
        if unsubscribe is None:
            return
        unsubscribe()
        self._generation += 1
        self._dirty = False

    async def settle(self) -> None:
        """Wait until the initial load and any pending refresh are done."""
        mount_task = self._mount_task
        if mount_task is not None and not mount_task.done():
            await asyncio.shield(mount_task)
        while self._refresh_task is not None and not self._refresh_task.done():
            await self._refresh_task

    async def _load(self, generation: int) -> None:
        self._busy = True
        self._loading_task = asyncio.current_task()
        try:
            resolved = await self._loader.resolve()
        finally:
            self._busy = False
            self._loading_task = None
        if generation != self._generation:
            _logger.debug("Dropping stale result for unmounted %s", self.resource_key)
            return
        self._apply(resolved)

    def _apply(self, resolved: Resolved[T]) -> None:
        self.value = resolved.value
        self.provenance = resolved.provenance
        self.loading = False
        if self._on_change is None:
            return
        try:
            self._on_change(resolved.value, resolved.provenance)
        except Exception:
            _logger.exception("on_change for %s raised", self.resource_key)

    def _on_invalidate(self) -> None:
        if not self.mounted or self._loop is None:
            return
        if self._busy:
            # Our own load's cache write is not news to us.
            if asyncio.current_task() is not self._loading_task:
                self._dirty = True
            return
        if self._refresh_task is not None and not self._refresh_task.done():
            self._dirty = True
            return
        self._refresh_task = self._loop.create_task(self._refresh())

    async def _refresh(self) -> None:
        while True:
            self._dirty = False
            generation = self._generation
            await self._load(generation)
            if not self._dirty or generation != self._generation:
                return
