"""Durable snapshot store.

Keeps the last known-good snapshot of each resource in a storage area,
with a sibling ``<key>:updated`` stamp that other clients watch. The
store is fail-open: a storage area that is full, disabled or corrupt
behaves like an empty cache and never raises to the caller.
"""

from __future__ import annotations

import json
import logging
import secrets
import time
from collections.abc import Callable
from typing import Any

from vacsite._constants import UPDATED_SUFFIX
from vacsite.cache.events import Broadcaster
from vacsite.cache.storage import Storage

_logger = logging.getLogger(__name__)


def _now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


def _encode(snapshot: Any) -> str:
    return json.dumps(snapshot, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class DurableStore:
    """Snapshot persistence for one client.

    Parameters
    ----------
    storage : Storage
        Storage area, possibly shared with other clients.
    broadcaster : Broadcaster
        Receives a signal after every write that changed a snapshot.
    namespace : str
        Prefix for every storage key written by this store.
    clock : callable
        Epoch-milliseconds clock used for the ``:updated`` stamps.
    """

    def __init__(
        self,
        storage: Storage,
        broadcaster: Broadcaster,
        *,
        namespace: str = "vacsite",
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._storage = storage
        self._broadcaster = broadcaster
        self._prefix = f"{namespace}:"
        self._clock = clock
        self._own_stamps: dict[str, str] = {}

    @property
    def storage(self) -> Storage:
        return self._storage

    def _storage_key(self, resource_key: str) -> str:
        return f"{self._prefix}{resource_key}"

    def save(self, resource_key: str, snapshot: Any) -> bool:
        """Persist *snapshot* and broadcast the change.

        Returns ``True`` when the stored snapshot changed.

        Writes are content-addressed: saving a value equal to the stored
        one, whose ``:updated`` stamp is present, writes nothing and emits
        nothing. Every other successful save writes the value and a fresh
        stamp, then emits. A consumer that re-loads on invalidation
        therefore never re-triggers itself.

        Storage failures are logged and reported as ``False``. If the
        stamp cannot be written, the previous value is put back so the
        area never holds a change nobody was told about.
        """
        key = self._storage_key(resource_key)
        stamp_key = key + UPDATED_SUFFIX
        try:
            payload = _encode(snapshot)
            previous = self._storage.get_item(key)
            if previous == payload and self._storage.get_item(stamp_key) is not None:
                return False
            stamp = f"{self._clock()}.{secrets.token_hex(4)}"
            self._storage.set_item(key, payload)
            try:
                self._storage.set_item(stamp_key, stamp)
            except Exception:
                self._restore(key, previous)
                raise
        except Exception:
            _logger.debug("Cache write for %s failed", resource_key, exc_info=True)
            return False

        self._own_stamps[resource_key] = stamp
        self._broadcaster.emit(resource_key)
        return True

    def _restore(self, key: str, previous: str | None) -> None:
        try:
            if previous is None:
                self._storage.remove_item(key)
            else:
                self._storage.set_item(key, previous)
        except Exception:
            _logger.debug("Cache rollback of %s failed", key, exc_info=True)

    def load(self, resource_key: str) -> Any | None:
        """Return the stored snapshot, or ``None`` if absent or unreadable."""
        try:
            raw = self._storage.get_item(self._storage_key(resource_key))
            if raw is None:
                return None
            return json.loads(raw)
        except Exception:
            _logger.debug("Cache read for %s failed", resource_key, exc_info=True)
            return None

    def updated_at(self, resource_key: str) -> int | None:
        """Epoch milliseconds of the last write, if known."""
        stamp = self.stamps().get(resource_key)
        if stamp is None:
            return None
        try:
            return int(stamp.split(".", 1)[0])
        except ValueError:
            return None

    def stamps(self) -> dict[str, str]:
        """Current ``:updated`` stamp of every resource in this namespace."""
        result: dict[str, str] = {}
        try:
            for key in self._storage.keys():
                if not key.startswith(self._prefix) or not key.endswith(UPDATED_SUFFIX):
                    continue
                stamp = self._storage.get_item(key)
                if stamp is not None:
                    result[key[len(self._prefix) : -len(UPDATED_SUFFIX)]] = stamp
        except Exception:
            _logger.debug("Cache stamp scan failed", exc_info=True)
            return {}
        return result

    def is_own_write(self, resource_key: str, stamp: str) -> bool:
        """Whether *stamp* was written by this store."""
        return self._own_stamps.get(resource_key) == stamp
