"""Read-through cache layer.

Every public read goes remote first, keeps the last good answer in a
durable key/value storage area, and falls back to that copy (then to a
compiled-in default) when the backend cannot answer. Writes to the
storage area are broadcast to listeners in this client and, through the
storage watcher, to every other client sharing the same storage.
"""

from vacsite.cache.consumer import LiveResource
from vacsite.cache.events import ALL_RESOURCES, Broadcaster
from vacsite.cache.loader import Provenance, ReadThroughLoader, Resolved
from vacsite.cache.storage import FileStorage, MemoryStorage, Storage, StorageFullError
from vacsite.cache.store import DurableStore
from vacsite.cache.watcher import StorageWatcher

__all__ = [
    "ALL_RESOURCES",
    "Broadcaster",
    "DurableStore",
    "FileStorage",
    "LiveResource",
    "MemoryStorage",
    "Provenance",
    "ReadThroughLoader",
    "Resolved",
    "Storage",
    "StorageFullError",
    "StorageWatcher",
]
