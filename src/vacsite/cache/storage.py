"""Key/value storage areas for the durable cache.

A storage area holds UTF-8 string values under string keys, like a
browser's origin-scoped local storage. Several clients may share one
area: :class:`MemoryStorage` within a process, :class:`FileStorage`
across processes.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Protocol
from urllib.parse import quote, unquote

_FILE_SUFFIX = ".entry"


class StorageFullError(OSError):
    """The storage area refused a write because it is over its quota."""


class Storage(Protocol):
    """Structural interface of a storage area.

    Implementations may raise :class:`OSError` on any call; the durable
    store treats such failures as an empty cache.
    """

    def get_item(self, key: str) -> str | None:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...

    def keys(self) -> list[str]:
        ...


class MemoryStorage:
    """Dict-backed storage area.

    Parameters
    ----------
    max_bytes : int or None
        Optional quota over the UTF-8 size of all keys and values.
        Writes that would exceed it raise :class:`StorageFullError`.
    """

    def __init__(self, *, max_bytes: int | None = None) -> None:
        self._items: dict[str, str] = {}
        self._max_bytes = max_bytes

    def _size_with(self, key: str, value: str) -> int:
        total = 0
        for existing_key, existing_value in self._items.items():
            if existing_key == key:
                continue
            total += len(existing_key.encode()) + len(existing_value.encode())
        return total + len(key.encode()) + len(value.encode())

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self._max_bytes is not None and self._size_with(key, value) > self._max_bytes:
            raise StorageFullError(f"storage quota of {self._max_bytes} bytes exceeded writing {key!r}")
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()


class FileStorage:
    """Directory-backed storage area: one file per key.

    Writes go to a temporary file in the same directory and are moved into
    place with :func:`os.replace`, so readers in other processes never see
    a partial value.
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._dir = Path(directory)
        self._dir.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        return self._dir / f"{quote(key, safe='')}{_FILE_SUFFIX}"

    def get_item(self, key: str) -> str | None:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=".tmp-", suffix=_FILE_SUFFIX)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def keys(self) -> list[str]:
        return [
            unquote(path.name[: -len(_FILE_SUFFIX)])
            for path in self._dir.iterdir()
            if path.name.endswith(_FILE_SUFFIX) and not path.name.startswith(".tmp-")
        ]
