"""Read-through loader with three-tier degradation.

``remote`` -> ``cached`` -> ``default``. A loader never raises to its
caller: whatever goes wrong on the remote path, the caller gets the last
cached snapshot or the compiled-in default.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

from vacsite.cache.store import DurableStore
from vacsite.exceptions import SiteError

_logger = logging.getLogger(__name__)

R = TypeVar("R")
T = TypeVar("T")


class Provenance(StrEnum):
    REMOTE = "remote"
    CACHED = "cached"
    DEFAULT = "default"


@dataclass(frozen=True)
class Resolved(Generic[T]):
    """A loaded value and where it came from."""

    value: T
    provenance: Provenance


class ReadThroughLoader(Generic[R, T]):
    """Loader for one resource.

    Parameters
    ----------
    resource_key : str
        Cache key, also the broadcaster scope (e.g. ``"footer:legal"``).
    fetch : callable
        Coroutine function returning the raw remote answer. ``None`` is a
        valid answer meaning "no row yet".
    transform : callable
        Maps the raw answer to the canonical, JSON-safe snapshot. Resource
        specific seeding of empty answers belongs here.
    default : value or callable
        Fallback used when neither remote nor cache can answer. Callables
        are invoked per use; plain values are deep-copied per use.
    store : DurableStore
        Where successful answers are kept.
    is_valid : callable, optional
        Shape check for cached snapshots; a cached value failing it is
        treated as absent.
    """

    def __init__(
        self,
        resource_key: str,
        *,
        fetch: Callable[[], Awaitable[R]],
        transform: Callable[[R], T],
        default: T | Callable[[], T],
        store: DurableStore,
        is_valid: Callable[[Any], bool] | None = None,
    ) -> None:
        self.resource_key = resource_key
        self._fetch = fetch
        self._transform = transform
        self._default = default
        self._store = store
        self._is_valid = is_valid

    def fallback_default(self) -> T:
        if callable(self._default):
            return self._default()  # type: ignore[no-any-return]
        return copy.deepcopy(self._default)

    async def resolve(self) -> Resolved[T]:
        """Load the freshest available value with its provenance."""
        try:
            raw = await self._fetch()
            value = self._transform(raw)
        except asyncio.CancelledError:
            raise
        except SiteError as exc:
            _logger.warning("Remote read of %s failed, using fallback: %s", self.resource_key, exc)
        except Exception:
            _logger.exception("Unexpected error reading %s, using fallback", self.resource_key)
        else:
            self._store.save(self.resource_key, value)
            return Resolved(value=value, provenance=Provenance.REMOTE)

        cached = self._store.load(self.resource_key)
        if cached is not None and (self._is_valid is None or self._is_valid(cached)):
            return Resolved(value=cached, provenance=Provenance.CACHED)
        if cached is not None:
            _logger.debug("Discarding cached %s with unexpected shape", self.resource_key)
        return Resolved(value=self.fallback_default(), provenance=Provenance.DEFAULT)

    async def load(self) -> T:
        """Load the freshest available value."""
        return (await self.resolve()).value
