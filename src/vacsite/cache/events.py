"""Invalidation broadcaster.

Listeners subscribe per resource key (or to :data:`ALL_RESOURCES`) and are
called with no arguments. Signals raised by this client's own writes are
delivered synchronously from :meth:`Broadcaster.emit`; signals observed in
the shared storage area are delivered by the storage watcher through
:meth:`Broadcaster.receive`. A subscriber gets both without knowing which
path fired.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum

_logger = logging.getLogger(__name__)

ALL_RESOURCES = "*"
"""Subscribe with this key to hear about every resource."""

Listener = Callable[[], None]


class SignalOrigin(StrEnum):
    LOCAL = "local"
    EXTERNAL = "external"


@dataclass(eq=False)
class _Subscription:
    resource_key: str
    callback: Listener
    active: bool = field(default=True)


class Broadcaster:
    """Per-client registry of invalidation listeners."""

    def __init__(self) -> None:
        self._subscriptions: dict[str, list[_Subscription]] = {}

    def subscribe(self, resource_key: str, callback: Listener) -> Callable[[], None]:
        """Register *callback* and return its unsubscribe function.

        The unsubscribe function is idempotent and only ever removes this
        registration, even if the same callback was subscribed twice.
        """
        subscription = _Subscription(resource_key=resource_key, callback=callback)
        self._subscriptions.setdefault(resource_key, []).append(subscription)

        def unsubscribe() -> None:
            if not subscription.active:
                return
            subscription.active = False
            bucket = self._subscriptions.get(resource_key)
            if bucket is None:
                return
            bucket.remove(subscription)
            if not bucket:
                del self._subscriptions[resource_key]

        return unsubscribe

    def listener_count(self, resource_key: str | None = None) -> int:
        """Active registrations for *resource_key*, or in total."""
        if resource_key is not None:
            return len(self._subscriptions.get(resource_key, ()))
        return sum(len(bucket) for bucket in self._subscriptions.values())

    def emit(self, resource_key: str) -> int:
        """Deliver a signal raised by this client. Returns listeners called."""
        return self._deliver(resource_key, SignalOrigin.LOCAL)

    def receive(self, resource_key: str) -> int:
        """Deliver a signal observed from another client sharing the storage."""
        return self._deliver(resource_key, SignalOrigin.EXTERNAL)

    def _deliver(self, resource_key: str, origin: SignalOrigin) -> int:
        # Snapshot: callbacks may subscribe or unsubscribe while we iterate.
        targets = list(self._subscriptions.get(resource_key, ()))
        if resource_key != ALL_RESOURCES:
            targets.extend(self._subscriptions.get(ALL_RESOURCES, ()))

        _logger.debug("Invalidation %s origin=%s listeners=%d", resource_key, origin, len(targets))
        called = 0
        for subscription in targets:
            if not subscription.active:
                continue
            called += 1
            try:
                subscription.callback()
            except Exception:
                _logger.exception("Invalidation listener for %s raised", resource_key)
        return called
