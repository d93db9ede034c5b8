"""Fire-and-forget notification bus."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from pyuas.state.events import EventKind, VehicleEvent

_logger = logging.getLogger(__name__)

EventCallback = Callable[[VehicleEvent], None]


@dataclass(frozen=True, slots=True)
class _Subscription:
    callback: EventCallback
    kinds: frozenset[EventKind] | None

    def wants(self, event: VehicleEvent) -> bool:
        return self.kinds is None or event.kind in self.kinds


class NotificationBus:
    """Deliver :class:`VehicleEvent` objects to zero or more subscribers.

    Events are neither queued nor replayed: a subscriber only sees events
    published after it subscribed.  A failing subscriber is logged and
    skipped, it never affects the publisher or other subscribers.

    ``dispatch`` decides on which thread delivery happens.  The default runs
    each callback inline; pass ``loop.call_soon_threadsafe`` or
    ``executor.submit`` to hand delivery off so a slow subscriber never
    stalls ingestion.
    """

    def __init__(self, *, dispatch: Callable[..., Any] | None = None) -> None:
        self._dispatch = dispatch
        self._lock = threading.Lock()
        self._subscriptions: tuple[_Subscription, ...] = ()

    def subscribe(
        self,
        callback: EventCallback,
        kinds: Iterable[EventKind] | None = None,
    ) -> Callable[[], None]:
        """Register *callback*; returns a function that unsubscribes it."""
        subscription = _Subscription(callback, frozenset(kinds) if kinds is not None else None)
        with self._lock:
            self._subscriptions = (*self._subscriptions, subscription)

        def _unsubscribe() -> None:
            with self._lock:
                self._subscriptions = tuple(s for s in self._subscriptions if s is not subscription)

        return _unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def publish(self, events: Iterable[VehicleEvent]) -> None:
        """Deliver *events* in order to every interested subscriber."""
        subscriptions = self._subscriptions
        if not subscriptions:
            return
        for event in events:
            for subscription in subscriptions:
                if not subscription.wants(event):
                    continue
                if self._dispatch is None:
                    self._deliver(subscription.callback, event)
                else:
                    try:
                        self._dispatch(self._deliver, subscription.callback, event)
                    except Exception:
                        _logger.debug("Event dispatch failed kind=%s", event.kind, exc_info=True)

    @staticmethod
    def _deliver(callback: EventCallback, event: VehicleEvent) -> None:
        try:
            callback(event)
        except Exception:
            _logger.debug("Subscriber callback failed kind=%s", event.kind, exc_info=True)
