"""Link abstraction and the per-vehicle link registry.

Links are owned by the transport layer.  The registry keeps weak references
keyed by ``link_id``: a link the transport layer drops simply disappears
from the registry instead of lingering as a dead entry.  A link type
without weak reference support is held strongly until removed.
"""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Callable
from typing import Protocol, runtime_checkable

_logger = logging.getLogger(__name__)


@runtime_checkable
class Link(Protocol):
    """Structural interface of a communication channel to one or more vehicles.

    Having a protocol here makes it easy to plug in test doubles or other
    transports while :class:`pyuas.mqtt.MqttLink` stays concrete.
    """

    @property
    def link_id(self) -> str: ...

    @property
    def is_open(self) -> bool: ...

    def send(self, raw: bytes) -> bool: ...


class _StrongRef:
    """Stand-in for :class:`weakref.ref` for links that cannot be weakly referenced."""

    __slots__ = ("_link",)

    def __init__(self, link: Link) -> None:
        self._link = link

    def __call__(self) -> Link:
        return self._link


def _reference(link: Link) -> Callable[[], Link | None]:
    try:
        return weakref.ref(link)
    except TypeError:
        # __slots__ without __weakref__
        _logger.debug("Link %s does not support weak references; holding it strongly", link.link_id)
        return _StrongRef(link)


class LinkRegistry:
    """Non-owning set of links a vehicle is reachable through.

    Links that cannot be weakly referenced are held strongly until removed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._links: dict[str, Callable[[], Link | None]] = {}

    def _live(self) -> list[tuple[str, Link]]:
        # Caller holds the lock.
        alive: list[tuple[str, Link]] = []
        for link_id, ref in list(self._links.items()):
            link = ref()
            if link is None:
                del self._links[link_id]
            else:
                alive.append((link_id, link))
        return alive

    def add(self, link: Link) -> bool:
        """Register *link*; returns ``False`` if it was already registered."""
        with self._lock:
            ref = self._links.get(link.link_id)
            existing = ref() if ref is not None else None
            if existing is link:
                return False
            if existing is not None:
                _logger.debug("Replacing link registration link_id=%s", link.link_id)
            self._links[link.link_id] = _reference(link)
            return True

    def remove(self, link: Link | str) -> bool:
        link_id = link if isinstance(link, str) else link.link_id
        with self._lock:
            ref = self._links.pop(link_id, None)
            return ref is not None and ref() is not None

    def get(self, link_id: str) -> Link | None:
        with self._lock:
            ref = self._links.get(link_id)
            return ref() if ref is not None else None

    def snapshot(self) -> tuple[Link, ...]:
        """All registered links that are still alive, in registration order."""
        with self._lock:
            return tuple(link for _, link in self._live())

    def open_links(self) -> tuple[Link, ...]:
        return tuple(link for link in self.snapshot() if link.is_open)

    def prune(self) -> list[str]:
        """Drop links that report closed; returns the removed ids."""
        with self._lock:
            closed = [link_id for link_id, link in self._live() if not link.is_open]
            for link_id in closed:
                del self._links[link_id]
        if closed:
            _logger.debug("Pruned closed links %s", closed)
        return closed

    def __contains__(self, link: object) -> bool:
        link_id = getattr(link, "link_id", link)
        if not isinstance(link_id, str):
            return False
        with self._lock:
            ref = self._links.get(link_id)
            return ref is not None and ref() is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._live())
