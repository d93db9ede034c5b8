"""Communication status state machine.

Deterministic: all time is passed in by the caller, so a given sequence of
``on_message``/``evaluate`` calls always yields the same transitions.  The
machine holds no lock; the owning vehicle serializes access.
"""

from __future__ import annotations

from pyuas.models.status import CommStatus


class CommStatusMachine:
    """Track link health of one vehicle.

    Transitions::

        DISCONNECTED -> CONNECTING   first message
        CONNECTING   -> CONNECTED    ``connect_heartbeats`` consecutive heartbeats
        CONNECTED    -> DEGRADED     drop rate above threshold or heartbeat overdue
        DEGRADED     -> CONNECTED    heartbeat with drop rate back under threshold
        any          -> DISCONNECTED silence beyond the timeout, or no links left

    A heartbeat is overdue once more than one full interval has passed past
    its expected arrival, i.e. ``age > 2 * heartbeat_interval``.
    """

    def __init__(
        self,
        *,
        heartbeat_interval: float,
        connect_heartbeats: int,
        timeout_multiple: float,
        degraded_drop_rate: float,
    ) -> None:
        self._interval = heartbeat_interval
        self._connect_heartbeats = connect_heartbeats
        self._timeout = heartbeat_interval * timeout_multiple
        self._degraded_drop_rate = degraded_drop_rate
        self._status = CommStatus.DISCONNECTED
        self._consecutive_heartbeats = 0
        self._last_message_at: float | None = None
        self._last_heartbeat_at: float | None = None

    @property
    def status(self) -> CommStatus:
        return self._status

    @property
    def last_message_at(self) -> float | None:
        return self._last_message_at

    @property
    def last_heartbeat_at(self) -> float | None:
        return self._last_heartbeat_at

    @property
    def timeout(self) -> float:
        return self._timeout

    def _move(self, target: CommStatus, transitions: list[CommStatus]) -> None:
        if target == self._status:
            return
        self._status = target
        if target == CommStatus.DISCONNECTED:
            self._consecutive_heartbeats = 0
            self._last_heartbeat_at = None
        transitions.append(target)

    def _timed_out(self, now: float) -> bool:
        return self._last_message_at is not None and now - self._last_message_at > self._timeout

    def _heartbeat_overdue(self, now: float) -> bool:
        if self._last_heartbeat_at is None:
            return False
        return now - self._last_heartbeat_at > 2 * self._interval

    def evaluate(self, now: float, *, drop_rate: float = 0.0, has_links: bool = True) -> list[CommStatus]:
        """Apply time-driven transitions; returns the states entered, in order."""
        transitions: list[CommStatus] = []
        if self._status == CommStatus.DISCONNECTED:
            return transitions
        if not has_links or self._timed_out(now):
            self._move(CommStatus.DISCONNECTED, transitions)
        elif self._status == CommStatus.CONNECTED and (
            drop_rate > self._degraded_drop_rate or self._heartbeat_overdue(now)
        ):
            self._move(CommStatus.DEGRADED, transitions)
        return transitions

    def on_message(
        self,
        now: float,
        *,
        heartbeat: bool,
        drop_rate: float = 0.0,
        has_links: bool = True,
    ) -> list[CommStatus]:
        """Account for one inbound message; returns the states entered, in order.

        Without a link to answer on the vehicle is heard but not reachable, so
        it never gets past CONNECTING.
        """
        transitions: list[CommStatus] = []
        if self._status != CommStatus.DISCONNECTED and self._timed_out(now):
            self._move(CommStatus.DISCONNECTED, transitions)
        if not has_links and self._status in (CommStatus.CONNECTED, CommStatus.DEGRADED):
            self._move(CommStatus.DISCONNECTED, transitions)

        if self._status == CommStatus.DISCONNECTED:
            self._move(CommStatus.CONNECTING, transitions)
        self._last_message_at = now

        if heartbeat:
            if self._last_heartbeat_at is not None and now - self._last_heartbeat_at > self._timeout:
                self._consecutive_heartbeats = 0
            self._consecutive_heartbeats += 1
            self._last_heartbeat_at = now
            if has_links:
                if self._status == CommStatus.CONNECTING and self._consecutive_heartbeats >= self._connect_heartbeats:
                    self._move(CommStatus.CONNECTED, transitions)
                elif self._status == CommStatus.DEGRADED and drop_rate <= self._degraded_drop_rate:
                    self._move(CommStatus.CONNECTED, transitions)

        if self._status == CommStatus.CONNECTED and drop_rate > self._degraded_drop_rate:
            self._move(CommStatus.DEGRADED, transitions)

        return transitions

    def on_links_lost(self) -> list[CommStatus]:
        """The vehicle is no longer reachable through any link."""
        transitions: list[CommStatus] = []
        self._move(CommStatus.DISCONNECTED, transitions)
        return transitions
