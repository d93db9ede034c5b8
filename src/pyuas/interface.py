"""Capability interface used by observers (displays, loggers, automation)."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Protocol, runtime_checkable

from pyuas.links import Link
from pyuas.models.commands import CommandMessage, DispatchResult
from pyuas.models.vehicle import VehicleSnapshot
from pyuas.state.bus import EventCallback
from pyuas.state.events import EventKind


@runtime_checkable
class UasInterface(Protocol):
    """Identity, state snapshot, command issue, and event subscription.

    :class:`pyuas.vehicle.Vehicle` satisfies this structurally; observers
    should depend on this protocol rather than on the concrete class.
    """

    @property
    def id(self) -> int: ...

    @property
    def name(self) -> str: ...

    def snapshot(self) -> VehicleSnapshot: ...

    def subscribe(self, callback: EventCallback, kinds: Iterable[EventKind] | None = None) -> Callable[[], None]: ...

    def send_message(self, message: CommandMessage, link: Link | str | None = None) -> DispatchResult: ...

    def set_mode(self, mode: int) -> DispatchResult: ...

    def launch(self) -> DispatchResult: ...

    def home(self) -> DispatchResult: ...

    def halt(self) -> DispatchResult: ...

    def go(self) -> DispatchResult: ...

    def emergency_stop(self) -> DispatchResult: ...

    def emergency_kill(self) -> DispatchResult: ...
