"""State layer.

Notification events, the notification bus, and the communication status
machine shared by every vehicle proxy.
"""

from pyuas.state.bus import EventCallback, NotificationBus
from pyuas.state.comm import CommStatusMachine
from pyuas.state.events import EventKind, VehicleEvent

__all__ = [
    "CommStatusMachine",
    "EventCallback",
    "EventKind",
    "NotificationBus",
    "VehicleEvent",
]
