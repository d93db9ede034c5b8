"""pyuas - Ground-side proxy objects for remote autonomous vehicles."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyuas")
except PackageNotFoundError:
    __version__ = "0+local"
from pyuas.codec import Codec, JsonCodec, SequenceTracker
from pyuas.config import UasConfig
from pyuas.control import ButtonAction, ManualControlState
from pyuas.exceptions import (
    UasCodecError,
    UasConfigError,
    UasDispatchError,
    UasError,
    UasLinkError,
)
from pyuas.interface import UasInterface
from pyuas.links import Link, LinkRegistry
from pyuas.manager import VehicleManager
from pyuas.models import (
    Action,
    BatteryConfig,
    BatteryType,
    CommStatus,
    DispatchResult,
    MessageKind,
    TelemetryMessage,
    VehicleMode,
    VehicleSnapshot,
    Waypoint,
)
from pyuas.mqtt import MqttLink
from pyuas.power import PowerModel
from pyuas.state import EventKind, NotificationBus, VehicleEvent
from pyuas.vehicle import Vehicle

__all__ = [
    "__version__",
    "Action",
    "BatteryConfig",
    "BatteryType",
    "ButtonAction",
    "Codec",
    "CommStatus",
    "DispatchResult",
    "EventKind",
    "JsonCodec",
    "Link",
    "LinkRegistry",
    "ManualControlState",
    "MessageKind",
    "MqttLink",
    "NotificationBus",
    "PowerModel",
    "SequenceTracker",
    "TelemetryMessage",
    "UasCodecError",
    "UasConfig",
    "UasConfigError",
    "UasDispatchError",
    "UasError",
    "UasInterface",
    "UasLinkError",
    "Vehicle",
    "VehicleEvent",
    "VehicleManager",
    "VehicleMode",
    "VehicleSnapshot",
    "Waypoint",
]
