"""Vehicle mode, system state, and link health enums."""

from __future__ import annotations

from enum import StrEnum

from pyuas.models._base import UasEnum


class CommStatus(StrEnum):
    """Health of the communication with one vehicle."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DEGRADED = "degraded"


class VehicleMode(UasEnum):
    """Operating mode codes reported in heartbeat/system status."""

    UNKNOWN = -1
    UNINIT = 0
    LOCKED = 1
    MANUAL = 2
    GUIDED = 3
    AUTO = 4
    TEST1 = 5
    TEST2 = 6
    TEST3 = 7
    READY = 8
    RC_TRAINING = 9


class SystemState(UasEnum):
    """System status codes reported in heartbeat/system status."""

    UNKNOWN = -1
    UNINIT = 0
    BOOT = 1
    CALIBRATING = 2
    STANDBY = 3
    ACTIVE = 4
    CRITICAL = 5
    EMERGENCY = 6
    POWEROFF = 7


_STATUS_DESCRIPTIONS: dict[SystemState, tuple[str, str]] = {
    SystemState.UNINIT: ("UNINIT", "Not initialized"),
    SystemState.BOOT: ("BOOT", "Booting system, please wait"),
    SystemState.CALIBRATING: ("CALIBRATING", "Calibrating sensors"),
    SystemState.STANDBY: ("STANDBY", "Standby, ready to launch"),
    SystemState.ACTIVE: ("ACTIVE", "Active, normal operation"),
    SystemState.CRITICAL: ("CRITICAL", "Failure occurred, system still operational"),
    SystemState.EMERGENCY: ("EMERGENCY", "Emergency, land immediately"),
    SystemState.POWEROFF: ("SHUTDOWN", "Powering off system"),
}


def describe_status(code: int) -> tuple[str, str]:
    """Return ``(short_name, description)`` for a system status code."""
    state = SystemState(code)
    return _STATUS_DESCRIPTIONS.get(state, ("UNKNOWN", f"Unknown system state {code}"))
