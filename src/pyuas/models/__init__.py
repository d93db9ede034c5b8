"""Data models for telemetry, commands, and vehicle state."""

from pyuas.models._base import UINT16_MAX, UasBaseModel, UasEnum
from pyuas.models.battery import BatteryConfig, BatteryType
from pyuas.models.commands import (
    Action,
    ActionCommand,
    CommandMessage,
    DispatchResult,
    ManualControlCommand,
    SetModeCommand,
    Waypoint,
    WaypointClearAllCommand,
    WaypointCommand,
    WaypointFrame,
    WaypointRequestListCommand,
    WaypointSetCurrentCommand,
)
from pyuas.models.messages import (
    PAYLOAD_MODELS,
    AttitudePayload,
    BatteryStatusPayload,
    ChannelStatusPayload,
    ChannelValue,
    CpuLoadPayload,
    HeartbeatPayload,
    ManualControlPayload,
    MessageKind,
    SysStatusPayload,
    SystemTimePayload,
    TelemetryMessage,
    WaypointAckPayload,
    WaypointSeqPayload,
)
from pyuas.models.status import CommStatus, SystemState, VehicleMode, describe_status
from pyuas.models.vehicle import Attitude, ManualControlSnapshot, VehicleSnapshot

__all__ = [
    "Action",
    "ActionCommand",
    "Attitude",
    "AttitudePayload",
    "BatteryConfig",
    "BatteryStatusPayload",
    "BatteryType",
    "ChannelStatusPayload",
    "ChannelValue",
    "CommStatus",
    "CommandMessage",
    "CpuLoadPayload",
    "DispatchResult",
    "HeartbeatPayload",
    "ManualControlCommand",
    "ManualControlPayload",
    "ManualControlSnapshot",
    "MessageKind",
    "PAYLOAD_MODELS",
    "SetModeCommand",
    "SysStatusPayload",
    "SystemState",
    "SystemTimePayload",
    "TelemetryMessage",
    "UINT16_MAX",
    "UasBaseModel",
    "UasEnum",
    "VehicleMode",
    "VehicleSnapshot",
    "Waypoint",
    "WaypointAckPayload",
    "WaypointClearAllCommand",
    "WaypointCommand",
    "WaypointFrame",
    "WaypointRequestListCommand",
    "WaypointSeqPayload",
    "WaypointSetCurrentCommand",
    "describe_status",
]
