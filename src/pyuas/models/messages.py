"""Decoded telemetry records.

The wire codec produces a :class:`TelemetryMessage` envelope per inbound
packet.  The proxy only looks at the envelope's discriminant (``kind``) and
validates ``payload`` against the model registered for that kind in
:data:`PAYLOAD_MODELS`.
"""

from __future__ import annotations

import enum
from typing import Any, ClassVar

from pydantic import Field, field_validator

from pyuas.models._base import UasBaseModel, is_negative, is_uint16_sentinel

# ------------------------------------------------------------------
# Message kinds
# ------------------------------------------------------------------


class MessageKind(enum.IntEnum):
    """Message ids understood by the vehicle proxy.

    Kinds outside this enum are valid on the wire; the proxy records them
    as unknown.
    """

    HEARTBEAT = 0
    SYS_STATUS = 1
    SYSTEM_TIME = 2
    ATTITUDE = 30
    WAYPOINT_CURRENT = 42
    WAYPOINT_REACHED = 46
    WAYPOINT_ACK = 47
    MANUAL_CONTROL = 69
    ACTUATOR_STATUS = 140
    BATTERY_STATUS = 147
    CPU_LOAD = 170
    MOTOR_STATUS = 171


# ------------------------------------------------------------------
# Envelope
# ------------------------------------------------------------------


class TelemetryMessage(UasBaseModel):
    """A decoded inbound message."""

    system_id: int = Field(ge=0)
    component_id: int = 0
    kind: int = Field(ge=0)
    sequence: int | None = None
    drop_rate: float | None = None
    """Sequence-gap loss on the receiving link, in percent, as computed by the codec."""
    payload: dict[str, Any] = Field(default_factory=dict)

    @field_validator("drop_rate")
    @classmethod
    def _clamp_drop_rate(cls, value: float | None) -> float | None:
        if value is None:
            return None
        return min(100.0, max(0.0, value))

    @property
    def known_kind(self) -> MessageKind | None:
        try:
            return MessageKind(self.kind)
        except ValueError:
            return None


# ------------------------------------------------------------------
# Payloads
# ------------------------------------------------------------------


class HeartbeatPayload(UasBaseModel):
    vehicle_type: int = 0
    autopilot: int = 0
    mode: int | None = None
    status: int | None = None


class SysStatusPayload(UasBaseModel):
    """System status.

    ``load`` is in per mille, ``voltage_battery`` in millivolts and
    ``packet_drop`` is the percentage of ground-to-vehicle packets the
    vehicle reports as lost.
    """

    _SENTINEL_RULES: ClassVar = {
        "voltage_battery": is_uint16_sentinel,
        "battery_remaining": is_negative,
    }

    mode: int | None = None
    nav_mode: int | None = None
    status: int | None = None
    load: int | None = Field(default=None, ge=0)
    voltage_battery: int | None = None
    battery_remaining: int | None = None
    packet_drop: float | None = None


class SystemTimePayload(UasBaseModel):
    time_unix_usec: int | None = None
    time_boot_ms: int = Field(ge=0)


class AttitudePayload(UasBaseModel):
    """Attitude in radians."""

    time_boot_ms: int | None = None
    roll: float
    pitch: float
    yaw: float


class ManualControlPayload(UasBaseModel):
    """Manual control set-points as echoed by the vehicle."""

    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0
    thrust: float = 0.0
    roll_manual: bool = False
    pitch_manual: bool = False
    yaw_manual: bool = False
    thrust_manual: bool = False


class ChannelValue(UasBaseModel):
    name: str
    value: float
    minimum: float | None = None
    maximum: float | None = None


class ChannelStatusPayload(UasBaseModel):
    """Ordered list of named actuator or motor values."""

    channels: list[ChannelValue] = Field(default_factory=list)


class BatteryStatusPayload(UasBaseModel):
    """Per-cell voltages in millivolts; ``UINT16_MAX`` marks an absent cell."""

    voltages: list[int] = Field(default_factory=list)

    @property
    def total_voltage(self) -> float | None:
        cells = [mv for mv in self.voltages if not is_uint16_sentinel(mv)]
        if not cells:
            return None
        return sum(cells) / 1000.0


class CpuLoadPayload(UasBaseModel):
    """Onboard load in percent and an optional battery voltage in millivolts."""

    _SENTINEL_RULES: ClassVar = {"battery_voltage": is_uint16_sentinel}

    ctrl_load: float = Field(ge=0)
    sensor_load: float | None = None
    battery_voltage: int | None = None


class WaypointSeqPayload(UasBaseModel):
    seq: int = Field(ge=0)


class WaypointAckPayload(UasBaseModel):
    type: int = 0


PAYLOAD_MODELS: dict[MessageKind, type[UasBaseModel]] = {
    MessageKind.HEARTBEAT: HeartbeatPayload,
    MessageKind.SYS_STATUS: SysStatusPayload,
    MessageKind.SYSTEM_TIME: SystemTimePayload,
    MessageKind.ATTITUDE: AttitudePayload,
    MessageKind.WAYPOINT_CURRENT: WaypointSeqPayload,
    MessageKind.WAYPOINT_REACHED: WaypointSeqPayload,
    MessageKind.WAYPOINT_ACK: WaypointAckPayload,
    MessageKind.MANUAL_CONTROL: ManualControlPayload,
    MessageKind.ACTUATOR_STATUS: ChannelStatusPayload,
    MessageKind.BATTERY_STATUS: BatteryStatusPayload,
    MessageKind.CPU_LOAD: CpuLoadPayload,
    MessageKind.MOTOR_STATUS: ChannelStatusPayload,
}
