"""Point-in-time views of a vehicle proxy."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pyuas.models.battery import BatteryConfig
from pyuas.models.messages import ChannelValue
from pyuas.models.status import CommStatus


class Attitude(BaseModel):
    """Attitude in radians; ``timestamp`` is in ground (proxy clock) seconds."""

    model_config = ConfigDict(frozen=True)

    roll: float
    pitch: float
    yaw: float
    timestamp: float


class ManualControlSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    roll_manual: bool
    pitch_manual: bool
    yaw_manual: bool
    thrust_manual: bool
    roll: float
    pitch: float
    yaw: float
    thrust: float


class VehicleSnapshot(BaseModel):
    """Consistent copy of every modeled field, taken under the vehicle lock."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    uptime: float
    comm_status: CommStatus
    mode: int | None = None
    pending_mode: int | None = None
    status: int | None = None
    battery: BatteryConfig
    current_voltage: float | None = None
    start_voltage: float | None = None
    filtered_voltage: float | None = None
    charge_level: float = 0.0
    time_remaining: int | None = None
    manual_control: ManualControlSnapshot
    actuators: dict[str, ChannelValue] = Field(default_factory=dict)
    motors: dict[str, ChannelValue] = Field(default_factory=dict)
    unknown_message_kinds: frozenset[int] = frozenset()
    receive_drop_rate: float = 0.0
    send_drop_rate: float = 0.0
    onboard_clock_offset: float | None = None
    load: float | None = None
    attitude: Attitude | None = None
    current_waypoint: int | None = None
    last_reached_waypoint: int | None = None
    last_waypoint_ack: int | None = None
    link_ids: tuple[str, ...] = ()
