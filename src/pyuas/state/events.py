"""Vehicle notification events.

Every externally observable change of a vehicle proxy is announced as a
:class:`VehicleEvent`.  Events are built while the vehicle's state lock is
held and published once it has been released.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EventKind(StrEnum):
    VOLTAGE = "voltage"
    BATTERY = "battery"
    ACTUATOR = "actuator"
    MOTOR = "motor"
    LOAD = "load"
    HEARTBEAT = "heartbeat"
    MODE = "mode"
    STATUS = "status"
    COMM_STATUS = "comm_status"
    ATTITUDE = "attitude"
    MANUAL_CONTROL = "manual_control"
    WAYPOINT = "waypoint"
    DROP_RATE = "drop_rate"
    UNKNOWN_MESSAGE = "unknown_message"


class VehicleEvent(BaseModel):
    """A single state change of one vehicle."""

    model_config = ConfigDict(frozen=True)

    vehicle_id: int
    kind: EventKind
    field: str = Field(..., description="Name of the changed field (or channel)")
    value: Any = None
    minimum: float | None = None
    maximum: float | None = None
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
