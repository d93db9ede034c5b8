"""Outbound command messages and dispatch results."""

from __future__ import annotations

import enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from pyuas.exceptions import UasDispatchError

# ------------------------------------------------------------------
# Enums
# ------------------------------------------------------------------


class Action(enum.IntEnum):
    """Action codes carried by :class:`ActionCommand`."""

    HOLD = 0
    MOTORS_START = 1
    LAUNCH = 2
    RETURN = 3
    EMCY_LAND = 4
    EMCY_KILL = 5
    CONFIRM_KILL = 6
    CONTINUE = 7
    MOTORS_STOP = 8
    HALT = 9
    SHUTDOWN = 10
    REBOOT = 11


class WaypointFrame(enum.IntEnum):
    GLOBAL = 0
    LOCAL = 1


# ------------------------------------------------------------------
# Messages
# ------------------------------------------------------------------


class CommandMessage(BaseModel):
    """Common header of every outbound message.

    ``command`` is the discriminant the codec uses to pick a wire layout.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    command: str
    system_id: int
    component_id: int = 0
    target_system: int
    target_component: int = 0


class ActionCommand(CommandMessage):
    command: Literal["action"] = "action"
    action: Action


class SetModeCommand(CommandMessage):
    command: Literal["set_mode"] = "set_mode"
    mode: int


class ManualControlCommand(CommandMessage):
    command: Literal["manual_control"] = "manual_control"
    roll: float
    pitch: float
    yaw: float
    thrust: float
    roll_manual: bool = True
    pitch_manual: bool = True
    yaw_manual: bool = True
    thrust_manual: bool = True


class Waypoint(BaseModel):
    """A single mission item."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    seq: int = Field(ge=0)
    x: float
    y: float
    z: float
    yaw: float = 0.0
    frame: WaypointFrame = WaypointFrame.GLOBAL
    action: int = 0
    orbit: float = 0.0
    hold_time: float = 0.0
    autocontinue: bool = True
    current: bool = False


class WaypointCommand(CommandMessage):
    command: Literal["waypoint"] = "waypoint"
    waypoint: Waypoint


class WaypointRequestListCommand(CommandMessage):
    command: Literal["waypoint_request_list"] = "waypoint_request_list"


class WaypointClearAllCommand(CommandMessage):
    command: Literal["waypoint_clear_all"] = "waypoint_clear_all"


class WaypointSetCurrentCommand(CommandMessage):
    command: Literal["waypoint_set_current"] = "waypoint_set_current"
    seq: int = Field(ge=0)


# ------------------------------------------------------------------
# Dispatch result
# ------------------------------------------------------------------


class DispatchResult(BaseModel):
    """Outcome of sending one message to one or more links.

    ``attempted`` lists every link a send was tried on, ``failures`` maps
    link ids to the reason the send failed.  A broadcast with no links has
    no attempts and a single ``"*"`` failure entry.
    """

    model_config = ConfigDict(frozen=True)

    command: str
    attempted: tuple[str, ...] = ()
    failures: dict[str, str] = Field(default_factory=dict)

    @property
    def delivered(self) -> tuple[str, ...]:
        return tuple(link_id for link_id in self.attempted if link_id not in self.failures)

    @property
    def ok(self) -> bool:
        return bool(self.attempted) and not self.failures

    def raise_for_failure(self) -> None:
        """Raise :class:`UasDispatchError` unless every attempt succeeded."""
        if self.ok:
            return
        link_id = next(iter(self.failures), None)
        detail = ", ".join(f"{k}: {v}" for k, v in self.failures.items()) or "nothing was sent"
        raise UasDispatchError(
            f"Dispatch of {self.command!r} failed ({detail})",
            link_id=link_id,
            failures=self.failures,
        )

    def __bool__(self) -> bool:
        return self.ok
