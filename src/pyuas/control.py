"""Manual versus autonomous control arbitration."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class ButtonAction(StrEnum):
    """Commands an input-device button can trigger."""

    TOGGLE_MODE = "toggle_mode"
    LAUNCH = "launch"
    HALT = "halt"
    GO = "go"
    HOME = "home"
    EMERGENCY_STOP = "emergency_stop"
    ENABLE_MOTORS = "enable_motors"
    DISABLE_MOTORS = "disable_motors"


DEFAULT_BUTTON_MAP: Mapping[int, ButtonAction] = {
    0: ButtonAction.TOGGLE_MODE,
    1: ButtonAction.HALT,
    2: ButtonAction.GO,
    3: ButtonAction.HOME,
    4: ButtonAction.EMERGENCY_STOP,
}


class ManualControlState(BaseModel):
    """Per-axis manual flags and set-points (angles in radians)."""

    model_config = ConfigDict(frozen=True)

    roll_manual: bool = False
    pitch_manual: bool = False
    yaw_manual: bool = False
    thrust_manual: bool = False
    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0
    thrust: float = 0.0

    @property
    def is_auto(self) -> bool:
        return not (self.roll_manual or self.pitch_manual or self.yaw_manual or self.thrust_manual)


class ControlArbitration:
    """Holds the current :class:`ManualControlState`.

    The state object is immutable and replaced as a whole, so a reader
    always sees either the old or the new four-axis set, never a mix.
    """

    def __init__(self, button_map: Mapping[int, ButtonAction] | None = None) -> None:
        self._state = ManualControlState()
        self._button_map: dict[int, ButtonAction] = dict(DEFAULT_BUTTON_MAP if button_map is None else button_map)

    @property
    def state(self) -> ManualControlState:
        return self._state

    @property
    def button_map(self) -> Mapping[int, ButtonAction]:
        return dict(self._button_map)

    def is_auto(self) -> bool:
        return self._state.is_auto

    def set_manual_commands(self, roll: float, pitch: float, yaw: float, thrust: float) -> ManualControlState:
        self._state = ManualControlState(
            roll_manual=True,
            pitch_manual=True,
            yaw_manual=True,
            thrust_manual=True,
            roll=float(roll),
            pitch=float(pitch),
            yaw=float(yaw),
            thrust=float(thrust),
        )
        return self._state

    def release(self) -> ManualControlState:
        """Hand all four axes back to autonomous control, keeping the last set-points."""
        self._state = self._state.model_copy(
            update={"roll_manual": False, "pitch_manual": False, "yaw_manual": False, "thrust_manual": False}
        )
        return self._state

    def apply_echo(self, state: ManualControlState) -> bool:
        """Adopt the state echoed by the vehicle; returns whether anything changed."""
        if state == self._state:
            return False
        self._state = state
        return True

    def action_for_button(self, index: int) -> ButtonAction | None:
        return self._button_map.get(index)
