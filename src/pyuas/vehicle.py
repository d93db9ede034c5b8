"""Ground-side proxy for one remote vehicle.

A :class:`Vehicle` can be used like the real vehicle: calling :meth:`halt`
sends the matching command on every link the vehicle is reachable through,
and the proxy's state follows the telemetry handed to
:meth:`receive_message` by the transport layer.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from pyuas.codec import Codec, JsonCodec
from pyuas.config import UasConfig
from pyuas.control import ButtonAction, ControlArbitration, ManualControlState
from pyuas.links import Link, LinkRegistry
from pyuas.models._base import UasBaseModel, boot_ms_to_seconds
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
from pyuas.models.status import CommStatus, VehicleMode, describe_status
from pyuas.models.vehicle import Attitude, ManualControlSnapshot, VehicleSnapshot
from pyuas.power import PowerModel
from pyuas.state.bus import EventCallback, NotificationBus
from pyuas.state.comm import CommStatusMachine
from pyuas.state.events import EventKind, VehicleEvent

_logger = logging.getLogger(__name__)

_Handler = Callable[[Any, float, list[VehicleEvent]], None]


def _clamp_percent(value: float) -> float:
    return min(100.0, max(0.0, float(value)))


class Vehicle:
    """Stateful representative of one remote vehicle.

    All state lives behind one re-entrant lock.  Inbound telemetry from any
    number of link threads and operator commands are serialized by it;
    events are collected while it is held and published after release, so
    a subscriber may call back into the vehicle.
    """

    def __init__(
        self,
        vehicle_id: int,
        *,
        name: str | None = None,
        config: UasConfig | None = None,
        codec: Codec | None = None,
        battery: BatteryConfig | None = None,
        bus: NotificationBus | None = None,
        button_map: Mapping[int, ButtonAction] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._id = int(vehicle_id)
        self._config = config or UasConfig()
        self._codec: Codec = codec or JsonCodec()
        self._bus = bus or NotificationBus()
        self._clock = clock
        self._lock = threading.RLock()

        self._name = name or f"UAS{self._id}"
        self._start_time = clock()
        self._links = LinkRegistry()
        self._comm = CommStatusMachine(
            heartbeat_interval=self._config.heartbeat_interval,
            connect_heartbeats=self._config.connect_heartbeats,
            timeout_multiple=self._config.timeout_multiple,
            degraded_drop_rate=self._config.degraded_drop_rate,
        )
        self._power = PowerModel(
            battery,
            alpha=self._config.voltage_filter_alpha,
            min_estimate_seconds=self._config.min_estimate_seconds,
        )
        self._control = ControlArbitration(button_map)

        self._mode: int | None = None
        self._pending_mode: int | None = None
        self._status: int | None = None
        self._time_remaining: int | None = None
        self._actuators: dict[str, ChannelValue] = {}
        self._motors: dict[str, ChannelValue] = {}
        self._unknown_kinds: set[int] = set()
        self._receive_drop_rate = 0.0
        self._send_drop_rate = 0.0
        self._onboard_clock_offset: float | None = None
        self._load: float | None = None
        self._attitude: Attitude | None = None
        self._current_waypoint: int | None = None
        self._last_reached_waypoint: int | None = None
        self._last_waypoint_ack: int | None = None

        self._handlers: dict[MessageKind, _Handler] = {
            MessageKind.HEARTBEAT: self._on_heartbeat,
            MessageKind.SYS_STATUS: self._on_sys_status,
            MessageKind.SYSTEM_TIME: self._on_system_time,
            MessageKind.ATTITUDE: self._on_attitude,
            MessageKind.WAYPOINT_CURRENT: self._on_waypoint_current,
            MessageKind.WAYPOINT_REACHED: self._on_waypoint_reached,
            MessageKind.WAYPOINT_ACK: self._on_waypoint_ack,
            MessageKind.MANUAL_CONTROL: self._on_manual_control,
            MessageKind.ACTUATOR_STATUS: self._on_actuator_status,
            MessageKind.BATTERY_STATUS: self._on_battery_status,
            MessageKind.CPU_LOAD: self._on_cpu_load,
            MessageKind.MOTOR_STATUS: self._on_motor_status,
        }

    def __repr__(self) -> str:
        return f"Vehicle(id={self._id}, name={self._name!r}, comm_status={self._comm.status.value})"

    # ------------------------------------------------------------------
    # Management
    # ------------------------------------------------------------------

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        with self._lock:
            self._name = value

    @property
    def start_time(self) -> float:
        return self._start_time

    @property
    def uptime(self) -> float:
        """Seconds since this proxy was created."""
        return self._clock() - self._start_time

    @property
    def bus(self) -> NotificationBus:
        return self._bus

    @property
    def comm_status(self) -> CommStatus:
        with self._lock:
            return self._comm.status

    @property
    def mode(self) -> int | None:
        with self._lock:
            return self._mode

    @property
    def pending_mode(self) -> int | None:
        with self._lock:
            return self._pending_mode

    @property
    def status(self) -> int | None:
        with self._lock:
            return self._status

    def status_description(self) -> tuple[str, str]:
        """Human readable ``(name, description)`` of the last reported status."""
        status = self.status
        if status is None:
            return ("UNKNOWN", "No status received yet")
        return describe_status(status)

    @property
    def battery(self) -> BatteryConfig:
        with self._lock:
            return self._power.battery

    @property
    def current_voltage(self) -> float | None:
        with self._lock:
            return self._power.current_voltage

    @property
    def start_voltage(self) -> float | None:
        with self._lock:
            return self._power.start_voltage

    @property
    def time_remaining(self) -> int | None:
        """Estimate computed at the last voltage update."""
        with self._lock:
            return self._time_remaining

    @property
    def manual_control(self) -> ManualControlState:
        with self._lock:
            return self._control.state

    @property
    def actuators(self) -> dict[str, float]:
        with self._lock:
            return {name: channel.value for name, channel in self._actuators.items()}

    @property
    def motors(self) -> dict[str, float]:
        with self._lock:
            return {name: channel.value for name, channel in self._motors.items()}

    @property
    def unknown_message_kinds(self) -> frozenset[int]:
        with self._lock:
            return frozenset(self._unknown_kinds)

    @property
    def receive_drop_rate(self) -> float:
        with self._lock:
            return self._receive_drop_rate

    @property
    def send_drop_rate(self) -> float:
        with self._lock:
            return self._send_drop_rate

    @property
    def onboard_clock_offset(self) -> float | None:
        with self._lock:
            return self._onboard_clock_offset

    @property
    def load(self) -> float | None:
        with self._lock:
            return self._load

    @property
    def attitude(self) -> Attitude | None:
        with self._lock:
            return self._attitude

    @property
    def current_waypoint(self) -> int | None:
        with self._lock:
            return self._current_waypoint

    def snapshot(self) -> VehicleSnapshot:
        """Return a consistent copy of the whole modeled state."""
        with self._lock:
            control = self._control.state
            return VehicleSnapshot(
                id=self._id,
                name=self._name,
                uptime=self._clock() - self._start_time,
                comm_status=self._comm.status,
                mode=self._mode,
                pending_mode=self._pending_mode,
                status=self._status,
                battery=self._power.battery,
                current_voltage=self._power.current_voltage,
                start_voltage=self._power.start_voltage,
                filtered_voltage=self._power.filter_voltage(),
                charge_level=self._power.get_charge_level(),
                time_remaining=self._time_remaining,
                manual_control=ManualControlSnapshot(**control.model_dump()),
                actuators=dict(self._actuators),
                motors=dict(self._motors),
                unknown_message_kinds=frozenset(self._unknown_kinds),
                receive_drop_rate=self._receive_drop_rate,
                send_drop_rate=self._send_drop_rate,
                onboard_clock_offset=self._onboard_clock_offset,
                load=self._load,
                attitude=self._attitude,
                current_waypoint=self._current_waypoint,
                last_reached_waypoint=self._last_reached_waypoint,
                last_waypoint_ack=self._last_waypoint_ack,
                link_ids=tuple(link.link_id for link in self._links.snapshot()),
            )

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, callback: EventCallback, kinds: Iterable[EventKind] | None = None) -> Callable[[], None]:
        """Subscribe to this vehicle's events; returns an unsubscribe function."""
        return self._bus.subscribe(callback, kinds)

    def _event(
        self,
        kind: EventKind,
        field: str,
        value: Any,
        *,
        minimum: float | None = None,
        maximum: float | None = None,
    ) -> VehicleEvent:
        return VehicleEvent(
            vehicle_id=self._id,
            kind=kind,
            field=field,
            value=value,
            minimum=minimum,
            maximum=maximum,
        )

    def _comm_events(self, transitions: list[CommStatus]) -> list[VehicleEvent]:
        for status in transitions:
            _logger.debug("Vehicle %d comm status -> %s", self._id, status.value)
        return [self._event(EventKind.COMM_STATUS, "comm_status", status) for status in transitions]

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def add_link(self, link: Link) -> bool:
        """Register a link this vehicle can be reached through (idempotent)."""
        added = self._links.add(link)
        if added:
            _logger.debug("Vehicle %d reachable via link %s", self._id, link.link_id)
        return added

    def remove_link(self, link: Link | str) -> bool:
        """Forget a link; losing the last open link disconnects the vehicle."""
        events: list[VehicleEvent] = []
        with self._lock:
            removed = self._links.remove(link)
            if removed and not self._links.open_links():
                events.extend(self._comm_events(self._comm.on_links_lost()))
        self._bus.publish(events)
        return removed

    def get_links(self) -> tuple[Link, ...]:
        """Snapshot of the registered links."""
        return self._links.snapshot()

    def prune_links(self) -> list[str]:
        """Drop links the transport layer reports as closed."""
        events: list[VehicleEvent] = []
        with self._lock:
            removed = self._links.prune()
            if removed and not self._links.open_links():
                events.extend(self._comm_events(self._comm.on_links_lost()))
        self._bus.publish(events)
        return removed

    # ------------------------------------------------------------------
    # Telemetry ingestion
    # ------------------------------------------------------------------

    def receive_message(self, link: Link | None, message: TelemetryMessage) -> bool:
        """Ingest one decoded message; returns ``False`` if it belongs to another vehicle.

        Never raises on unknown or malformed input.
        """
        if message.system_id != self._id:
            _logger.debug(
                "Vehicle %d ignoring message for system %d kind=%d",
                self._id,
                message.system_id,
                message.kind,
            )
            return False

        events: list[VehicleEvent] = []
        with self._lock:
            now = self._clock()
            if link is not None:
                self.add_link(link)

            if message.drop_rate is not None and message.drop_rate != self._receive_drop_rate:
                self._receive_drop_rate = message.drop_rate
                events.append(
                    self._event(EventKind.DROP_RATE, "receive_drop_rate", message.drop_rate, minimum=0.0, maximum=100.0)
                )

            kind = message.known_kind
            if kind is None:
                if message.kind not in self._unknown_kinds:
                    self._unknown_kinds.add(message.kind)
                    _logger.debug("Vehicle %d received unknown message kind %d", self._id, message.kind)
                    events.append(self._event(EventKind.UNKNOWN_MESSAGE, "unknown_message_kinds", message.kind))
            else:
                payload = self._parse_payload(kind, message)
                if payload is not None:
                    self._handlers[kind](payload, now, events)
                if kind == MessageKind.HEARTBEAT:
                    events.append(self._event(EventKind.HEARTBEAT, "heartbeat", now))

            transitions = self._comm.on_message(
                now,
                heartbeat=kind == MessageKind.HEARTBEAT,
                drop_rate=self._receive_drop_rate,
                has_links=bool(self._links.open_links()),
            )
            events.extend(self._comm_events(transitions))

        self._bus.publish(events)
        return True

    def _parse_payload(self, kind: MessageKind, message: TelemetryMessage) -> UasBaseModel | None:
        try:
            return PAYLOAD_MODELS[kind].model_validate(message.payload)
        except ValidationError:
            _logger.debug("Vehicle %d dropping malformed %s payload", self._id, kind.name, exc_info=True)
            return None

    def update_comm_status(self, now: float | None = None) -> CommStatus:
        """Apply time-driven comm status transitions; call periodically."""
        events: list[VehicleEvent] = []
        with self._lock:
            at = self._clock() if now is None else now
            transitions = self._comm.evaluate(
                at,
                drop_rate=self._receive_drop_rate,
                has_links=bool(self._links.open_links()),
            )
            events.extend(self._comm_events(transitions))
            status = self._comm.status
        self._bus.publish(events)
        return status

    # -- per-kind update routines (called with the lock held) ----------

    def _set_mode(self, mode: int | None, events: list[VehicleEvent]) -> None:
        if mode is None:
            return
        changed = mode != self._mode
        confirmed = self._pending_mode is not None and mode == self._pending_mode
        self._mode = mode
        if confirmed:
            self._pending_mode = None
        if changed or confirmed:
            events.append(self._event(EventKind.MODE, "mode_confirmed" if confirmed else "mode", mode))

    def _set_status(self, status: int | None, events: list[VehicleEvent]) -> None:
        if status is None or status == self._status:
            return
        self._status = status
        events.append(self._event(EventKind.STATUS, "status", status))

    def _set_load(self, load: float, events: list[VehicleEvent]) -> None:
        load = _clamp_percent(load)
        if load == self._load:
            return
        self._load = load
        events.append(self._event(EventKind.LOAD, "load", load, minimum=0.0, maximum=100.0))

    def _set_voltage(self, voltage: float, now: float, events: list[VehicleEvent]) -> None:
        previous = self._power.current_voltage
        previous_level = self._power.get_charge_level() if previous is not None else None
        self._power.add_sample(voltage, now)
        self._time_remaining = self._power.calculate_time_remaining(now)
        battery = self._power.battery
        if voltage != previous:
            events.append(
                self._event(
                    EventKind.VOLTAGE,
                    "voltage",
                    voltage,
                    minimum=battery.empty_voltage,
                    maximum=battery.full_voltage,
                )
            )
        level = self._power.get_charge_level()
        if level != previous_level:
            events.append(self._event(EventKind.BATTERY, "charge_level", level, minimum=0.0, maximum=100.0))

    def _on_heartbeat(self, payload: HeartbeatPayload, now: float, events: list[VehicleEvent]) -> None:
        self._set_mode(payload.mode, events)
        self._set_status(payload.status, events)

    def _on_sys_status(self, payload: SysStatusPayload, now: float, events: list[VehicleEvent]) -> None:
        self._set_mode(payload.mode, events)
        self._set_status(payload.status, events)
        if payload.load is not None:
            self._set_load(payload.load / 10.0, events)
        if payload.voltage_battery is not None:
            self._set_voltage(payload.voltage_battery / 1000.0, now, events)
        if payload.packet_drop is not None:
            rate = _clamp_percent(payload.packet_drop)
            if rate != self._send_drop_rate:
                self._send_drop_rate = rate
                events.append(self._event(EventKind.DROP_RATE, "send_drop_rate", rate, minimum=0.0, maximum=100.0))

    def _on_battery_status(self, payload: BatteryStatusPayload, now: float, events: list[VehicleEvent]) -> None:
        voltage = payload.total_voltage
        if voltage is not None:
            self._set_voltage(voltage, now, events)

    def _on_cpu_load(self, payload: CpuLoadPayload, now: float, events: list[VehicleEvent]) -> None:
        self._set_load(payload.ctrl_load, events)
        if payload.battery_voltage is not None:
            self._set_voltage(payload.battery_voltage / 1000.0, now, events)

    def _on_system_time(self, payload: SystemTimePayload, now: float, events: list[VehicleEvent]) -> None:
        self._onboard_clock_offset = now - boot_ms_to_seconds(payload.time_boot_ms)

    def _on_attitude(self, payload: AttitudePayload, now: float, events: list[VehicleEvent]) -> None:
        timestamp = now
        if payload.time_boot_ms is not None and self._onboard_clock_offset is not None:
            timestamp = boot_ms_to_seconds(payload.time_boot_ms) + self._onboard_clock_offset
        previous = self._attitude
        self._attitude = Attitude(roll=payload.roll, pitch=payload.pitch, yaw=payload.yaw, timestamp=timestamp)
        if previous is None or (previous.roll, previous.pitch, previous.yaw) != (
            payload.roll,
            payload.pitch,
            payload.yaw,
        ):
            events.append(self._event(EventKind.ATTITUDE, "attitude", self._attitude))

    def _on_manual_control(self, payload: ManualControlPayload, now: float, events: list[VehicleEvent]) -> None:
        state = ManualControlState(**payload.model_dump(exclude={"raw"}))
        if self._control.apply_echo(state):
            events.append(self._event(EventKind.MANUAL_CONTROL, "manual_control", state))

    def _update_channels(
        self,
        channels: dict[str, ChannelValue],
        payload: ChannelStatusPayload,
        kind: EventKind,
        events: list[VehicleEvent],
    ) -> None:
        for channel in payload.channels:
            previous = channels.get(channel.name)
            if previous is not None and (previous.value, previous.minimum, previous.maximum) == (
                channel.value,
                channel.minimum,
                channel.maximum,
            ):
                continue
            channels[channel.name] = channel
            events.append(
                self._event(kind, channel.name, channel.value, minimum=channel.minimum, maximum=channel.maximum)
            )

    def _on_actuator_status(self, payload: ChannelStatusPayload, now: float, events: list[VehicleEvent]) -> None:
        self._update_channels(self._actuators, payload, EventKind.ACTUATOR, events)

    def _on_motor_status(self, payload: ChannelStatusPayload, now: float, events: list[VehicleEvent]) -> None:
        self._update_channels(self._motors, payload, EventKind.MOTOR, events)

    def _on_waypoint_current(self, payload: WaypointSeqPayload, now: float, events: list[VehicleEvent]) -> None:
        if payload.seq != self._current_waypoint:
            self._current_waypoint = payload.seq
            events.append(self._event(EventKind.WAYPOINT, "current_waypoint", payload.seq))

    def _on_waypoint_reached(self, payload: WaypointSeqPayload, now: float, events: list[VehicleEvent]) -> None:
        if payload.seq != self._last_reached_waypoint:
            self._last_reached_waypoint = payload.seq
            events.append(self._event(EventKind.WAYPOINT, "waypoint_reached", payload.seq))

    def _on_waypoint_ack(self, payload: WaypointAckPayload, now: float, events: list[VehicleEvent]) -> None:
        # Every ack closes a transaction, so it is announced even if the code repeats.
        self._last_waypoint_ack = payload.type
        events.append(self._event(EventKind.WAYPOINT, "waypoint_ack", payload.type))

    # ------------------------------------------------------------------
    # Power
    # ------------------------------------------------------------------

    def filter_voltage(self, sample: float | None = None) -> float | None:
        """Add a measured pack voltage, or read the filtered value without one.

        A sample is handled like a telemetry voltage report: it updates the
        current voltage and the time-remaining estimate and publishes
        ``VOLTAGE``/``BATTERY`` events when they change.
        """
        if sample is None:
            with self._lock:
                return self._power.filter_voltage()
        events: list[VehicleEvent] = []
        with self._lock:
            self._set_voltage(float(sample), self._clock(), events)
            filtered = self._power.filter_voltage()
        self._bus.publish(events)
        return filtered

    def get_charge_level(self) -> float:
        with self._lock:
            return self._power.get_charge_level()

    def calculate_time_remaining(self) -> int | None:
        """Seconds of operation left, or ``None`` when there is not enough data."""
        with self._lock:
            return self._power.calculate_time_remaining(self._clock())

    def set_battery(
        self,
        battery_type: BatteryType,
        cell_count: int,
        *,
        full_voltage_per_cell: float | None = None,
        empty_voltage_per_cell: float | None = None,
    ) -> BatteryConfig:
        """Reconfigure the pack; raises :class:`UasConfigError` and keeps the old one on bad input."""
        with self._lock:
            return self._power.set_battery(
                battery_type,
                cell_count,
                full_voltage_per_cell=full_voltage_per_cell,
                empty_voltage_per_cell=empty_voltage_per_cell,
            )

    # ------------------------------------------------------------------
    # Control arbitration
    # ------------------------------------------------------------------

    def is_auto(self) -> bool:
        with self._lock:
            return self._control.is_auto()

    def set_manual_control_commands(self, roll: float, pitch: float, yaw: float, thrust: float) -> DispatchResult:
        """Take manual control of all four axes and send the set-points."""
        with self._lock:
            state = self._control.set_manual_commands(roll, pitch, yaw, thrust)
            message = self._manual_control_message(state)
        self._bus.publish([self._event(EventKind.MANUAL_CONTROL, "manual_control", state)])
        return self.send_message(message)

    def release_manual_control(self) -> DispatchResult:
        """Return all four axes to autonomous control."""
        with self._lock:
            state = self._control.release()
            message = self._manual_control_message(state)
        self._bus.publish([self._event(EventKind.MANUAL_CONTROL, "manual_control", state)])
        return self.send_message(message)

    def _manual_control_message(self, state: ManualControlState) -> ManualControlCommand:
        return self._command(
            ManualControlCommand,
            roll=state.roll,
            pitch=state.pitch,
            yaw=state.yaw,
            thrust=state.thrust,
            roll_manual=state.roll_manual,
            pitch_manual=state.pitch_manual,
            yaw_manual=state.yaw_manual,
            thrust_manual=state.thrust_manual,
        )

    def receive_button(self, index: int) -> DispatchResult | None:
        """Trigger the command mapped to input button *index*."""
        action = self._control.action_for_button(index)
        if action is None:
            _logger.debug("Vehicle %d ignoring unmapped button %d", self._id, index)
            return None
        if action == ButtonAction.TOGGLE_MODE:
            with self._lock:
                current = self._pending_mode if self._pending_mode is not None else self._mode
            target = VehicleMode.MANUAL if current == VehicleMode.AUTO else VehicleMode.AUTO
            return self.set_mode(int(target))
        result: DispatchResult = getattr(self, action.value)()
        return result

    def set_mode(self, mode: int) -> DispatchResult:
        """Request a mode change.

        The local ``mode`` only changes once telemetry echoes the new value.
        """
        requested = int(mode)
        with self._lock:
            self._pending_mode = requested
            message = self._command(SetModeCommand, mode=requested)
        result = self.send_message(message)
        if not result.delivered:
            with self._lock:
                if self._pending_mode == requested:
                    self._pending_mode = None
        return result

    # ------------------------------------------------------------------
    # Command dispatch
    # ------------------------------------------------------------------

    def _command(self, cls: type[CommandMessage], **fields: Any) -> Any:
        return cls(
            system_id=self._config.gcs_system_id,
            component_id=self._config.gcs_component_id,
            target_system=self._id,
            **fields,
        )

    def send_message(self, message: CommandMessage, link: Link | str | None = None) -> DispatchResult:
        """Send *message* on *link*, or on every registered open link.

        Failures are reported in the returned :class:`DispatchResult`; one
        failing link never stops the broadcast to the others.
        """
        command = message.command
        try:
            raw = self._codec.encode(message)
        except Exception as exc:
            _logger.warning("Vehicle %d failed to encode %s", self._id, command, exc_info=True)
            return DispatchResult(command=command, failures={"*": f"encode failed: {exc}"})

        if link is not None:
            link_id = link if isinstance(link, str) else link.link_id
            registered = self._links.get(link_id)
            if registered is None:
                _logger.warning("Vehicle %d: link %s is not registered", self._id, link_id)
                return DispatchResult(command=command, failures={link_id: "link not registered"})
            if not registered.is_open:
                _logger.warning("Vehicle %d: link %s is closed", self._id, link_id)
                return DispatchResult(command=command, failures={link_id: "link closed"})
            targets: tuple[Link, ...] = (registered,)
        else:
            targets = self._links.open_links()
            if not targets:
                _logger.warning("Vehicle %d: no link to send %s", self._id, command)
                return DispatchResult(command=command, failures={"*": "no links"})

        attempted: list[str] = []
        failures: dict[str, str] = {}
        for target in targets:
            attempted.append(target.link_id)
            try:
                sent = target.send(raw)
            except Exception as exc:
                _logger.warning("Vehicle %d: send on %s raised", self._id, target.link_id, exc_info=True)
                failures[target.link_id] = f"send raised: {exc}"
                continue
            if not sent:
                _logger.warning("Vehicle %d: send on %s failed", self._id, target.link_id)
                failures[target.link_id] = "send failed"

        _logger.debug("Vehicle %d sent %s on %s", self._id, command, attempted)
        return DispatchResult(command=command, attempted=tuple(attempted), failures=failures)

    def _action(self, action: Action) -> DispatchResult:
        return self.send_message(self._command(ActionCommand, action=action))

    def launch(self) -> DispatchResult:
        return self._action(Action.LAUNCH)

    def home(self) -> DispatchResult:
        """Return home / land on the runway."""
        return self._action(Action.RETURN)

    def halt(self) -> DispatchResult:
        return self._action(Action.HALT)

    def go(self) -> DispatchResult:
        return self._action(Action.CONTINUE)

    def emergency_stop(self) -> DispatchResult:
        """Start the emergency landing procedure."""
        return self._action(Action.EMCY_LAND)

    def emergency_kill(self) -> DispatchResult:
        """Cut main power immediately.  The vehicle may crash."""
        return self._action(Action.EMCY_KILL)

    def shutdown(self) -> DispatchResult:
        """Cleanly shut down the onboard computers."""
        return self._action(Action.SHUTDOWN)

    def enable_motors(self) -> DispatchResult:
        return self._action(Action.MOTORS_START)

    def disable_motors(self) -> DispatchResult:
        return self._action(Action.MOTORS_STOP)

    def request_waypoints(self) -> DispatchResult:
        return self.send_message(self._command(WaypointRequestListCommand))

    def clear_waypoint_list(self) -> DispatchResult:
        return self.send_message(self._command(WaypointClearAllCommand))

    def set_waypoint(self, waypoint: Waypoint) -> DispatchResult:
        return self.send_message(self._command(WaypointCommand, waypoint=waypoint))

    def set_waypoint_active(self, seq: int) -> DispatchResult:
        return self.send_message(self._command(WaypointSetCurrentCommand, seq=seq))
