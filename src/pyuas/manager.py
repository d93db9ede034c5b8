"""Registry of vehicle proxies for one ground station session."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from pyuas.codec import Codec
from pyuas.config import UasConfig
from pyuas.links import Link
from pyuas.models.battery import BatteryConfig
from pyuas.models.messages import TelemetryMessage
from pyuas.state.bus import NotificationBus
from pyuas.vehicle import Vehicle

_logger = logging.getLogger(__name__)

VehicleCallback = Callable[[Vehicle], None]


class VehicleManager:
    """Create, route to, and remove :class:`Vehicle` proxies.

    A proxy is created the first time a system id is seen on any link.  All
    proxies share the manager's notification bus, so one subscription sees
    events from every vehicle.

    Usage::

        manager = VehicleManager(UasConfig.from_env())
        link = MqttLink(config, on_telemetry=manager.receive_message)
        link.start()
    """

    def __init__(
        self,
        config: UasConfig | None = None,
        *,
        codec: Codec | None = None,
        bus: NotificationBus | None = None,
        battery: BatteryConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_vehicle_added: VehicleCallback | None = None,
        on_vehicle_removed: VehicleCallback | None = None,
    ) -> None:
        self._config = config or UasConfig()
        self._codec = codec
        self._bus = bus or NotificationBus()
        self._battery = battery
        self._clock = clock
        self._on_vehicle_added = on_vehicle_added
        self._on_vehicle_removed = on_vehicle_removed
        self._lock = threading.Lock()
        self._vehicles: dict[int, Vehicle] = {}
        self._selected_id: int | None = None

    @property
    def bus(self) -> NotificationBus:
        return self._bus

    def _notify(self, callback: VehicleCallback | None, vehicle: Vehicle) -> None:
        if callback is None:
            return
        try:
            callback(vehicle)
        except Exception:
            _logger.debug("Vehicle callback failed id=%d", vehicle.id, exc_info=True)

    def add_vehicle(self, vehicle_id: int, *, name: str | None = None) -> Vehicle:
        """Return the proxy for *vehicle_id*, creating it if needed."""
        with self._lock:
            vehicle = self._vehicles.get(vehicle_id)
            if vehicle is not None:
                return vehicle
            vehicle = Vehicle(
                vehicle_id,
                name=name,
                config=self._config,
                codec=self._codec,
                battery=self._battery,
                bus=self._bus,
                clock=self._clock,
            )
            self._vehicles[vehicle_id] = vehicle
            if self._selected_id is None:
                self._selected_id = vehicle_id
        _logger.debug("Vehicle %d added", vehicle_id)
        self._notify(self._on_vehicle_added, vehicle)
        return vehicle

    def remove_vehicle(self, vehicle_id: int) -> bool:
        with self._lock:
            vehicle = self._vehicles.pop(vehicle_id, None)
            if vehicle is None:
                return False
            if self._selected_id == vehicle_id:
                self._selected_id = next(iter(self._vehicles), None)
        _logger.debug("Vehicle %d removed", vehicle_id)
        self._notify(self._on_vehicle_removed, vehicle)
        return True

    def get(self, vehicle_id: int) -> Vehicle | None:
        with self._lock:
            return self._vehicles.get(vehicle_id)

    def vehicles(self) -> tuple[Vehicle, ...]:
        with self._lock:
            return tuple(self._vehicles.values())

    def __contains__(self, vehicle_id: object) -> bool:
        with self._lock:
            return vehicle_id in self._vehicles

    def __len__(self) -> int:
        with self._lock:
            return len(self._vehicles)

    @property
    def selected(self) -> Vehicle | None:
        """The vehicle currently in focus (e.g. in the main display)."""
        with self._lock:
            return self._vehicles.get(self._selected_id) if self._selected_id is not None else None

    def set_selected(self, vehicle: Vehicle | int) -> Vehicle:
        vehicle_id = vehicle if isinstance(vehicle, int) else vehicle.id
        with self._lock:
            selected = self._vehicles.get(vehicle_id)
            if selected is None:
                raise KeyError(f"Unknown vehicle {vehicle_id}")
            self._selected_id = vehicle_id
        return selected

    def receive_message(self, link: Link | None, message: TelemetryMessage) -> Vehicle:
        """Route *message* to its vehicle, creating the proxy on first sight."""
        vehicle = self.add_vehicle(message.system_id)
        vehicle.receive_message(link, message)
        return vehicle

    def update_comm_status(self, now: float | None = None) -> None:
        """Run time-driven comm status transitions on every vehicle."""
        for vehicle in self.vehicles():
            vehicle.update_comm_status(now)
