from __future__ import annotations

import pytest

from pyuas.models.messages import MessageKind
from pyuas.models.status import CommStatus
from pyuas.state.comm import CommStatusMachine
from pyuas.state.events import EventKind, VehicleEvent


def _machine(**overrides) -> CommStatusMachine:
    params = {
        "heartbeat_interval": 1.0,
        "connect_heartbeats": 3,
        "timeout_multiple": 5.0,
        "degraded_drop_rate": 10.0,
    }
    params.update(overrides)
    return CommStatusMachine(**params)


def _connected() -> CommStatusMachine:
    machine = _machine()
    for t in (0.0, 1.0, 2.0):
        machine.on_message(t, heartbeat=True)
    assert machine.status == CommStatus.CONNECTED
    return machine


class TestCommStatusMachine:
    def test_starts_disconnected(self) -> None:
        assert _machine().status == CommStatus.DISCONNECTED

    def test_heartbeats_connect(self) -> None:
        machine = _machine()
        assert machine.on_message(0.0, heartbeat=True) == [CommStatus.CONNECTING]
        assert machine.on_message(1.0, heartbeat=True) == []
        assert machine.on_message(2.0, heartbeat=True) == [CommStatus.CONNECTED]

    def test_non_heartbeat_messages_do_not_connect(self) -> None:
        machine = _machine()
        for t in range(10):
            machine.on_message(float(t) * 0.5, heartbeat=False)
        assert machine.status == CommStatus.CONNECTING

    def test_evaluate_is_noop_while_disconnected(self) -> None:
        machine = _machine()
        assert machine.evaluate(100.0) == []
        assert machine.status == CommStatus.DISCONNECTED

    @pytest.mark.parametrize("heartbeats", [1, 3])
    def test_silence_disconnects_from_any_state(self, heartbeats: int) -> None:
        machine = _machine()
        for t in range(heartbeats):
            machine.on_message(float(t), heartbeat=True)
        last = float(heartbeats - 1)

        assert machine.evaluate(last + 5.0) in ([], [CommStatus.DEGRADED])
        assert machine.status != CommStatus.DISCONNECTED
        assert machine.evaluate(last + 5.1)[-1] == CommStatus.DISCONNECTED

    def test_silence_disconnects_from_degraded(self) -> None:
        machine = _connected()
        machine.on_message(3.0, heartbeat=False, drop_rate=50.0)
        assert machine.status == CommStatus.DEGRADED
        assert machine.evaluate(8.5) == [CommStatus.DISCONNECTED]

    def test_overdue_heartbeat_degrades_then_recovers(self) -> None:
        machine = _connected()
        assert machine.evaluate(3.9) == []
        assert machine.evaluate(4.5) == [CommStatus.DEGRADED]
        assert machine.on_message(4.6, heartbeat=True) == [CommStatus.CONNECTED]

    def test_drop_rate_degrades_and_recovers(self) -> None:
        machine = _connected()
        assert machine.on_message(2.5, heartbeat=False, drop_rate=20.0) == [CommStatus.DEGRADED]
        assert machine.on_message(3.0, heartbeat=True, drop_rate=20.0) == []
        assert machine.on_message(4.0, heartbeat=True, drop_rate=5.0) == [CommStatus.CONNECTED]

    def test_drop_rate_at_threshold_is_not_degraded(self) -> None:
        machine = _connected()
        machine.on_message(3.0, heartbeat=True, drop_rate=10.0)
        assert machine.status == CommStatus.CONNECTED

    def test_evaluate_degrades_on_drop_rate(self) -> None:
        machine = _connected()
        assert machine.evaluate(2.5, drop_rate=11.0) == [CommStatus.DEGRADED]

    def test_message_after_timeout_reconnects_from_scratch(self) -> None:
        machine = _connected()
        assert machine.on_message(20.0, heartbeat=True) == [CommStatus.DISCONNECTED, CommStatus.CONNECTING]
        assert machine.on_message(21.0, heartbeat=True) == []
        assert machine.on_message(22.0, heartbeat=True) == [CommStatus.CONNECTED]

    def test_heartbeat_gap_resets_count_while_connecting(self) -> None:
        machine = _machine()
        machine.on_message(0.0, heartbeat=True)
        machine.on_message(1.0, heartbeat=True)
        # Keep the vehicle alive with other traffic, but skip heartbeats.
        for t in (3.0, 5.0, 7.0):
            machine.on_message(t, heartbeat=False)
        machine.on_message(7.5, heartbeat=True)
        assert machine.status == CommStatus.CONNECTING
        machine.on_message(8.5, heartbeat=True)
        assert machine.status == CommStatus.CONNECTING
        machine.on_message(9.5, heartbeat=True)
        assert machine.status == CommStatus.CONNECTED

    def test_no_links_disconnects(self) -> None:
        machine = _connected()
        assert machine.evaluate(2.1, has_links=False) == [CommStatus.DISCONNECTED]

    def test_heartbeats_without_links_stay_connecting(self) -> None:
        machine = _machine()
        for t in range(5):
            machine.on_message(float(t), heartbeat=True, has_links=False)
        assert machine.status == CommStatus.CONNECTING
        assert machine.on_message(5.0, heartbeat=True) == [CommStatus.CONNECTED]

    def test_message_without_links_drops_connection(self) -> None:
        machine = _connected()
        assert machine.on_message(2.5, heartbeat=True, has_links=False) == [
            CommStatus.DISCONNECTED,
            CommStatus.CONNECTING,
        ]

    def test_links_lost(self) -> None:
        machine = _connected()
        assert machine.on_links_lost() == [CommStatus.DISCONNECTED]
        assert machine.on_links_lost() == []
        assert machine.last_heartbeat_at is None


# ------------------------------------------------------------------
# Through the vehicle
# ------------------------------------------------------------------


def _comm_events(events: list[VehicleEvent]) -> list[CommStatus]:
    return [e.value for e in events if e.kind == EventKind.COMM_STATUS]


def test_vehicle_connects_on_heartbeats(vehicle, link, clock, heartbeat) -> None:
    events: list[VehicleEvent] = []
    vehicle.subscribe(events.append)

    for _ in range(3):
        vehicle.receive_message(link, heartbeat())
        clock.advance(1.0)

    assert vehicle.comm_status == CommStatus.CONNECTED
    assert _comm_events(events) == [CommStatus.CONNECTING, CommStatus.CONNECTED]


def test_vehicle_disconnects_after_silence(vehicle, link, clock, heartbeat) -> None:
    for _ in range(3):
        vehicle.receive_message(link, heartbeat())
        clock.advance(1.0)

    events: list[VehicleEvent] = []
    vehicle.subscribe(events.append, kinds=[EventKind.COMM_STATUS])

    clock.advance(1.5)  # 2.5 s since the last heartbeat
    assert vehicle.update_comm_status() == CommStatus.DEGRADED
    clock.advance(3.0)
    assert vehicle.update_comm_status() == CommStatus.DISCONNECTED
    assert _comm_events(events) == [CommStatus.DEGRADED, CommStatus.DISCONNECTED]


def test_vehicle_receive_drop_rate_degrades(vehicle, link, clock, heartbeat, make_message) -> None:
    for _ in range(3):
        vehicle.receive_message(link, heartbeat())
        clock.advance(1.0)

    vehicle.receive_message(link, make_message(MessageKind.ATTITUDE, {"roll": 0, "pitch": 0, "yaw": 0}, drop_rate=25.0))
    assert vehicle.comm_status == CommStatus.DEGRADED
    assert vehicle.receive_drop_rate == 25.0

    clock.advance(0.5)
    vehicle.receive_message(link, heartbeat(drop_rate=2.0))
    assert vehicle.comm_status == CommStatus.CONNECTED


def test_vehicle_without_open_links_disconnects(vehicle, make_link, clock, heartbeat) -> None:
    link = make_link("radio")
    for _ in range(3):
        vehicle.receive_message(link, heartbeat())
        clock.advance(1.0)

    link.is_open = False
    assert vehicle.update_comm_status() == CommStatus.DISCONNECTED


def test_vehicle_heard_without_link_stays_connecting(vehicle, clock, heartbeat) -> None:
    for _ in range(3):
        vehicle.receive_message(None, heartbeat())
        clock.advance(1.0)

    assert vehicle.get_links() == ()
    assert vehicle.comm_status == CommStatus.CONNECTING
    assert vehicle.update_comm_status() == CommStatus.DISCONNECTED
