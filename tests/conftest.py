from __future__ import annotations

from collections.abc import Callable

import pytest

from pyuas.codec import JsonCodec
from pyuas.config import UasConfig
from pyuas.models.messages import MessageKind, TelemetryMessage
from pyuas.vehicle import Vehicle

VEHICLE_ID = 42


class ManualClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class FakeLink:
    def __init__(self, link_id: str, *, ok: bool = True, is_open: bool = True) -> None:
        self.link_id = link_id
        self.ok = ok
        self.is_open = is_open
        self.sent: list[bytes] = []

    def send(self, raw: bytes) -> bool:
        self.sent.append(raw)
        return self.ok


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def config() -> UasConfig:
    return UasConfig(
        heartbeat_interval=1.0,
        connect_heartbeats=3,
        timeout_multiple=5.0,
        degraded_drop_rate=10.0,
        min_estimate_seconds=30.0,
    )


@pytest.fixture
def vehicle(config: UasConfig, clock: ManualClock) -> Vehicle:
    return Vehicle(VEHICLE_ID, config=config, clock=clock)


@pytest.fixture
def make_link() -> type[FakeLink]:
    return FakeLink


@pytest.fixture
def link() -> FakeLink:
    return FakeLink("link-a")


@pytest.fixture
def codec() -> JsonCodec:
    return JsonCodec()


@pytest.fixture
def make_message() -> Callable[..., TelemetryMessage]:
    def _make(kind: int, payload: dict | None = None, *, system_id: int = VEHICLE_ID, **extra) -> TelemetryMessage:
        return TelemetryMessage(system_id=system_id, kind=int(kind), payload=payload or {}, **extra)

    return _make


@pytest.fixture
def heartbeat(make_message) -> Callable[..., TelemetryMessage]:
    def _heartbeat(mode: int | None = None, status: int | None = None, **extra) -> TelemetryMessage:
        payload: dict = {"vehicle_type": 2, "autopilot": 0}
        if mode is not None:
            payload["mode"] = mode
        if status is not None:
            payload["status"] = status
        return make_message(MessageKind.HEARTBEAT, payload, **extra)

    return _heartbeat
