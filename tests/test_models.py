"""Tests for Pydantic model parsing with UasBaseModel + UasEnum."""

from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from pyuas.models._base import UINT16_MAX, boot_ms_to_seconds
from pyuas.models.battery import BatteryConfig, BatteryType
from pyuas.models.messages import (
    BatteryStatusPayload,
    ChannelStatusPayload,
    CpuLoadPayload,
    HeartbeatPayload,
    MessageKind,
    SysStatusPayload,
    TelemetryMessage,
)
from pyuas.models.status import SystemState, VehicleMode, describe_status
from pyuas.state.events import EventKind, VehicleEvent

# ------------------------------------------------------------------
# UasEnum
# ------------------------------------------------------------------


class TestUasEnum:
    def test_unknown_value_falls_back(self) -> None:
        assert VehicleMode(99) == VehicleMode.UNKNOWN
        assert SystemState(42) == SystemState.UNKNOWN

    def test_known_value(self) -> None:
        assert VehicleMode(4) == VehicleMode.AUTO

    def test_all_enums_have_unknown(self) -> None:
        for cls in (VehicleMode, SystemState):
            assert cls.UNKNOWN == -1, f"{cls.__name__}.UNKNOWN != -1"


class TestDescribeStatus:
    def test_known(self) -> None:
        assert describe_status(6) == ("EMERGENCY", "Emergency, land immediately")

    def test_unknown(self) -> None:
        name, description = describe_status(77)
        assert name == "UNKNOWN"
        assert "77" in description


# ------------------------------------------------------------------
# UasBaseModel
# ------------------------------------------------------------------


class TestUasBaseModel:
    def test_none_and_nan_use_defaults(self) -> None:
        payload = HeartbeatPayload.model_validate({"vehicle_type": None, "mode": float("nan"), "status": 3})
        assert payload.vehicle_type == 0
        assert payload.mode is None
        assert payload.status == 3

    def test_raw_keeps_original_record(self) -> None:
        record = {"mode": 4, "extra": "ignored"}
        payload = HeartbeatPayload.model_validate(record)
        assert payload.raw == record
        assert not hasattr(payload, "extra")

    def test_sentinels_become_none(self) -> None:
        payload = SysStatusPayload.model_validate({"voltage_battery": UINT16_MAX, "battery_remaining": -1})
        assert payload.voltage_battery is None
        assert payload.battery_remaining is None

    def test_regular_values_survive_sentinel_rules(self) -> None:
        payload = SysStatusPayload.model_validate({"voltage_battery": 11800, "battery_remaining": 64})
        assert payload.voltage_battery == 11800
        assert payload.battery_remaining == 64

    def test_models_are_frozen(self) -> None:
        payload = HeartbeatPayload.model_validate({"mode": 1})
        with pytest.raises(ValidationError):
            payload.mode = 2  # type: ignore[misc]

    def test_boot_ms_to_seconds(self) -> None:
        assert boot_ms_to_seconds(None) is None
        assert boot_ms_to_seconds(1500) == 1.5


# ------------------------------------------------------------------
# Telemetry
# ------------------------------------------------------------------


class TestTelemetryMessage:
    def test_known_kind(self) -> None:
        assert TelemetryMessage(system_id=1, kind=147).known_kind == MessageKind.BATTERY_STATUS
        assert TelemetryMessage(system_id=1, kind=148).known_kind is None

    @pytest.mark.parametrize(("given", "expected"), [(-5.0, 0.0), (42.0, 42.0), (250.0, 100.0)])
    def test_drop_rate_is_clamped(self, given: float, expected: float) -> None:
        assert TelemetryMessage(system_id=1, kind=0, drop_rate=given).drop_rate == expected

    def test_negative_kind_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TelemetryMessage(system_id=1, kind=-1)


class TestPayloads:
    def test_battery_status_total_voltage(self) -> None:
        assert BatteryStatusPayload(voltages=[3700, 3700, UINT16_MAX]).total_voltage == pytest.approx(7.4)
        assert BatteryStatusPayload(voltages=[UINT16_MAX]).total_voltage is None

    def test_cpu_load_requires_load(self) -> None:
        with pytest.raises(ValidationError):
            CpuLoadPayload.model_validate({"sensor_load": 3})

    def test_channel_order_is_preserved(self) -> None:
        payload = ChannelStatusPayload.model_validate(
            {"channels": [{"name": "z", "value": 1}, {"name": "a", "value": 2}, {"name": "m", "value": 3}]}
        )
        assert [c.name for c in payload.channels] == ["z", "a", "m"]


# ------------------------------------------------------------------
# Battery
# ------------------------------------------------------------------


class TestBatteryConfig:
    def test_defaults_are_three_cell_lipo(self) -> None:
        battery = BatteryConfig()
        assert battery.type == BatteryType.LIPOLY
        assert battery.full_voltage == pytest.approx(12.6)
        assert battery.empty_voltage == pytest.approx(10.5)

    @pytest.mark.parametrize("battery_type", list(BatteryType))
    def test_every_chemistry_has_a_valid_range(self, battery_type: BatteryType) -> None:
        battery = BatteryConfig.for_chemistry(battery_type, 2)
        assert battery.full_voltage > battery.empty_voltage > 0

    def test_zero_cells_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BatteryConfig(cell_count=0)

    def test_full_must_exceed_empty(self) -> None:
        with pytest.raises(ValidationError):
            BatteryConfig(full_voltage_per_cell=3.5, empty_voltage_per_cell=3.5)


# ------------------------------------------------------------------
# Events
# ------------------------------------------------------------------


class TestVehicleEvent:
    def test_observed_at_is_tz_aware(self) -> None:
        event = VehicleEvent(vehicle_id=1, kind=EventKind.LOAD, field="load", value=12.0)
        assert event.observed_at.tzinfo is not None

    def test_naive_timestamp_gets_utc(self) -> None:
        event = VehicleEvent(
            vehicle_id=1,
            kind=EventKind.LOAD,
            field="load",
            observed_at=datetime(2024, 5, 1, 12, 0, 0),
        )
        assert event.observed_at.utcoffset() is not None
        assert event.observed_at.utcoffset().total_seconds() == 0
