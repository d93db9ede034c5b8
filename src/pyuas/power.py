"""Battery voltage filtering and charge estimation.

:class:`PowerModel` holds no lock; the owning vehicle serializes access and
reads related fields together under its own lock.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from pyuas._constants import MIN_ESTIMATE_SECONDS, VOLTAGE_FILTER_ALPHA
from pyuas.exceptions import UasConfigError
from pyuas.models.battery import BatteryConfig, BatteryType

_logger = logging.getLogger(__name__)


class PowerModel:
    """Voltage filter, charge level, and remaining-time estimate for one pack.

    The charge level is a linear interpolation between the pack's empty and
    full voltage.  Real discharge curves are not linear; this is an
    approximation, good enough for operator display and low-battery alarms.
    """

    def __init__(
        self,
        battery: BatteryConfig | None = None,
        *,
        alpha: float = VOLTAGE_FILTER_ALPHA,
        min_estimate_seconds: float = MIN_ESTIMATE_SECONDS,
    ) -> None:
        if not 0.0 < alpha < 1.0:
            raise UasConfigError(f"filter alpha must be in (0, 1), got {alpha}")
        self._battery = battery or BatteryConfig()
        self._alpha = alpha
        self._min_estimate_seconds = min_estimate_seconds
        self._filtered: float | None = None
        self._current: float | None = None
        self._start_voltage: float | None = None
        self._start_time: float | None = None

    @property
    def battery(self) -> BatteryConfig:
        return self._battery

    @property
    def current_voltage(self) -> float | None:
        return self._current

    @property
    def start_voltage(self) -> float | None:
        return self._start_voltage

    def set_battery(
        self,
        battery_type: BatteryType,
        cell_count: int,
        *,
        full_voltage_per_cell: float | None = None,
        empty_voltage_per_cell: float | None = None,
    ) -> BatteryConfig:
        """Reconfigure the pack; on invalid input the prior config is kept."""
        if not isinstance(cell_count, int) or cell_count < 1:
            raise UasConfigError(f"battery cell count must be >= 1, got {cell_count!r}")
        try:
            battery = BatteryConfig.for_chemistry(
                BatteryType(battery_type),
                cell_count,
                full_voltage_per_cell=full_voltage_per_cell,
                empty_voltage_per_cell=empty_voltage_per_cell,
            )
        except (ValidationError, ValueError) as exc:
            raise UasConfigError(f"Invalid battery configuration: {exc}") from exc
        self._battery = battery
        _logger.debug(
            "Battery configured type=%s cells=%d range=%.2f-%.2fV",
            battery.type.name,
            battery.cell_count,
            battery.empty_voltage,
            battery.full_voltage,
        )
        return battery

    def filter_voltage(self, sample: float | None = None) -> float | None:
        """Add *sample* to the low-pass filter and return the filtered voltage.

        Called without a sample, returns the current filtered value.  The
        first sample seeds the filter.
        """
        if sample is None:
            return self._filtered
        if self._filtered is None:
            self._filtered = float(sample)
        else:
            self._filtered = self._filtered * (1.0 - self._alpha) + float(sample) * self._alpha
        return self._filtered

    def add_sample(self, voltage: float, now: float) -> float:
        """Record a measured pack voltage taken at *now*."""
        self._current = float(voltage)
        if self._start_voltage is None:
            self._start_voltage = self._current
            self._start_time = now
        filtered = self.filter_voltage(self._current)
        assert filtered is not None  # noqa: S101
        return filtered

    def get_charge_level(self) -> float:
        """Charge in percent, clamped to ``[0, 100]``; ``0`` before any sample."""
        if self._filtered is None:
            return 0.0
        empty = self._battery.empty_voltage
        span = self._battery.full_voltage - empty
        level = (self._filtered - empty) / span * 100.0
        return min(100.0, max(0.0, level))

    def calculate_time_remaining(self, now: float) -> int | None:
        """Seconds until the pack reaches empty, or ``None`` when unknown.

        Projects the average discharge rate since the first sample linearly
        to the empty threshold.  Unknown until ``min_estimate_seconds`` have
        elapsed and a voltage drop has actually been observed.
        """
        if self._filtered is None or self._start_voltage is None or self._start_time is None:
            return None
        elapsed = now - self._start_time
        if elapsed < self._min_estimate_seconds:
            return None
        dropped = self._start_voltage - self._filtered
        if dropped <= 0:
            return None
        discharge_per_second = dropped / elapsed
        remaining = (self._filtered - self._battery.empty_voltage) / discharge_per_second
        return max(0, int(remaining))
