"""Battery configuration model."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pyuas._constants import CELL_VOLTAGES


class BatteryType(enum.IntEnum):
    """Battery chemistry."""

    NICD = 0
    NIMH = 1
    LIION = 2
    LIPOLY = 3
    LIFE = 4
    AGZN = 5

    @property
    def cell_voltages(self) -> tuple[float, float]:
        """Nominal ``(full, empty)`` voltage of one cell."""
        return CELL_VOLTAGES[self.name.lower()]


class BatteryConfig(BaseModel):
    """Battery pack description used by the power model.

    ``full_voltage_per_cell`` must be strictly greater than
    ``empty_voltage_per_cell``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: BatteryType = BatteryType.LIPOLY
    cell_count: int = Field(default=3, ge=1)
    full_voltage_per_cell: float = Field(default=4.2, gt=0)
    empty_voltage_per_cell: float = Field(default=3.5, ge=0)

    @model_validator(mode="after")
    def _check_range(self) -> BatteryConfig:
        if self.full_voltage_per_cell <= self.empty_voltage_per_cell:
            raise ValueError(
                f"full voltage per cell ({self.full_voltage_per_cell}) must exceed "
                f"empty voltage per cell ({self.empty_voltage_per_cell})"
            )
        return self

    @classmethod
    def for_chemistry(
        cls,
        battery_type: BatteryType,
        cell_count: int,
        *,
        full_voltage_per_cell: float | None = None,
        empty_voltage_per_cell: float | None = None,
    ) -> BatteryConfig:
        """Build a config from the chemistry table, with optional overrides."""
        full, empty = BatteryType(battery_type).cell_voltages
        return cls(
            type=battery_type,
            cell_count=cell_count,
            full_voltage_per_cell=full if full_voltage_per_cell is None else full_voltage_per_cell,
            empty_voltage_per_cell=empty if empty_voltage_per_cell is None else empty_voltage_per_cell,
        )

    @property
    def full_voltage(self) -> float:
        return self.cell_count * self.full_voltage_per_cell

    @property
    def empty_voltage(self) -> float:
        return self.cell_count * self.empty_voltage_per_cell
