"""Base model and enum for decoded protocol records.

Every inbound payload model inherits from :class:`UasBaseModel` which
provides:

* A ``model_validator(mode="before")`` that strips ``None`` and NaN
  values so the field default is used.
* A ``raw`` dict that captures the original decoded record.
* Post-construction sentinel normalisation via ``_SENTINEL_RULES``
  (e.g. ``UINT16_MAX`` meaning "not measured").

State enums inherit from :class:`UasEnum` which adds an ``UNKNOWN``
member at ``-1`` and a ``_missing_`` hook that returns ``UNKNOWN``
for any value without a mapped member.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Callable
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

#: Unsigned 16-bit "not available" marker used by several telemetry fields.
UINT16_MAX = 65535


def is_uint16_sentinel(value: int | float) -> bool:
    """Return ``True`` when *value* is the ``UINT16_MAX`` sentinel."""
    return value == UINT16_MAX


def is_negative(value: int | float) -> bool:
    """Return ``True`` when *value* is negative (e.g. ``-1`` sentinel)."""
    return value < 0


def boot_ms_to_seconds(value: int | float | None) -> float | None:
    """Convert a vehicle boot-relative millisecond timestamp to seconds."""
    if value is None:
        return None
    return float(value) / 1000.0


class UasEnum(enum.IntEnum):
    """Base for protocol state enums.

    Every subclass **must** define ``UNKNOWN = -1``.
    Codes without a mapped member resolve to ``UNKNOWN`` instead of
    raising ``ValueError``.
    """

    @classmethod
    def _missing_(cls, value: object) -> UasEnum:
        if hasattr(cls, "UNKNOWN"):
            unknown: UasEnum = cls.UNKNOWN  # type: ignore[attr-defined]
            return unknown
        return next(iter(cls))


class UasBaseModel(BaseModel):
    """Base for decoded payload models."""

    _SENTINEL_RULES: ClassVar[dict[str, Callable[..., bool]]] = {}
    """Per-field sentinel predicates, ``{"field_name": predicate}``.

    After construction the field is set to ``None`` when
    *predicate(value)* is ``True``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original decoded record."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip empty values and stash the raw record."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = UasBaseModel._clean_dict(original)
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned

    @model_validator(mode="after")
    def _normalise_sentinels(self) -> UasBaseModel:
        sentinel_rules: dict[str, Callable[..., bool]] = getattr(type(self), "_SENTINEL_RULES", {})
        for field_name, predicate in sentinel_rules.items():
            val = getattr(self, field_name, None)
            if val is not None and predicate(val):
                object.__setattr__(self, field_name, None)
        return self
