"""Message codecs.

The real wire protocol codec lives outside this package; anything with
``encode``/``decode`` methods matching :class:`Codec` can be plugged into a
vehicle.  :class:`JsonCodec` is a self-describing JSON encoding used by the
bundled MQTT link, simulators and tests.
"""

from __future__ import annotations

import json
import logging
from typing import Annotated, Protocol

from pydantic import Field, TypeAdapter, ValidationError

from pyuas.exceptions import UasCodecError
from pyuas.models.commands import (
    ActionCommand,
    CommandMessage,
    ManualControlCommand,
    SetModeCommand,
    WaypointClearAllCommand,
    WaypointCommand,
    WaypointRequestListCommand,
    WaypointSetCurrentCommand,
)
from pyuas.models.messages import TelemetryMessage

_logger = logging.getLogger(__name__)

AnyCommand = Annotated[
    ActionCommand
    | SetModeCommand
    | ManualControlCommand
    | WaypointCommand
    | WaypointRequestListCommand
    | WaypointClearAllCommand
    | WaypointSetCurrentCommand,
    Field(discriminator="command"),
]

_COMMAND_ADAPTER: TypeAdapter[CommandMessage] = TypeAdapter(AnyCommand)


class SequenceTracker:
    """Packet loss per sender, from the 8-bit envelope sequence counter.

    Returns the cumulative drop rate in percent for every observed packet.
    Not thread-safe; a link feeds it from its single receive thread.
    """

    def __init__(self, modulo: int = 256) -> None:
        self._modulo = modulo
        self._last: dict[int, int] = {}
        self._received: dict[int, int] = {}
        self._lost: dict[int, int] = {}

    def observe(self, system_id: int, sequence: int) -> float:
        last = self._last.get(system_id)
        self._last[system_id] = sequence
        received = self._received.get(system_id, 0) + 1
        self._received[system_id] = received
        lost = self._lost.get(system_id, 0)
        if last is not None:
            lost += (sequence - last - 1) % self._modulo
            self._lost[system_id] = lost
        return 100.0 * lost / (lost + received)


class Codec(Protocol):
    def encode(self, message: CommandMessage) -> bytes: ...

    def decode(self, raw: bytes) -> TelemetryMessage: ...


class JsonCodec:
    """UTF-8 JSON encoding of commands and telemetry."""

    def encode(self, message: CommandMessage) -> bytes:
        return message.model_dump_json().encode("utf-8")

    def decode(self, raw: bytes) -> TelemetryMessage:
        """Decode an inbound telemetry record."""
        try:
            parsed = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise UasCodecError(f"Telemetry is not UTF-8 JSON: {raw[:64]!r}") from exc
        if not isinstance(parsed, dict):
            raise UasCodecError("Telemetry decoded to non-object JSON")
        try:
            return TelemetryMessage.model_validate(parsed)
        except ValidationError as exc:
            raise UasCodecError(f"Invalid telemetry envelope: {exc}") from exc

    def encode_telemetry(self, message: TelemetryMessage) -> bytes:
        """Encode a telemetry record, as a vehicle or simulator would."""
        return message.model_dump_json(exclude={"raw"}, exclude_none=True).encode("utf-8")

    def decode_command(self, raw: bytes) -> CommandMessage:
        """Decode an outbound command, as a vehicle or simulator would."""
        try:
            return _COMMAND_ADAPTER.validate_json(raw)
        except ValidationError as exc:
            _logger.debug("Command decode failure", exc_info=True)
            raise UasCodecError(f"Invalid command: {exc}") from exc
