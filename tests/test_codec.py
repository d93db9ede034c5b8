from __future__ import annotations

import json

import pytest

from pyuas.codec import JsonCodec, SequenceTracker
from pyuas.exceptions import UasCodecError
from pyuas.models.commands import Action, ActionCommand, SetModeCommand
from pyuas.models.messages import MessageKind, TelemetryMessage


class TestJsonCodec:
    def test_decode_telemetry(self, codec) -> None:
        raw = json.dumps(
            {"system_id": 3, "kind": 0, "sequence": 17, "payload": {"mode": 4, "status": 4}}
        ).encode()

        message = codec.decode(raw)

        assert message.system_id == 3
        assert message.known_kind == MessageKind.HEARTBEAT
        assert message.sequence == 17
        assert message.payload == {"mode": 4, "status": 4}

    def test_decode_keeps_unknown_kind(self, codec) -> None:
        message = codec.decode(b'{"system_id": 3, "kind": 9999}')
        assert message.kind == 9999
        assert message.known_kind is None

    @pytest.mark.parametrize(
        "raw",
        [
            b"\xff\xfe",
            b"not json",
            b"[1, 2, 3]",
            b'{"kind": 0}',
            b'{"system_id": -1, "kind": 0}',
        ],
    )
    def test_decode_rejects_bad_input(self, codec, raw: bytes) -> None:
        with pytest.raises(UasCodecError):
            codec.decode(raw)

    def test_encode_command(self, codec) -> None:
        raw = codec.encode(ActionCommand(system_id=255, target_system=3, action=Action.LAUNCH))
        body = json.loads(raw)
        assert body["command"] == "action"
        assert body["action"] == 2
        assert body["target_system"] == 3

    def test_decode_command_picks_model_by_discriminant(self, codec) -> None:
        raw = codec.encode(SetModeCommand(system_id=255, target_system=3, mode=2))
        decoded = codec.decode_command(raw)
        assert isinstance(decoded, SetModeCommand)
        assert decoded.mode == 2

    def test_decode_command_rejects_unknown_command(self, codec) -> None:
        with pytest.raises(UasCodecError):
            codec.decode_command(b'{"command": "self_destruct", "system_id": 1, "target_system": 2}')

    def test_encode_telemetry_is_decodable(self, codec) -> None:
        message = TelemetryMessage(system_id=9, kind=MessageKind.SYS_STATUS, payload={"load": 120})
        raw = codec.encode_telemetry(message)
        assert b"raw" not in raw
        decoded = codec.decode(raw)
        assert decoded.payload == {"load": 120}
        assert decoded.drop_rate is None


class TestSequenceTracker:
    def test_no_loss(self) -> None:
        tracker = SequenceTracker()
        rates = [tracker.observe(1, seq) for seq in range(10)]
        assert rates == [0.0] * 10

    def test_gap_counts_lost_packets(self) -> None:
        tracker = SequenceTracker()
        tracker.observe(1, 0)
        tracker.observe(1, 1)
        # 2, 3 and 4 lost
        assert tracker.observe(1, 5) == pytest.approx(100.0 * 3 / 6)

    def test_wraparound_is_not_loss(self) -> None:
        tracker = SequenceTracker()
        tracker.observe(1, 254)
        tracker.observe(1, 255)
        assert tracker.observe(1, 0) == 0.0

    def test_senders_are_tracked_separately(self) -> None:
        tracker = SequenceTracker()
        tracker.observe(1, 0)
        tracker.observe(2, 100)
        assert tracker.observe(1, 1) == 0.0
        assert tracker.observe(2, 110) > 0.0
