import pytest

from udpframe.checksum import calc_checksum
from udpframe.layer1 import Layer1Protocol
from udpframe.types import CheckType, ErrorKind, FrameType, Priority, ProtocolError


def make_frame(payload=bytes([0x01, 0x02, 0x03])):
    return Layer1Protocol(
        frame_delimiter_0=0x55,
        frame_delimiter_1=0xBB,
        version=1,
        priority=Priority.MEDIUM,
        check_type=CheckType.CHECK_SUM,
        frame_type=FrameType.TYPE1,
        frame_seq_number=1,
        frame_length=0,
        payload=payload,
        checksum=0,
    )


def test_serialize_and_deserialize():
    layer1 = make_frame()
    decoded = Layer1Protocol.deserialize(layer1.serialize())
    assert decoded.frame_delimiter_0 == layer1.frame_delimiter_0
    assert decoded.frame_delimiter_1 == layer1.frame_delimiter_1
    assert decoded.version == layer1.version
    assert decoded.priority == layer1.priority
    assert decoded.check_type == layer1.check_type
    assert decoded.frame_type == layer1.frame_type
    assert decoded.frame_seq_number == layer1.frame_seq_number
    assert decoded.payload == layer1.payload


def test_wire_layout():
    payload = bytes([0x01, 0x02, 0x03])
    wire = make_frame(payload).serialize()
    assert len(wire) == 12 + len(payload)
    assert wire[:6] == bytes([0x55, 0xBB, 1, Priority.MEDIUM, CheckType.CHECK_SUM, FrameType.TYPE1])
    assert int.from_bytes(wire[6:8], "little") == 1
    assert int.from_bytes(wire[8:10], "little") == len(payload) + 2
    assert wire[10:-2] == payload
    assert int.from_bytes(wire[-2:], "little") == calc_checksum(wire[:-2])


def test_decoded_length_and_checksum_fields():
    wire = make_frame(b"abcdef").serialize()
    decoded = Layer1Protocol.deserialize(wire)
    assert decoded.frame_length == len(b"abcdef") + 2
    assert decoded.checksum == int.from_bytes(wire[-2:], "little")


def test_empty_payload_round_trip():
    decoded = Layer1Protocol.deserialize(make_frame(b"").serialize())
    assert decoded.payload == b""


def test_too_short():
    with pytest.raises(ProtocolError) as info:
        Layer1Protocol.deserialize(bytes(11))
    assert info.value.kind is ErrorKind.INVALID_LENGTH


@pytest.mark.parametrize(
    "index, kind",
    [
        (3, ErrorKind.UNSUPPORTED_PRIORITY),
        (4, ErrorKind.UNSUPPORTED_CHECK_TYPE),
        (5, ErrorKind.UNSUPPORTED_FRAME_TYPE),
    ],
)
def test_unsupported_header_fields(index, kind):
    wire = bytearray(make_frame().serialize())
    wire[index] = 0x7F
    with pytest.raises(ProtocolError) as info:
        Layer1Protocol.deserialize(bytes(wire))
    assert info.value.kind is kind


def test_length_mismatch():
    wire = make_frame().serialize() + b"\x00"
    with pytest.raises(ProtocolError) as info:
        Layer1Protocol.deserialize(wire)
    assert info.value.kind is ErrorKind.INVALID_LENGTH


def test_corrupted_payload():
    wire = bytearray(make_frame().serialize())
    wire[10] ^= 0xFF
    with pytest.raises(ProtocolError) as info:
        Layer1Protocol.deserialize(bytes(wire))
    assert info.value.kind is ErrorKind.CHECKSUM_MISMATCH