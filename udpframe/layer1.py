"""First protocol layer: framing, sequence number, length and checksum."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from udpframe.checksum import calc_checksum, verify_checksum
from udpframe.types import CheckType, ErrorKind, FrameType, Priority, ProtocolError

_HEADER = struct.Struct("<BBBBBBHH")
_HEADER_SIZE = _HEADER.size
_CHECKSUM_SIZE = 2
_MIN_FRAME = _HEADER_SIZE + _CHECKSUM_SIZE


def _parse_enum(enum_cls, value: int, kind: ErrorKind):
    try:
        return enum_cls(value)
    except ValueError:
        raise ProtocolError(kind) from None


@dataclass
class Layer1Protocol:
    """A first-layer frame; ``frame_length`` and ``checksum`` are filled on decode."""

    frame_delimiter_0: int
    frame_delimiter_1: int
    version: int
    priority: Priority
    check_type: CheckType
    frame_type: FrameType
    frame_seq_number: int
    frame_length: int = 0
    payload: bytes = b""
    checksum: int = 0

    def serialize(self) -> bytes:
        """Encode the frame, computing its length field and checksum."""
        frame_length = len(self.payload) + _CHECKSUM_SIZE
        if frame_length > 0xFFFF:
            raise ProtocolError(ErrorKind.INVALID_LENGTH)
        head = _HEADER.pack(
            self.frame_delimiter_0,
            self.frame_delimiter_1,
            self.version,
            int(self.priority),
            int(self.check_type),
            int(self.frame_type),
            self.frame_seq_number & 0xFFFF,
            frame_length,
        )
        body = head + bytes(self.payload)
        return body + struct.pack("<H", calc_checksum(body))

    @classmethod
    def deserialize(cls, buf: bytes) -> Layer1Protocol:
        """Decode a frame, raising ProtocolError when it is malformed."""
        buf = bytes(buf)
        if len(buf) < _MIN_FRAME:
            raise ProtocolError(ErrorKind.INVALID_LENGTH)

        (
            delimiter_0,
            delimiter_1,
            version,
            raw_priority,
            raw_check,
            raw_frame_type,
            seq_number,
            frame_length,
        ) = _HEADER.unpack_from(buf)

        priority = _parse_enum(Priority, raw_priority, ErrorKind.UNSUPPORTED_PRIORITY)
        check_type = _parse_enum(CheckType, raw_check, ErrorKind.UNSUPPORTED_CHECK_TYPE)
        frame_type = _parse_enum(FrameType, raw_frame_type, ErrorKind.UNSUPPORTED_FRAME_TYPE)

        if len(buf) != frame_length + _HEADER_SIZE:
            raise ProtocolError(ErrorKind.INVALID_LENGTH)

        payload_end = _HEADER_SIZE + frame_length - _CHECKSUM_SIZE
        if payload_end > len(buf):
            raise ProtocolError(ErrorKind.INVALID_FRAME_LENGTH)

        (received_checksum,) = struct.unpack_from("<H", buf, payload_end)
        if not verify_checksum(buf[:payload_end], received_checksum):
            raise ProtocolError(ErrorKind.CHECKSUM_MISMATCH)

        return cls(
            frame_delimiter_0=delimiter_0,
            frame_delimiter_1=delimiter_1,
            version=version,
            priority=priority,
            check_type=check_type,
            frame_type=frame_type,
            frame_seq_number=seq_number,
            frame_length=frame_length,
            payload=buf[_HEADER_SIZE:payload_end],
            checksum=received_checksum,
        )