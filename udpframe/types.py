"""Shared protocol enumerations and the protocol error type."""

from __future__ import annotations

import enum


class ErrorKind(enum.Enum):
    """The kinds of failure a protocol operation can report."""

    INVALID_CHECKSUM = "Invalid checksum"
    INVALID_HEADER = "Invalid header"
    INVALID_LENGTH = "Invalid length"
    UNKNOWN_COMMAND_TYPE = "Unknown command type"
    INVALID_PAYLOAD = "Invalid payload"
    CHECKSUM_MISMATCH = "Checksum mismatch"
    UNSUPPORTED_PRIORITY = "Unsupported priority"
    UNSUPPORTED_CHECK_TYPE = "Unsupported check type"
    UNSUPPORTED_FRAME_TYPE = "Unsupported frame type"
    INVALID_FRAME_LENGTH = "Invalid frame length"
    UNSUPPORTED_REQUEST_BODY_TYPE = "Unsupported request body type"
    UNSUPPORTED_DEVICE_TYPE = "Unsupported device type"
    OTHER = "Other error"


class ProtocolError(Exception):
    """Raised when a frame cannot be encoded or decoded."""

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        self.kind = kind
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.kind is ErrorKind.OTHER:
            return f"Other error: {self.message or ''}"
        return self.kind.value


class DeviceType(enum.IntEnum):
    """Target device of a request."""

    FPGA = 0x00
    MCU = 0x01
    NETWORK_PORT = 0x02
    OPTICAL_PORT = 0x03


class ReqRsp(enum.IntEnum):
    """Whether a message is a request or a response."""

    REQUEST = 0
    RESPONSE = 1


class RequestBodyType(enum.IntEnum):
    """Which third-layer body a message carries."""

    REGISTER_PROTOCOL = 0
    TLV_PROTOCOL = 1


class CheckType(enum.IntEnum):
    """Integrity check used by the first layer."""

    CHECK_SUM = 0x00


class Priority(enum.IntEnum):
    """Frame priority."""

    LOW = 0
    MEDIUM = 1
    HIGH = 2


class FrameType(enum.IntEnum):
    """Frame type."""

    TYPE0 = 0
    TYPE1 = 1