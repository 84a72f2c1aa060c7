"""Third protocol layer: register and TLV message bodies."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import ClassVar, Union

from udpframe.types import ErrorKind, ProtocolError, RequestBodyType

_HEADER = struct.Struct("<IHH")
_HEADER_SIZE = _HEADER.size


def _unpack_header(buf: bytes) -> tuple[int, int, int, bytes]:
    buf = bytes(buf)
    if len(buf) < _HEADER_SIZE:
        raise ProtocolError(ErrorKind.INVALID_LENGTH)
    code, error_code, data_length = _HEADER.unpack_from(buf)
    return code, error_code, data_length, buf[_HEADER_SIZE:]


@dataclass
class RegisterProtocol:
    """Register access body: address, error code, declared length and data."""

    TYPE_ID: ClassVar[int] = int(RequestBodyType.REGISTER_PROTOCOL)

    register_address: int
    error_code: int
    data_length: int
    data: bytes = field(default=b"")

    def __post_init__(self) -> None:
        self.data = bytes(self.data)

    @classmethod
    def create(cls, register_address: int, error_code: int, data: bytes) -> RegisterProtocol:
        """Build a body whose length field matches ``data``."""
        data = bytes(data)
        return cls(register_address, error_code, len(data) & 0xFFFF, data)

    def serialize(self) -> bytes:
        """Encode the body."""
        return (
            _HEADER.pack(
                self.register_address & 0xFFFFFFFF,
                self.error_code & 0xFFFF,
                self.data_length & 0xFFFF,
            )
            + self.data
        )

    @classmethod
    def deserialize(cls, buf: bytes) -> RegisterProtocol:
        """Decode a body, raising ProtocolError when it is too short."""
        address, error_code, data_length, data = _unpack_header(buf)
        return cls(address, error_code, data_length, data)


@dataclass
class TlvProtocol:
    """TLV command body: command code, error code, declared length and user data."""

    TYPE_ID: ClassVar[int] = int(RequestBodyType.TLV_PROTOCOL)

    command_code: int
    error_code: int
    data_length: int
    user_data: bytes = field(default=b"")

    def __post_init__(self) -> None:
        self.user_data = bytes(self.user_data)

    @classmethod
    def create(cls, command_code: int, error_code: int, user_data: bytes) -> TlvProtocol:
        """Build a body whose length field matches ``user_data``."""
        user_data = bytes(user_data)
        return cls(command_code, error_code, len(user_data) & 0xFFFF, user_data)

    def serialize(self) -> bytes:
        """Encode the body."""
        return (
            _HEADER.pack(
                self.command_code & 0xFFFFFFFF,
                self.error_code & 0xFFFF,
                self.data_length & 0xFFFF,
            )
            + self.user_data
        )

    @classmethod
    def deserialize(cls, buf: bytes) -> TlvProtocol:
        """Decode a body, raising ProtocolError when it is too short."""
        command_code, error_code, data_length, user_data = _unpack_header(buf)
        return cls(command_code, error_code, data_length, user_data)


ProtocolBody = Union[RegisterProtocol, TlvProtocol]

_BODY_CLASSES: dict[RequestBodyType, type] = {
    RequestBodyType.REGISTER_PROTOCOL: RegisterProtocol,
    RequestBodyType.TLV_PROTOCOL: TlvProtocol,
}


@dataclass
class Layer3Payload:
    """Wrapper around a third-layer body."""

    body: ProtocolBody

    def serialize(self) -> bytes:
        """Encode the wrapped body."""
        return self.body.serialize()

    @classmethod
    def deserialize(cls, buf: bytes, body_type) -> Layer3Payload:
        """Decode ``buf`` as ``body_type``: a RequestBodyType or a body class."""
        if isinstance(body_type, RequestBodyType):
            body_cls = _BODY_CLASSES[body_type]
        elif body_type in (RegisterProtocol, TlvProtocol):
            body_cls = body_type
        else:
            raise ProtocolError(ErrorKind.UNKNOWN_COMMAND_TYPE)
        return cls(body_cls.deserialize(buf))


def deserialize_any(buf: bytes) -> ProtocolBody:
    """Decode ``buf`` as a register body, falling back to a TLV body."""
    for body_cls in (RegisterProtocol, TlvProtocol):
        try:
            return body_cls.deserialize(buf)
        except ProtocolError:
            continue
    raise ProtocolError(ErrorKind.UNKNOWN_COMMAND_TYPE)