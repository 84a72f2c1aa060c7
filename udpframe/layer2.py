"""Second protocol layer: request head, device addressing and group."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from udpframe.types import DeviceType, ErrorKind, ProtocolError, ReqRsp, RequestBodyType

_HEADER = struct.Struct("<BBH8s")
_HEADER_SIZE = _HEADER.size
_GROUP_SIZE = 8


@dataclass
class Layer2Protocol:
    """A second-layer message carrying a third-layer body as payload."""

    req_rsp: ReqRsp
    is_need_reply: bool
    code: bool
    flag: bool
    request_body_type: RequestBodyType
    device_type: DeviceType
    device_index: int
    group: bytes
    payload: bytes = b""

    def __post_init__(self) -> None:
        self.group = bytes(self.group)
        if len(self.group) != _GROUP_SIZE:
            raise ValueError(f"group must be {_GROUP_SIZE} bytes, got {len(self.group)}")
        self.payload = bytes(self.payload)

    def serialize(self) -> bytes:
        """Encode the message."""
        head = (
            (int(self.req_rsp) & 0x01) << 7
            | (int(self.is_need_reply) & 0x01) << 6
            | (int(self.code) & 0x01) << 5
            | (int(self.flag) & 0x01) << 4
            | (int(self.request_body_type) & 0x0F)
        )
        return (
            _HEADER.pack(head, int(self.device_type), self.device_index & 0xFFFF, self.group)
            + self.payload
        )

    @classmethod
    def deserialize(cls, buf: bytes) -> Layer2Protocol:
        """Decode a message, raising ProtocolError when it is malformed."""
        buf = bytes(buf)
        if len(buf) < _HEADER_SIZE:
            raise ProtocolError(ErrorKind.INVALID_LENGTH)

        head, raw_device, device_index, group = _HEADER.unpack_from(buf)

        try:
            body_type = RequestBodyType(head & 0x0F)
        except ValueError:
            raise ProtocolError(ErrorKind.UNSUPPORTED_REQUEST_BODY_TYPE) from None
        try:
            device_type = DeviceType(raw_device)
        except ValueError:
            raise ProtocolError(ErrorKind.UNSUPPORTED_DEVICE_TYPE) from None

        return cls(
            req_rsp=ReqRsp.RESPONSE if head & 0x80 else ReqRsp.REQUEST,
            is_need_reply=bool(head & 0x40),
            code=bool(head & 0x20),
            flag=bool(head & 0x10),
            request_body_type=body_type,
            device_type=device_type,
            device_index=device_index,
            group=group,
            payload=buf[_HEADER_SIZE:],
        )