"""Encapsulation of a body through all three layers, and the reverse."""

from __future__ import annotations

from udpframe.layer1 import Layer1Protocol
from udpframe.layer2 import Layer2Protocol
from udpframe.layer3 import Layer3Payload, ProtocolBody, RegisterProtocol, TlvProtocol
from udpframe.types import (
    CheckType,
    DeviceType,
    FrameType,
    Priority,
    ProtocolError,
    ReqRsp,
    RequestBodyType,
)

FRAME_DELIMITER_0 = 0x55
FRAME_DELIMITER_1 = 0xBB
PROTOCOL_VERSION = 1
DEFAULT_SEQ_NUMBER = 1


def encapsulate_data(
    frame_type: FrameType,
    priority: Priority,
    check_type: CheckType,
    req_rsp: ReqRsp,
    device_type: DeviceType,
    device_index: int,
    request_body_type: RequestBodyType,
    group: bytes,
    address_or_command: int,
    error_code: int,
    payload: bytes,
) -> bytes:
    """Build a complete first-layer frame around ``payload``."""
    if request_body_type is RequestBodyType.REGISTER_PROTOCOL:
        body: ProtocolBody = RegisterProtocol.create(address_or_command, error_code, payload)
    else:
        body = TlvProtocol.create(address_or_command, error_code, payload)

    layer2 = Layer2Protocol(
        req_rsp=req_rsp,
        is_need_reply=False,
        code=False,
        flag=False,
        request_body_type=request_body_type,
        device_type=device_type,
        device_index=device_index,
        group=group,
        payload=body.serialize(),
    )
    layer1 = Layer1Protocol(
        frame_delimiter_0=FRAME_DELIMITER_0,
        frame_delimiter_1=FRAME_DELIMITER_1,
        version=PROTOCOL_VERSION,
        priority=priority,
        check_type=check_type,
        frame_type=frame_type,
        frame_seq_number=DEFAULT_SEQ_NUMBER,
        payload=layer2.serialize(),
    )
    return layer1.serialize()


def decapsulate_data(
    buf: bytes,
) -> tuple[Layer1Protocol, Layer2Protocol, ProtocolBody] | None:
    """Decode all three layers of ``buf``; return None if any layer is invalid."""
    try:
        layer1 = Layer1Protocol.deserialize(buf)
        layer2 = Layer2Protocol.deserialize(layer1.payload)
        layer3 = Layer3Payload.deserialize(layer2.payload, layer2.request_body_type)
    except ProtocolError:
        return None
    return layer1, layer2, layer3.body