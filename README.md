# udpframe

A small toolkit for a three-layer binary frame protocol, a blocking UDP client
and threaded UDP server, a UDP echo server and loopback throughput testers.

## The protocol

All integers on the wire are little-endian.

- **Layer 1** (`udpframe.layer1.Layer1Protocol`): two frame delimiter bytes,
  version, priority, check type, frame type, a 16-bit sequence number and a
  16-bit frame length (payload length plus 2), then the payload and a 16-bit
  checksum over everything before it. `serialize()` fills in the length and
  checksum; `Layer1Protocol.deserialize(buf)` checks them.
- **Layer 2** (`udpframe.layer2.Layer2Protocol`): a packed request head byte
  (request/response, reply wanted, code, flag, body type), device type, 16-bit
  device index and an 8-byte group, followed by the payload.
- **Layer 3** (`udpframe.layer3`): either a `RegisterProtocol` body (register
  address, error code, data length, data) or a `TlvProtocol` body (command
  code, error code, data length, user data). `RegisterProtocol.create(...)`
  and `TlvProtocol.create(...)` set the length field from the data.
  `Layer3Payload.deserialize(buf, body_type)` decodes a body given a
  `RequestBodyType` or a body class; `deserialize_any(buf)` tries a register
  body first and then a TLV body. The two bodies share one wire layout, so
  `deserialize_any` cannot tell them apart and returns a `RegisterProtocol`
  for any buffer of at least 8 bytes.

The enumerations `Priority`, `CheckType`, `FrameType`, `ReqRsp`,
`DeviceType` and `RequestBodyType` live in `udpframe.types`.

Malformed input raises `udpframe.types.ProtocolError`, whose `kind` is an
`ErrorKind` member (for example `ErrorKind.INVALID_LENGTH` or
`ErrorKind.CHECKSUM_MISMATCH`).

### Building and parsing a full frame

```python
from udpframe.protocol import encapsulate_data, decapsulate_data
from udpframe.types import (
    CheckType, DeviceType, FrameType, Priority, ReqRsp, RequestBodyType,
)

frame = encapsulate_data(
    FrameType.TYPE1,
    Priority.MEDIUM,
    CheckType.CHECK_SUM,
    ReqRsp.REQUEST,
    DeviceType.MCU,
    10,
    RequestBodyType.REGISTER_PROTOCOL,
    bytes([0x01] * 8),
    0x12345678,
    0x0002,
    b"\x01\x02\x03\x04",
)

result = decapsulate_data(frame)
if result is not None:
    layer1, layer2, body = result
    print(hex(body.register_address), body.data)
```

`encapsulate_data` always uses delimiters `0x55 0xBB`, version 1, sequence
number 1, and clears the reply, code and flag bits. `decapsulate_data`
returns `None` when any layer fails to parse.

### Checksums

```python
from udpframe.checksum import calc_checksum, verify_checksum

value = calc_checksum(b"\x01\x02\x03")   # two's complement of the 16-bit byte sum
assert verify_checksum(b"\x01\x02\x03", value)
```

## UDP transport

`udpframe.transport.UdpClient()` binds to the first free port from 58052 to
58080 on all interfaces and raises `OSError` if none is free.
`UdpServer.bind(port)` listens on a given port. Both work as context managers
and have `close()`.

```python
from udpframe.transport import UdpClient

with UdpClient() as client:
    print(client.local_addr())
    reply = client.send_and_receive(("127.0.0.1", 12345), b"hello", 1.0)
    client.send_only(("127.0.0.1", 12345), b"no reply expected")
```

`send_and_receive` raises `TimeoutError` (an `OSError`) when no reply
arrives within the timeout.

`UdpServer.start_async(callback)` starts a receiving thread and a handling
thread; `callback(source_address, data)` is called for each datagram, in
arrival order. `close()` stops both threads and releases the socket.

## Command-line tools

Start an echo server (default port 12345, optional reply delay in
milliseconds); it runs until interrupted with Ctrl-C:

```
udp-echo-server --port 12345 --delay-ms 5
```

Run a single-socket loopback test that sends 4 KiB random datagrams, waits up
to one second for each echo and compares it with what was sent:

```
udp-loop --addr 127.0.0.1:12345 --duration 10
```

Run the same test from several threads (default 4), each with its own client
socket:

```
udp-loop-mthread --addr 127.0.0.1:12345 --duration 10 --threads 4
```

Addresses are written `ip:port`, or `[ipv6]:port`. Without `--duration` the
tests run until they stop on an error. They stop at the first error unless
`--ignore-errors` is given, and finish with a report of packets sent, error
packets, megabytes sent and average bandwidth.

The loopback tools and the echo server exchange raw random bytes; they do not
wrap data in the frame protocol.

## Running the tests

```
pip install -e ".[test]"
pytest
```