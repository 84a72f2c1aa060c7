"""UDP echo server that returns every datagram to its sender."""

from __future__ import annotations

import argparse
import socket
import sys
import time
from typing import Callable, Optional, Sequence

from udpframe.transport import UdpServer

DEFAULT_PORT = 12345


def make_echo_handler(
    sock: socket.socket, delay_ms: Optional[int] = None
) -> Callable[[tuple, bytes], None]:
    """Build a callback that sends each datagram back, after an optional delay."""

    def handle(src_addr: tuple, data: bytes) -> None:
        if delay_ms is not None:
            time.sleep(delay_ms / 1000)
        try:
            sock.sendto(data, src_addr)
        except OSError as exc:
            print(f"failed to send reply: {exc}", file=sys.stderr)

    return handle


def _port(text: str) -> int:
    value = int(text)
    if not 0 <= value <= 0xFFFF:
        raise argparse.ArgumentTypeError(f"port out of range: {text}")
    return value


def _delay(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {text}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="udp-echo-server", description="UDP echo server")
    parser.add_argument("-p", "--port", type=_port, default=DEFAULT_PORT, help="port to listen on")
    parser.add_argument(
        "--delay-ms", type=_delay, default=None,
        help="delay every reply by this many milliseconds (for RTT tests)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the echo server until interrupted."""
    args = _build_parser().parse_args(argv)
    try:
        server = UdpServer.bind(args.port)
    except OSError as exc:
        print(exc, file=sys.stderr)
        return 1

    print(f"UDP echo server listening on port {args.port}")
    server.start_async(make_echo_handler(server.socket, args.delay_ms))
    try:
        while True:
            time.sleep(10)
    except KeyboardInterrupt:
        pass
    finally:
        server.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())