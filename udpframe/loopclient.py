"""Loopback tester: send random packets to an echo server and verify the replies."""

from __future__ import annotations

import argparse
import ipaddress
import math
import os
import sys
import threading
import time
from dataclasses import dataclass, field
from typing import Optional, Sequence

from udpframe.transport import UdpClient

PACKET_SIZE = 4096
REPLY_TIMEOUT = 1.0


@dataclass
class LoopStats:
    """Counters shared by one or more sending loops."""

    total_sent: int = 0
    total_bytes: int = 0
    error_count: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def add_packet(self, nbytes: int) -> None:
        """Count one sent packet of ``nbytes`` bytes."""
        with self._lock:
            self.total_sent += 1
            self.total_bytes += nbytes

    def add_error(self) -> None:
        """Count one failed or mismatched exchange."""
        with self._lock:
            self.error_count += 1


def parse_address(text: str) -> tuple[str, int]:
    """Parse ``ip:port`` or ``[ipv6]:port`` into a socket address."""
    host, sep, port_text = text.rpartition(":")
    if not sep or not port_text.isdigit():
        raise ValueError("Invalid address format")
    port = int(port_text)
    if port > 0xFFFF:
        raise ValueError("Invalid address format")
    bracketed = host.startswith("[") and host.endswith("]")
    if bracketed:
        host = host[1:-1]
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        raise ValueError("Invalid address format") from None
    if (ip.version == 6) != bracketed:
        raise ValueError("Invalid address format")
    return host, port


def run_loop(
    client,
    target: tuple[str, int],
    duration: Optional[float],
    ignore_errors: bool,
    stats: LoopStats,
    start_time: float,
) -> LoopStats:
    """Exchange random packets with ``target`` until time runs out or an error stops it.

    ``start_time`` is a ``time.monotonic()`` value; ``duration`` of None means no limit.
    """
    while duration is None or time.monotonic() - start_time < duration:
        data = os.urandom(PACKET_SIZE)
        try:
            reply = client.send_and_receive(target, data, REPLY_TIMEOUT)
        except OSError as exc:
            stats.add_error()
            if not ignore_errors:
                print(f"send/receive failed: {exc}", file=sys.stderr)
                break
        else:
            if reply != data:
                stats.add_error()
                if not ignore_errors:
                    print("data verification error", file=sys.stderr)
                    break
        stats.add_packet(len(data))
    return stats


def format_report(stats: LoopStats, elapsed: float, title: str) -> str:
    """Render the final summary of a run."""
    megabytes = stats.total_bytes / 1024 / 1024
    if elapsed > 0:
        bandwidth = megabytes / elapsed
    else:
        bandwidth = math.inf if megabytes else math.nan
    return "\n".join(
        [
            f"=== {title} ===",
            f"Total packets: {stats.total_sent}",
            f"Error packets: {stats.error_count}",
            f"Total data sent: {megabytes:.2f} MB",
            f"Average bandwidth: {bandwidth:.2f} MB/s",
        ]
    )


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {text}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="udp-loop", description="UDP loopback test tool")
    parser.add_argument("-a", "--addr", required=True, help="target address, e.g. 127.0.0.1:12345")
    parser.add_argument(
        "-i", "--ignore-errors", action="store_true", help="keep sending after errors"
    )
    parser.add_argument(
        "-d", "--duration", type=_non_negative_int, default=None,
        help="test duration in seconds (default: unlimited)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the single-socket loopback test."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        target = parse_address(args.addr)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        client = UdpClient()
    except OSError as exc:
        print(exc, file=sys.stderr)
        return 1

    stats = LoopStats()
    with client:
        host, port = client.local_addr()
        print(f"Local bound address: {host}:{port}")
        start_time = time.monotonic()
        run_loop(client, target, args.duration, args.ignore_errors, stats, start_time)
        elapsed = time.monotonic() - start_time

    print(format_report(stats, elapsed, "Test complete"))
    return 0


if __name__ == "__main__":
    sys.exit(main())