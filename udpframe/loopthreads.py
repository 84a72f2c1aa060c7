"""Multi-threaded loopback tester: one client socket per thread."""

from __future__ import annotations

import argparse
import sys
import threading
import time
from typing import Optional, Sequence

from udpframe.loopclient import LoopStats, format_report, parse_address, run_loop
from udpframe.transport import UdpClient

DEFAULT_THREADS = 4


def run_threads(
    target: tuple[str, int],
    threads: int,
    duration: Optional[float],
    ignore_errors: bool,
) -> tuple[LoopStats, float]:
    """Run ``threads`` sending loops concurrently; return the shared stats and elapsed seconds."""
    stats = LoopStats()
    start_time = time.monotonic()

    def worker() -> None:
        try:
            client = UdpClient()
        except OSError as exc:
            print(f"failed to create UDP socket: {exc}", file=sys.stderr)
            return
        with client:
            host, port = client.local_addr()
            print(f"Thread bound address: {host}:{port}")
            run_loop(client, target, duration, ignore_errors, stats, start_time)

    workers = [threading.Thread(target=worker) for _ in range(threads)]
    for thread in workers:
        thread.start()
    for thread in workers:
        thread.join()

    return stats, time.monotonic() - start_time


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {text}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="udp-loop", description="UDP loopback test tool (multi-port, multi-thread)"
    )
    parser.add_argument("-a", "--addr", required=True, help="target address, e.g. 127.0.0.1:12345")
    parser.add_argument(
        "-i", "--ignore-errors", action="store_true", help="keep sending after errors"
    )
    parser.add_argument(
        "-d", "--duration", type=_non_negative_int, default=None,
        help="test duration in seconds (default: unlimited)",
    )
    parser.add_argument(
        "-n", "--threads", type=_non_negative_int, default=DEFAULT_THREADS,
        help="number of concurrent threads",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the multi-threaded loopback test."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        target = parse_address(args.addr)
    except ValueError as exc:
        parser.error(str(exc))

    stats, elapsed = run_threads(target, args.threads, args.duration, args.ignore_errors)
    print(format_report(stats, elapsed, "Test complete (multi-port, multi-thread)"))
    return 0


if __name__ == "__main__":
    sys.exit(main())