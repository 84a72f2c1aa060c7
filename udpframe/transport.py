"""Blocking UDP client and a threaded UDP server with callback dispatch."""

from __future__ import annotations

import errno
import queue
import socket
import sys
import threading
from typing import Callable, Optional, Tuple

PORT_RANGE_START = 58052
PORT_RANGE_END = 58080
RECV_BUFFER_SIZE = 8192
_POLL_INTERVAL = 0.1
_JOIN_TIMEOUT = 2.0

Address = Tuple[str, int]
Callback = Callable[[Address, bytes], None]


class UdpClient:
    """Client socket bound to the first free number from PORT_RANGE_START to PORT_RANGE_END."""

    def __init__(self) -> None:
        for port in range(PORT_RANGE_START, PORT_RANGE_END + 1):
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            try:
                sock.bind(("0.0.0.0", port))
            except OSError:
                sock.close()
                continue
            self.socket = sock
            return
        raise OSError(errno.EADDRNOTAVAIL, "No available ports in range")

    def send_and_receive(self, addr: Address, msg: bytes, timeout: float) -> bytes:
        """Send ``msg`` to ``addr`` and wait up to ``timeout`` seconds for a reply."""
        self.socket.sendto(bytes(msg), addr)
        self.socket.settimeout(timeout)
        data, _ = self.socket.recvfrom(RECV_BUFFER_SIZE)
        return data

    def send_only(self, addr: Address, msg: bytes) -> None:
        """Send ``msg`` to ``addr`` without waiting for a reply."""
        self.socket.sendto(bytes(msg), addr)

    def local_addr(self) -> Address:
        """Return the local address the socket is bound to."""
        host, port = self.socket.getsockname()[:2]
        return host, port

    def close(self) -> None:
        """Release the socket."""
        self.socket.close()

    def __enter__(self) -> UdpClient:
        return self

    def __exit__(self, *args) -> None:
        self.close()


class UdpServer:
    """A UDP socket that hands every datagram to a callback on a worker thread."""

    def __init__(self, sock: socket.socket) -> None:
        self.socket = sock
        self._stop = threading.Event()
        self._threads: list[threading.Thread] = []

    @classmethod
    def bind(cls, port: int) -> UdpServer:
        """Listen on ``port`` on all interfaces."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.bind(("0.0.0.0", port))
        except OSError:
            sock.close()
            raise
        return cls(sock)

    def start_async(self, callback: Callback) -> None:
        """Start receiving; ``callback(src_addr, data)`` runs for each datagram, in order."""
        inbox: queue.Queue[Optional[tuple[Address, bytes]]] = queue.Queue()
        self.socket.settimeout(_POLL_INTERVAL)
        receiver = threading.Thread(target=self._receive, args=(inbox,), daemon=True)
        handler = threading.Thread(target=self._dispatch, args=(inbox, callback), daemon=True)
        self._threads.extend((receiver, handler))
        receiver.start()
        handler.start()

    def _receive(self, inbox: queue.Queue) -> None:
        try:
            while not self._stop.is_set():
                try:
                    data, src = self.socket.recvfrom(RECV_BUFFER_SIZE)
                except TimeoutError:
                    continue
                except OSError as exc:
                    if not self._stop.is_set():
                        print(f"Error receiving data: {exc}", file=sys.stderr)
                    break
                inbox.put((src, data))
        finally:
            inbox.put(None)

    @staticmethod
    def _dispatch(inbox: queue.Queue, callback: Callback) -> None:
        while (item := inbox.get()) is not None:
            src, data = item
            callback(src, data)

    def close(self) -> None:
        """Stop the worker threads and release the socket."""
        self._stop.set()
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join(_JOIN_TIMEOUT)
        self._threads.clear()
        self.socket.close()

    def __enter__(self) -> UdpServer:
        return self

    def __exit__(self, *args) -> None:
        self.close()