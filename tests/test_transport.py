import queue
import socket

import pytest

from udpframe.transport import PORT_RANGE_END, PORT_RANGE_START, UdpClient, UdpServer


def _target(server):
    return ("127.0.0.1", server.socket.getsockname()[1])


def test_send_and_receive_echo():
    with UdpServer.bind(0) as server, UdpClient() as client:
        server.start_async(
            lambda src, data: server.socket.sendto(b"Echo: " + data, src)
        )
        response = client.send_and_receive(_target(server), b"Hello, server!", 1.0)
    assert response.startswith(b"Echo: ")
    assert response == b"Echo: Hello, server!"


def test_send_only_delivers_message():
    inbox = queue.Queue()

    with UdpServer.bind(0) as server, UdpClient() as client:
        server.start_async(lambda src, data: inbox.put((src[1], data)))
        client.send_only(_target(server), b"Fire and forget!")
        received = inbox.get(timeout=2.0)
        assert received == (client.local_addr()[1], b"Fire and forget!")


def test_callback_sees_datagrams_in_order():
    inbox = queue.Queue()
    messages = [b"one", b"two", b"three"]

    with UdpServer.bind(0) as server, UdpClient() as client:
        server.start_async(lambda src, data: inbox.put((src[1], data)))
        for message in messages:
            client.send_only(_target(server), message)
        received = [inbox.get(timeout=2.0) for _ in messages]
        own_port = client.local_addr()[1]
    assert received == [(own_port, message) for message in messages]


def test_callback_receives_client_address():
    inbox = queue.Queue()

    with UdpServer.bind(0) as server, UdpClient() as client:
        server.start_async(lambda src, data: inbox.put(src[1]))
        client.send_only(_target(server), b"x")
        assert inbox.get(timeout=2.0) == client.local_addr()[1]


def test_client_port_is_in_range():
    with UdpClient() as client:
        host, port = client.local_addr()
    assert host == "0.0.0.0"
    assert PORT_RANGE_START <= port <= PORT_RANGE_END


def test_two_clients_get_distinct_ports():
    with UdpClient() as first, UdpClient() as second:
        assert first.local_addr()[1] < second.local_addr()[1]


def test_send_and_receive_times_out_without_reply():
    with UdpServer.bind(0) as server, UdpClient() as client:
        server.start_async(lambda src, data: None)
        with pytest.raises(TimeoutError):
            client.send_and_receive(_target(server), b"silence", 0.2)


def test_client_raises_when_range_is_exhausted():
    held = []
    try:
        for port in range(PORT_RANGE_START, PORT_RANGE_END + 1):
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            try:
                sock.bind(("0.0.0.0", port))
            except OSError:
                sock.close()
                continue
            held.append(sock)
        with pytest.raises(OSError, match="No available ports in range"):
            UdpClient()
    finally:
        for sock in held:
            sock.close()


def test_bind_on_busy_port_raises():
    with UdpServer.bind(0) as server:
        port = server.socket.getsockname()[1]
        with pytest.raises(OSError):
            UdpServer.bind(port)


def test_close_releases_server_socket():
    server = UdpServer.bind(0)
    server.start_async(lambda src, data: None)
    server.close()
    assert server.socket.fileno() == -1