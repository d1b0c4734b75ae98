import socket

import pytest

from pyftpserve.netutils import (
    NetworkError,
    abort_connection,
    accept_tcp_connection,
    bind_socket,
    close_connection,
    convert_address_to_string,
    convert_ip_address,
    create_tcp_server,
    create_tcp_socket,
    listen_socket,
    print_socket_error,
    receive_data,
    send_data,
)


@pytest.fixture
def server():
    sock = create_tcp_server(0)
    yield sock
    sock.close()


@pytest.fixture
def connected(server):
    port = server.getsockname()[1]
    client = socket.create_connection(("127.0.0.1", port))
    accepted, address = accept_tcp_connection(server)
    yield client, accepted, address
    client.close()
    accepted.close()


def test_create_tcp_socket_is_ipv4_stream():
    sock = create_tcp_socket()
    try:
        assert sock.family == socket.AF_INET
        assert sock.type == socket.SOCK_STREAM
    finally:
        sock.close()


def test_convert_ip_address_returns_address():
    assert convert_ip_address("127.0.0.1", 21) == ("127.0.0.1", 21)


def test_convert_ip_address_rejects_garbage():
    with pytest.raises(NetworkError, match="inet_pton failed"):
        convert_ip_address("not-an-ip", 21)


def test_convert_ip_address_rejects_large_port():
    with pytest.raises(NetworkError):
        convert_ip_address("127.0.0.1", 70000)


def test_convert_address_to_string():
    assert convert_address_to_string(("10.1.2.3", 4567)) == "10.1.2.3"


def test_convert_address_to_string_invalid():
    with pytest.raises(NetworkError, match="inet_ntop failed"):
        convert_address_to_string(("999.1.1.1", 1))


def test_bind_socket_invalid_address_raises():
    sock = create_tcp_socket()
    try:
        with pytest.raises(NetworkError):
            bind_socket(sock, "bogus", 0)
    finally:
        sock.close()


def test_listen_on_closed_socket_raises():
    sock = create_tcp_socket()
    sock.close()
    with pytest.raises(NetworkError, match="listen failed"):
        listen_socket(sock, 5)


def test_create_tcp_server_listens(server):
    host, port = server.getsockname()
    assert host == "0.0.0.0"
    assert 0 < port <= 65535


def test_accept_reports_peer(server, capsys):
    port = server.getsockname()[1]
    client = socket.create_connection(("127.0.0.1", port))
    try:
        accepted, address = accept_tcp_connection(server)
        accepted.close()
    finally:
        client.close()
    assert address[0] == "127.0.0.1"
    assert "Connection accepted from 127.0.0.1" in capsys.readouterr().out


def test_send_and_receive_roundtrip(connected):
    client, accepted, _ = connected
    payload = b"USER Anonymous\r\n"
    assert send_data(client, payload) == len(payload)
    assert receive_data(accepted, 1024) == payload


def test_receive_after_peer_close_is_empty(connected):
    client, accepted, _ = connected
    close_connection(client)
    assert receive_data(accepted, 1024) == b""
    assert client.fileno() == -1


def test_abort_connection_closes(connected):
    client, accepted, _ = connected
    abort_connection(accepted)
    assert accepted.fileno() == -1
    assert receive_data(client, 16) == b""


def test_close_connection_unconnected_raises_and_closes():
    sock = create_tcp_socket()
    with pytest.raises(NetworkError, match="shutdown failed"):
        close_connection(sock)
    assert sock.fileno() == -1


def test_receive_on_closed_socket_raises():
    sock = create_tcp_socket()
    sock.close()
    with pytest.raises(NetworkError, match="read failed"):
        receive_data(sock, 16)


def test_print_socket_error_uses_current_error(capsys):
    try:
        raise OSError(111, "Connection refused")
    except OSError:
        line = print_socket_error("bind failed")
    assert line == "bind failed: Connection refused"
    assert capsys.readouterr().out == "bind failed: Connection refused\n"