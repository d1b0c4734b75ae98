"""Small helpers around TCP sockets used by the server."""

from __future__ import annotations

import socket
import sys


class NetworkError(OSError):
    """A socket operation failed."""


def print_socket_error(message: str) -> str:
    """Print ``message`` with the reason of the error being handled; return the line."""
    error = sys.exc_info()[1]
    if isinstance(error, OSError) and error.strerror:
        detail = error.strerror
    elif error is not None:
        detail = str(error)
    else:
        detail = "Success"
    line = f"{message}: {detail}"
    print(line, file=sys.stdout)
    return line


def _fail(message: str) -> NetworkError:
    error = sys.exc_info()[1]
    line = print_socket_error(message)
    errno = error.errno if isinstance(error, OSError) else None
    return NetworkError(errno, line)


def create_tcp_socket() -> socket.socket:
    """Create an IPv4 TCP socket."""
    try:
        return socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError:
        raise _fail("socket failed") from None


def convert_ip_address(ip_address: str, port: int) -> tuple[str, int]:
    """Validate a dotted IPv4 address and port; return a socket address."""
    try:
        socket.inet_pton(socket.AF_INET, ip_address)
    except (OSError, TypeError):
        raise _fail("inet_pton failed") from None
    if not 0 <= port <= 0xFFFF:
        raise NetworkError(None, f"invalid port: {port}")
    return ip_address, port


def convert_address_to_string(address: tuple) -> str:
    """Return the dotted IPv4 form of a socket address."""
    try:
        packed = socket.inet_pton(socket.AF_INET, address[0])
        return socket.inet_ntop(socket.AF_INET, packed)
    except (OSError, TypeError, IndexError):
        raise _fail("inet_ntop failed") from None


def bind_socket(sock: socket.socket, ip_address: str, port: int) -> None:
    """Bind ``sock`` to the given address."""
    address = convert_ip_address(ip_address, port)
    try:
        sock.bind(address)
    except OSError:
        raise _fail("bind failed") from None


def listen_socket(sock: socket.socket, backlog: int) -> None:
    """Start listening on ``sock``."""
    try:
        sock.listen(backlog)
    except OSError:
        raise _fail("listen failed") from None


def create_tcp_server(port: int) -> socket.socket:
    """Create a listening TCP socket on every interface."""
    sock = create_tcp_socket()
    try:
        bind_socket(sock, "0.0.0.0", port)
        listen_socket(sock, 5)
    except NetworkError:
        sock.close()
        raise
    return sock


def accept_tcp_connection(server_sock: socket.socket) -> tuple[socket.socket, tuple]:
    """Accept a client and report where it came from."""
    try:
        client, address = server_sock.accept()
    except OSError:
        raise _fail("accept failed") from None
    try:
        print(f"Connection accepted from {convert_address_to_string(address)}")
    except NetworkError:
        pass
    return client, address


def close_connection(sock: socket.socket) -> None:
    """Shut down both directions of ``sock`` and close it."""
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        sock.close()
        raise _fail("close_connection: shutdown failed") from None
    try:
        sock.close()
    except OSError:
        raise _fail("close_connection: close failed") from None


def abort_connection(sock: socket.socket) -> None:
    """Close ``sock`` without shutting it down first."""
    try:
        sock.close()
    except OSError:
        raise _fail("abort_connection: close failed") from None


def send_data(sock: socket.socket, data: bytes) -> int:
    """Send what the socket accepts of ``data``; return the byte count."""
    try:
        return sock.send(data)
    except OSError:
        raise _fail("write failed") from None


def receive_data(sock: socket.socket, length: int) -> bytes:
    """Read up to ``length`` bytes; an empty result means the peer closed."""
    try:
        return sock.recv(length)
    except OSError:
        raise _fail("read failed") from None