"""Commands that set up the data connection: PASV and PORT."""

from __future__ import annotations

import re
import socket

from .session import ServerContext, Session, State, TransferMode

REPLY_NOT_LOGGED_IN = "530 Not logged in.\r\n"
REPLY_SYNTAX_ARGS = "501 Syntax error in parameters or arguments.\r\n"
REPLY_UNAVAILABLE = "421 Service not available.\r\n"
REPLY_PORT_UNKNOWN = "501 Service not available.\r\n"
REPLY_PORT_OK = "200 Command okay.\r\n"


def _scan_ints(text: str, separator: str, count: int) -> list[int]:
    """Read ``count`` integers joined by ``separator`` from the start of ``text``."""
    pattern = re.escape(separator).join([r"\s*([+-]?\d+)"] * count)
    match = re.match(pattern, text, re.ASCII)
    if match is None:
        raise ValueError(f"expected {count} numbers separated by {separator!r}: {text!r}")
    return [int(group) for group in match.groups()]


def parse_port_argument(arg: str) -> tuple[str, int]:
    """Turn ``h1,h2,h3,h4,p1,p2`` into an IPv4 address and a port number."""
    numbers = _scan_ints(arg, ",", 6)
    if any(not 0 <= value <= 255 for value in numbers):
        raise ValueError(f"value out of range in {arg!r}")
    h1, h2, h3, h4, p1, p2 = numbers
    return f"{h1}.{h2}.{h3}.{h4}", p1 * 256 + p2


def format_pasv_reply(ip: str, port: int) -> str:
    """Build the 227 reply announcing ``ip`` and ``port``."""
    h1, h2, h3, h4 = _scan_ints(ip, ".", 4)
    p1, p2 = divmod(port, 256)
    return f"227 Entering Passive Mode ({h1},{h2},{h3},{h4},{p1},{p2}).\r\n"


def _check_logged_in(session: Session) -> bool:
    if session.state is not State.AUTH:
        session.reply(REPLY_NOT_LOGGED_IN)
        return False
    return True


def _open_passive_socket() -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.bind(("0.0.0.0", 0))
        sock.listen(1)
    except OSError:
        sock.close()
        raise
    return sock


def handle_pasv(ctx: ServerContext, arg: str | None, session: Session) -> None:
    """PASV: listen on a fresh port and tell the client where to connect."""
    if not _check_logged_in(session):
        return
    if arg:
        session.reply(REPLY_SYNTAX_ARGS)
        return
    session.close_data_socket()
    try:
        listener = _open_passive_socket()
    except OSError:
        session.reply(REPLY_UNAVAILABLE)
        return
    try:
        port = listener.getsockname()[1]
    except OSError:
        listener.close()
        session.reply(REPLY_PORT_UNKNOWN)
        return
    session.data_socket = listener
    session.mode = TransferMode.PASSIVE
    session.reply(format_pasv_reply(ctx.ip, port))


def handle_port(ctx: ServerContext, arg: str | None, session: Session) -> None:
    """PORT: connect to the address the client gave for the data channel."""
    if not _check_logged_in(session):
        return
    if not arg:
        session.reply(REPLY_SYNTAX_ARGS)
        return
    try:
        address = parse_port_argument(arg)
    except ValueError:
        session.reply(REPLY_SYNTAX_ARGS)
        return
    session.close_data_socket()
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.connect(address)
    except OSError:
        sock.close()
        session.reply(REPLY_UNAVAILABLE)
        return
    session.data_socket = sock
    session.mode = TransferMode.ACTIVE
    session.reply(REPLY_PORT_OK)