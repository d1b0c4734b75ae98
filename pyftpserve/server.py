"""The control-channel server loop and the command-line entry point."""

from __future__ import annotations

import os
import re
import selectors
import socket
import sys

from .dispatch import process_command
from .netutils import (
    NetworkError,
    abort_connection,
    accept_tcp_connection,
    create_tcp_server,
    receive_data,
    send_data,
)
from .session import GREETING, ServerContext, Session

EXIT_FAILURE = 84
RECEIVE_SIZE = 1024

USAGE = (
    "USAGE: pyftpserve port path\n"
    "       port is the port number on which the server socket listens\n"
    "       path is the path to the home directory for the Anonymous user\n"
)

_LISTENER = object()


def parse_port(text: str) -> int:
    """Read a decimal port number in the range 0..65535."""
    if re.fullmatch(r"\s*[+-]?\d+", text, re.ASCII) is None:
        raise ValueError(f"Invalid input: {text}")
    value = int(text)
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"Invalid input: {text}")
    return value


class Server:
    """Accepts clients and drives their control connections."""

    poll_interval = 0.2

    def __init__(self, ctx: ServerContext, listener: socket.socket | None = None) -> None:
        self.ctx = ctx
        self.listener = listener if listener is not None else create_tcp_server(ctx.port)
        self.sessions: list[Session] = []
        self._selector = selectors.DefaultSelector()
        self._selector.register(self.listener, selectors.EVENT_READ, _LISTENER)
        self._running = False
        self._closed = False

    def handle_input(self, session: Session, data: bytes) -> None:
        """Buffer received bytes and run every complete CRLF-terminated command."""
        session.incoming += data
        while True:
            end = session.incoming.find(b"\r\n")
            if end < 0:
                return
            line = bytes(session.incoming[:end]).decode("utf-8", "surrogateescape")
            del session.incoming[: end + 2]
            process_command(self.ctx, line, session)

    def flush(self, session: Session) -> int:
        """Send as much queued output as the socket takes; return the byte count."""
        if not session.outgoing:
            return 0
        sent = send_data(session.sock, bytes(session.outgoing))
        del session.outgoing[:sent]
        return sent

    def serve_forever(self) -> None:
        """Run the event loop until :meth:`close` is called."""
        self._running = True
        try:
            while self._running:
                self._poll(self.poll_interval)
        finally:
            self._running = False
            self._cleanup()

    def close(self) -> None:
        """Stop serving and release every socket."""
        if self._running:
            self._running = False
        else:
            self._cleanup()

    def _poll(self, timeout: float | None) -> None:
        for session in self.sessions:
            events = selectors.EVENT_READ
            if session.outgoing:
                events |= selectors.EVENT_WRITE
            self._selector.modify(session.sock, events, session)
        try:
            selected = self._selector.select(timeout)
        except OSError as error:
            print(f"Error: poll failed: {error.strerror or error}", file=sys.stderr)
            return
        ready = {id(key.data): mask for key, mask in selected}
        for session in reversed(self.sessions[:]):
            self._process(session, ready.get(id(session), 0))
        if ready.get(id(_LISTENER), 0) & selectors.EVENT_READ:
            self._accept()

    def _process(self, session: Session, mask: int) -> None:
        try:
            if mask & selectors.EVENT_READ:
                data = receive_data(session.sock, RECEIVE_SIZE)
                if not data:
                    raise ConnectionResetError("peer closed the connection")
                self.handle_input(session, data)
            if mask & selectors.EVENT_WRITE:
                self.flush(session)
        except OSError:
            self._drop(session)
            return
        if session.should_quit and not session.outgoing:
            self._drop(session)

    def _accept(self) -> None:
        try:
            client, address = accept_tcp_connection(self.listener)
        except NetworkError:
            return
        session = Session(sock=client, address=address)
        session.reply(GREETING)
        self.sessions.append(session)
        self._selector.register(client, selectors.EVENT_READ, session)

    def _drop(self, session: Session) -> None:
        if session not in self.sessions:
            return
        self.sessions.remove(session)
        try:
            self._selector.unregister(session.sock)
        except (KeyError, ValueError):
            pass
        try:
            abort_connection(session.sock)
        except NetworkError:
            pass
        session.close_data_socket()

    def _cleanup(self) -> None:
        if self._closed:
            return
        self._closed = True
        for session in self.sessions[:]:
            self._drop(session)
        try:
            self._selector.unregister(self.listener)
        except (KeyError, ValueError):
            pass
        self._selector.close()
        try:
            abort_connection(self.listener)
        except NetworkError:
            pass


def main(argv: list[str] | None = None) -> int:
    """Start the server with ``port path`` or print usage with ``-help``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) == 1 and args[0] == "-help":
        print(USAGE)
        return 0
    if len(args) != 2:
        return 0
    try:
        root = os.path.realpath(args[1], strict=True)
    except OSError:
        return EXIT_FAILURE
    try:
        port = parse_port(args[0])
    except ValueError as error:
        print(error, file=sys.stderr)
        return EXIT_FAILURE
    ctx = ServerContext(root=root, port=port)
    try:
        server = Server(ctx)
    except NetworkError:
        return EXIT_FAILURE
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        server.close()
        return 2
    return EXIT_FAILURE