"""Commands that move data over the data connection: LIST, RETR and STOR."""

from __future__ import annotations

import os
import socket
import subprocess
import threading
from dataclasses import dataclass

from .filesystem import build_real_path, resolve_inside_root
from .session import ServerContext, Session, State, TransferMode

CHUNK_SIZE = 4096

REPLY_NOT_LOGGED_IN = "530 Not logged in.\r\n"
REPLY_SYNTAX_ARGS = "501 Syntax error in parameters or arguments.\r\n"
REPLY_OPENING = "150 File status okay; about to open data connection.\r\n"
REPLY_NO_DATA = "425 Can't open data connection.\r\n"
REPLY_LIST_FAILED = "450 Requested file action not taken.\r\n"
REPLY_ABORTED = "451 Requested action aborted.\r\n"
REPLY_LIST_DONE = "226 Closing data connection.\r\n"
REPLY_NOT_TAKEN = "550 Requested action not taken.\r\n"
REPLY_TRANSFER_ABORTED = "426 Connection closed; transfer aborted.\r\n"
REPLY_TRANSFER_DONE = "226 Transfer complete.\r\n"


@dataclass
class _Channel:
    sock: socket.socket
    mode: TransferMode

    def connect(self) -> socket.socket:
        """Return a connected data socket, accepting a client in passive mode."""
        if self.mode is not TransferMode.PASSIVE:
            return self.sock
        try:
            accepted, _ = self.sock.accept()
        finally:
            self.sock.close()
        return accepted


def _detach(session: Session) -> _Channel:
    channel = _Channel(session.data_socket, session.mode)
    session.data_socket = None
    return channel


def open_data_connection(session: Session) -> socket.socket:
    """Take the session's data socket and return it connected to the client."""
    if session.data_socket is None:
        raise ConnectionError("no data connection prepared")
    return _detach(session).connect()


def _notify(session: Session, message: str) -> None:
    """Send a completion reply straight to the client from a worker."""
    if session.sock is None:
        session.reply(message)
        return
    try:
        session.sock.sendall(message.encode())
    except OSError:
        pass


def _start(session: Session, target, *args) -> threading.Thread | None:
    channel = _detach(session)
    worker = threading.Thread(target=target, args=(channel, *args), daemon=True)
    try:
        worker.start()
    except RuntimeError:
        channel.sock.close()
        session.reply(REPLY_ABORTED)
        return None
    return worker


def _check_logged_in(session: Session) -> bool:
    if session.state is not State.AUTH:
        session.reply(REPLY_NOT_LOGGED_IN)
        return False
    return True


def _run_listing(channel: _Channel, directory: str) -> None:
    try:
        data = channel.connect()
    except OSError:
        return
    with data:
        try:
            subprocess.run(["ls", "-l", directory], stdout=data.fileno(), check=False)
        except OSError:
            pass


def handle_list(ctx: ServerContext, arg: str | None, session: Session) -> threading.Thread | None:
    """LIST: send ``ls -l`` of a directory over the data connection."""
    if not _check_logged_in(session):
        return None
    session.reply(REPLY_OPENING)
    if session.data_socket is None:
        session.reply(REPLY_NO_DATA)
        return None
    worker = None
    try:
        if arg:
            resolved = resolve_inside_root(ctx.root, session.cwd, arg)
        else:
            resolved = resolve_inside_root(ctx.root, "", session.cwd)
        if not os.access(resolved, os.R_OK):
            raise PermissionError(resolved)
    except OSError:
        session.reply(REPLY_LIST_FAILED)
    else:
        worker = _start(session, _run_listing, resolved)
    session.reply(REPLY_LIST_DONE)
    return worker


def _send_file(channel: _Channel, path: str, session: Session) -> None:
    try:
        data = channel.connect()
    except OSError:
        _notify(session, REPLY_NO_DATA)
        return
    with data:
        try:
            source = open(path, "rb")
        except OSError:
            _notify(session, REPLY_NOT_TAKEN)
            return
        with source:
            try:
                while chunk := source.read(CHUNK_SIZE):
                    data.sendall(chunk)
            except OSError:
                _notify(session, REPLY_TRANSFER_ABORTED)
                return
    _notify(session, REPLY_TRANSFER_DONE)


def handle_retr(ctx: ServerContext, arg: str | None, session: Session) -> threading.Thread | None:
    """RETR: send a regular file to the client."""
    if not _check_logged_in(session):
        return None
    if not arg:
        session.reply(REPLY_SYNTAX_ARGS)
        return None
    session.reply(REPLY_OPENING)
    if session.data_socket is None:
        session.reply(REPLY_NO_DATA)
        return None
    try:
        resolved = resolve_inside_root(ctx.root, session.cwd, arg)
        if not os.access(resolved, os.R_OK) or not os.path.isfile(resolved):
            raise PermissionError(resolved)
    except OSError:
        session.reply(REPLY_NOT_TAKEN)
        return None
    return _start(session, _send_file, resolved, session)


def _receive_file(channel: _Channel, path: str, session: Session) -> None:
    try:
        data = channel.connect()
    except OSError:
        _notify(session, REPLY_NO_DATA)
        return
    with data:
        try:
            target = os.fdopen(os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644), "wb")
        except OSError:
            _notify(session, REPLY_NOT_TAKEN)
            return
        with target:
            try:
                while chunk := data.recv(CHUNK_SIZE):
                    target.write(chunk)
            except OSError:
                _notify(session, REPLY_TRANSFER_ABORTED)
                return
    _notify(session, REPLY_TRANSFER_DONE)


def _writable_directory_inside(root: str, path: str) -> bool:
    directory = os.path.dirname(path) or "."
    try:
        resolved = os.path.realpath(directory, strict=True)
    except OSError:
        return False
    return resolved.startswith(root) and os.access(directory, os.W_OK)


def handle_stor(ctx: ServerContext, arg: str | None, session: Session) -> threading.Thread | None:
    """STOR: write what the client sends into a file under the root."""
    if not _check_logged_in(session):
        return None
    if not arg:
        session.reply(REPLY_SYNTAX_ARGS)
        return None
    session.reply(REPLY_OPENING)
    if session.data_socket is None:
        session.reply(REPLY_NO_DATA)
        return None
    path = build_real_path(ctx.root, session.cwd, arg)
    if not _writable_directory_inside(ctx.root, path):
        session.reply(REPLY_NOT_TAKEN)
        return None
    return _start(session, _receive_file, path, session)