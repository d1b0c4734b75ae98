"""Per-connection state of the FTP control channel."""

from __future__ import annotations

import enum
import socket
from dataclasses import dataclass, field

GREETING = "220 Service ready for new user.\r\n"


class State(enum.Enum):
    """Authentication state of a control connection."""

    NOT_AUTH = enum.auto()
    WAIT_PASS = enum.auto()
    AUTH = enum.auto()
    QUIT = enum.auto()


class TransferMode(enum.Enum):
    """How the data connection is established."""

    NONE = 0
    ACTIVE = 1
    PASSIVE = 2


@dataclass
class ServerContext:
    """Server-wide settings shared by every command handler."""

    root: str
    port: int = 0
    ip: str = "0.0.0.0"


@dataclass(eq=False)
class Session:
    """One client connected to the control channel."""

    sock: socket.socket | None = None
    address: tuple = ("", 0)
    state: State = State.NOT_AUTH
    username: str = ""
    cwd: str = ""
    data_socket: socket.socket | None = None
    mode: TransferMode = TransferMode.NONE
    should_quit: bool = False
    incoming: bytearray = field(default_factory=bytearray)
    outgoing: bytearray = field(default_factory=bytearray)

    def reply(self, message: str | bytes) -> None:
        """Queue a reply to be sent to the client."""
        if isinstance(message, str):
            message = message.encode("utf-8", "surrogateescape")
        self.outgoing += message

    def take_outgoing(self) -> bytes:
        """Return every queued byte and empty the queue."""
        pending = bytes(self.outgoing)
        self.outgoing.clear()
        return pending

    def close_data_socket(self) -> None:
        """Close the data socket, if one is open."""
        if self.data_socket is not None:
            try:
                self.data_socket.close()
            finally:
                self.data_socket = None