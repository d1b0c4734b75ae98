"""Routing of control-channel command lines to their handlers."""

from __future__ import annotations

from typing import Callable, Optional

from .account import (
    handle_help,
    handle_noop,
    handle_pass,
    handle_pwd,
    handle_quit,
    handle_user,
)
from .datachannel import handle_pasv, handle_port
from .filesystem import handle_cdup, handle_cwd, handle_dele
from .session import ServerContext, Session
from .transfer import handle_list, handle_retr, handle_stor

REPLY_UNRECOGNIZED = "500 Syntax error, command unrecognized.\r\n"

Handler = Callable[[ServerContext, Optional[str], Session], object]

COMMANDS: dict[str, Handler] = {
    "USER": handle_user,
    "PASS": handle_pass,
    "NOOP": handle_noop,
    "HELP": handle_help,
    "PWD": handle_pwd,
    "CWD": handle_cwd,
    "CDUP": handle_cdup,
    "DELE": handle_dele,
    "PASV": handle_pasv,
    "PORT": handle_port,
    "LIST": handle_list,
    "RETR": handle_retr,
    "STOR": handle_stor,
    "QUIT": handle_quit,
}


def process_command(ctx: ServerContext, line: str, session: Session) -> object:
    """Run the command named by the first word of ``line``.

    Everything after the first space is the argument; without a space the
    argument is ``None``. Unknown commands get a 500 reply. Whatever the
    handler returns (a worker thread for transfers) is passed back.
    """
    name, separator, rest = line.partition(" ")
    handler = COMMANDS.get(name)
    if handler is None:
        session.reply(REPLY_UNRECOGNIZED)
        return None
    return handler(ctx, rest if separator else None, session)