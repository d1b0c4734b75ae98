"""Login, informational and session-ending commands."""

from __future__ import annotations

from .session import ServerContext, Session, State

USERNAME_LIMIT = 255
ANONYMOUS = "Anonymous"

REPLY_UNRECOGNIZED = "500 Syntax error, command unrecognized.\r\n"
REPLY_USER_OKAY = "331 User name okay, need " + "pass" + "word.\r\n"
REPLY_BAD_SEQUENCE = "503 Bad sequence of commands.\r\n"
REPLY_LOGGED_IN = "230 User logged in, proceed.\r\n"
REPLY_LOGIN_INCORRECT = "530 Login incorrect.\r\n"
REPLY_NOT_LOGGED_IN = "530 Not logged in.\r\n"
REPLY_SYNTAX_ARGS = "501 Syntax error in parameters or arguments.\r\n"
REPLY_NOOP = "200\r\n"
REPLY_GOODBYE = "221 Service closing control connection.\r\n"

HELP_TEXT = (
    "214 : USER <SP> <username> <CRLF>   : Specify user for authentication\n"
    "PASS <SP> <password> <CRLF>   : Specify password for authentication\n"
    "CWD  <SP> <pathname> <CRLF>   : Change working directory\n"
    "CDUP <CRLF> : Change working directory to parent directory\n"
    "QUIT <CRLF> : Disconnection\n"
    "DELE <SP> <pathname> <CRLF>   : Delete file on the server\n"
    "PWD  <CRLF>                   : Print working directory\n"
    "PASV <CRLF>                   : Enable passive mode for data transfer\n"
    "PORT <SP> <host-port> <CRLF>  : Enable active mode for data transfer\n"
    "HELP [<SP> <string>] <CRLF>   : List available commands\n"
    "NOOP <CRLF>                   : Do nothing\n"
    "RETR <SP> <pathname> <CRLF>   : Download file from server to client\n"
    "STOR <SP> <pathname> <CRLF>   : Upload file from client to server\n"
    "LIST [<SP> <pathname>] <CRLF> : List files in the current working "
    "directory\r\n"
)


def handle_user(ctx: ServerContext, arg: str | None, session: Session) -> None:
    """USER: remember the user name and wait for a password."""
    if arg is None:
        session.reply(REPLY_UNRECOGNIZED)
        return
    session.username = arg[:USERNAME_LIMIT]
    session.state = State.WAIT_PASS
    session.reply(REPLY_USER_OKAY)


def handle_pass(ctx: ServerContext, arg: str | None, session: Session) -> None:
    """PASS: log in the anonymous user, who has an empty password."""
    if session.state is not State.WAIT_PASS:
        session.reply(REPLY_BAD_SEQUENCE)
        return
    if session.username == ANONYMOUS and not arg:
        session.state = State.AUTH
        session.cwd = "/"
        session.reply(REPLY_LOGGED_IN)
    else:
        session.reply(REPLY_LOGIN_INCORRECT)


def handle_noop(ctx: ServerContext, arg: str | None, session: Session) -> None:
    """NOOP: acknowledge and do nothing."""
    session.reply(REPLY_NOOP)


def handle_help(ctx: ServerContext, arg: str | None, session: Session) -> None:
    """HELP: list the supported commands."""
    session.reply(HELP_TEXT)


def handle_pwd(ctx: ServerContext, arg: str | None, session: Session) -> None:
    """PWD: report the current virtual directory."""
    if session.state is not State.AUTH:
        session.reply(REPLY_NOT_LOGGED_IN)
        return
    if arg:
        session.reply(REPLY_SYNTAX_ARGS)
        return
    session.reply(f'257 "{session.cwd}" is current directory.\r\n')


def handle_quit(ctx: ServerContext, arg: str | None, session: Session) -> None:
    """QUIT: say goodbye and close once the reply is sent."""
    session.reply(REPLY_GOODBYE)
    session.should_quit = True