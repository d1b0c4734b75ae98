"""Directory navigation and deletion inside the served root."""

from __future__ import annotations

import os

from .session import ServerContext, Session, State

REPLY_NOT_LOGGED_IN = "530 Not logged in.\r\n"
REPLY_SYNTAX_ARGS = "501 Syntax error in parameters or arguments.\r\n"
REPLY_NOT_TAKEN = "550 Requested action not taken.\r\n"
REPLY_DONE = "250 Requested file action okay, completed.\r\n"


def build_real_path(root: str, cwd: str, arg: str) -> str:
    """Join a client path to the root, relative to ``cwd`` unless absolute."""
    if arg.startswith("/"):
        return f"{root}{arg}"
    return f"{root}{cwd}/{arg}"


def resolve_inside_root(root: str, cwd: str, arg: str) -> str:
    """Resolve a client path to an existing real path that lies under ``root``.

    Raises FileNotFoundError when it does not exist and PermissionError when
    it escapes the root.
    """
    resolved = os.path.realpath(build_real_path(root, cwd, arg), strict=True)
    if not resolved.startswith(root):
        raise PermissionError(f"outside of served root: {resolved}")
    return resolved


def parent_directory(pwd: str) -> str:
    """Return the virtual parent of ``pwd``."""
    cut = pwd.rfind("/")
    if cut == 0:
        return "/"
    if cut > 0:
        return pwd[:cut]
    return pwd


def _logged_in(session: Session) -> bool:
    if session.state is not State.AUTH:
        session.reply(REPLY_NOT_LOGGED_IN)
        return False
    return True


def handle_cwd(ctx: ServerContext, arg: str | None, session: Session) -> None:
    """CWD: change the virtual working directory."""
    if not _logged_in(session):
        return
    if not arg:
        session.reply(REPLY_SYNTAX_ARGS)
        return
    try:
        resolved = resolve_inside_root(ctx.root, session.cwd, arg)
    except OSError:
        session.reply(REPLY_NOT_TAKEN)
        return
    if not os.path.isdir(resolved):
        session.reply(REPLY_NOT_TAKEN)
        return
    session.cwd = resolved[len(ctx.root):] or "/"
    session.reply(REPLY_DONE)


def handle_cdup(ctx: ServerContext, arg: str | None, session: Session) -> None:
    """CDUP: move to the parent of the working directory."""
    if not _logged_in(session):
        return
    if arg:
        session.reply(REPLY_SYNTAX_ARGS)
        return
    if session.cwd != "/":
        session.cwd = parent_directory(session.cwd)
    session.reply(REPLY_DONE)


def handle_dele(ctx: ServerContext, arg: str | None, session: Session) -> None:
    """DELE: remove a file (or an empty directory) under the root."""
    if not _logged_in(session):
        return
    if not arg:
        session.reply(REPLY_SYNTAX_ARGS)
        return
    try:
        resolved = resolve_inside_root(ctx.root, session.cwd, arg)
        if os.path.isdir(resolved):
            os.rmdir(resolved)
        else:
            os.remove(resolved)
    except OSError:
        session.reply(REPLY_NOT_TAKEN)
        return
    session.reply(REPLY_DONE)