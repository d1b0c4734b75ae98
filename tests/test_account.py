import pytest

from pyftpserve.account import (
    handle_help,
    handle_noop,
    handle_pass,
    handle_pwd,
    handle_quit,
    handle_user,
)
from pyftpserve.session import ServerContext, Session, State


@pytest.fixture
def ctx(tmp_path):
    return ServerContext(root=str(tmp_path))


def _logged_in(ctx):
    session = Session()
    handle_user(ctx, "Anonymous", session)
    handle_pass(ctx, None, session)
    session.take_outgoing()
    return session


def test_user_without_argument_is_unrecognized(ctx):
    session = Session()
    handle_user(ctx, None, session)
    assert session.take_outgoing() == b"500 Syntax error, command unrecognized.\r\n"
    assert session.state is State.NOT_AUTH


def test_user_waits_for_password(ctx):
    session = Session()
    handle_user(ctx, "Anonymous", session)
    assert session.take_outgoing() == b"331 User name okay, need password.\r\n"
    assert session.state is State.WAIT_PASS
    assert session.username == "Anonymous"


def test_user_name_is_truncated(ctx):
    session = Session()
    handle_user(ctx, "x" * 400, session)
    assert len(session.username) == 255


@pytest.mark.parametrize("arg", [None, ""])
def test_anonymous_login(ctx, arg):
    session = Session()
    handle_user(ctx, "Anonymous", session)
    session.take_outgoing()
    handle_pass(ctx, arg, session)
    assert session.take_outgoing() == b"230 User logged in, proceed.\r\n"
    assert session.state is State.AUTH
    assert session.cwd == "/"


def test_wrong_password_is_rejected(ctx):
    session = Session()
    handle_user(ctx, "Anonymous", session)
    session.take_outgoing()
    handle_pass(ctx, "nope", session)
    assert session.take_outgoing() == b"530 Login incorrect.\r\n"
    assert session.state is State.WAIT_PASS


def test_other_user_is_rejected(ctx):
    session = Session()
    handle_user(ctx, "someone", session)
    session.take_outgoing()
    handle_pass(ctx, None, session)
    assert session.take_outgoing() == b"530 Login incorrect.\r\n"


def test_pass_before_user_is_bad_sequence(ctx):
    session = Session()
    handle_pass(ctx, "", session)
    assert session.take_outgoing() == b"503 Bad sequence of commands.\r\n"
    assert session.state is State.NOT_AUTH


def test_noop(ctx):
    session = Session()
    handle_noop(ctx, None, session)
    assert session.take_outgoing() == b"200\r\n"


def test_help_lists_commands(ctx):
    session = Session()
    handle_help(ctx, None, session)
    text = session.take_outgoing()
    assert text.startswith(b"214 ")
    assert text.endswith(b"\r\n")
    for name in (b"USER", b"PASS", b"CWD", b"CDUP", b"RETR", b"STOR", b"LIST"):
        assert name in text


def test_pwd_requires_login(ctx):
    session = Session()
    handle_pwd(ctx, None, session)
    assert session.take_outgoing() == b"530 Not logged in.\r\n"


def test_pwd_rejects_argument(ctx):
    session = _logged_in(ctx)
    handle_pwd(ctx, "extra", session)
    assert session.take_outgoing() == b"501 Syntax error in parameters or arguments.\r\n"


def test_pwd_reports_directory(ctx):
    session = _logged_in(ctx)
    handle_pwd(ctx, None, session)
    assert session.take_outgoing() == b'257 "/" is current directory.\r\n'


def test_quit(ctx):
    session = Session()
    handle_quit(ctx, None, session)
    assert session.take_outgoing() == b"221 Service closing control connection.\r\n"
    assert session.should_quit is True