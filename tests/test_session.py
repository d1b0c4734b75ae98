import socket

from pyftpserve.session import ServerContext, Session, State, TransferMode


def test_new_session_defaults():
    session = Session()
    assert session.state is State.NOT_AUTH
    assert session.mode is TransferMode.NONE
    assert session.data_socket is None
    assert session.should_quit is False
    assert session.take_outgoing() == b""


def test_reply_accumulates_in_order():
    session = Session()
    session.reply("200\r\n")
    session.reply(b"221 Service closing control connection.\r\n")
    assert session.take_outgoing() == (
        b"200\r\n221 Service closing control connection.\r\n"
    )


def test_take_outgoing_empties_queue():
    session = Session()
    session.reply("530 Not logged in.\r\n")
    first = session.take_outgoing()
    assert first == b"530 Not logged in.\r\n"
    assert session.take_outgoing() == b""
    assert len(session.outgoing) == 0


def test_reply_non_ascii_roundtrip():
    session = Session()
    text = '257 "/dossier été" is current directory.\r\n'
    session.reply(text)
    assert session.take_outgoing().decode("utf-8") == text


def test_close_data_socket_closes_and_clears():
    left, right = socket.socketpair()
    try:
        session = Session(data_socket=left, mode=TransferMode.ACTIVE)
        session.close_data_socket()
        assert session.data_socket is None
        assert left.fileno() == -1
        assert session.mode is TransferMode.ACTIVE
    finally:
        right.close()


def test_close_data_socket_without_socket_is_harmless():
    session = Session()
    session.close_data_socket()
    assert session.data_socket is None


def test_sessions_have_independent_buffers():
    first = Session()
    second = Session()
    first.reply("200\r\n")
    assert second.take_outgoing() == b""
    assert first.take_outgoing() == b"200\r\n"


def test_server_context_keeps_values():
    ctx = ServerContext(root="/srv/ftp", port=2121)
    assert ctx.root == "/srv/ftp"
    assert ctx.port == 2121
    assert ctx.ip == "0.0.0.0"