# pyftpserve

A small FTP server that serves one directory tree to an anonymous user.
Control connections are multiplexed in a single event loop built on
`selectors`; file transfers and directory listings run in background
threads so the loop keeps serving other clients. Both passive (`PASV`) and
active (`PORT`) data channels are supported.

It has no dependencies outside the standard library. Directory listings
are produced by running `ls -l`, so a POSIX system is expected.

## Installing

```
pip install .
```

## Running

```
pyftpserve PORT PATH
```

- `PORT` is the TCP port the server listens on, a decimal number from 0 to
  65535. It listens on every interface (`0.0.0.0`).
- `PATH` is the home directory for the anonymous user. It must exist; it is
  resolved to its real path and clients cannot leave it.

`pyftpserve -help` prints the usage text.

Exit status: `0` after `-help` (and, without doing anything, when the
number of arguments is neither one nor two); `84` when the path does not
exist, the port is invalid or the listening socket cannot be set up; `2`
when stopped with Ctrl-C.

## Logging in

The only account is `Anonymous`, with an empty password:

```
USER Anonymous
PASS
```

Any other user name, or a non-empty password, gets `530 Login incorrect.`
`PASS` without a preceding `USER` gets `503 Bad sequence of commands.`

## Supported commands

Commands are lines ending in CRLF. The command name is everything before
the first space and is case-sensitive; everything after it is the argument.

| Command | Purpose |
|---------|---------|
| `USER <name>` | Give the user name |
| `PASS [<password>]` | Give the password |
| `CWD <path>` | Change working directory |
| `CDUP` | Go to the parent directory |
| `PWD` | Print the working directory |
| `DELE <path>` | Delete a file or an empty directory |
| `PASV` | Open a passive data channel |
| `PORT h1,h2,h3,h4,p1,p2` | Connect an active data channel |
| `LIST [<path>]` | Send `ls -l` of a directory over the data channel |
| `RETR <path>` | Download a file |
| `STOR <path>` | Upload a file |
| `HELP` | List commands |
| `NOOP` | Do nothing |
| `QUIT` | Close the control connection once the reply is sent |

Unknown commands get `500 Syntax error, command unrecognized.` Every
command other than `USER`, `PASS`, `NOOP`, `HELP` and `QUIT` needs a
logged-in session and answers `530 Not logged in.` otherwise.

A data channel prepared with `PASV` or `PORT` is used by exactly one
`LIST`, `RETR` or `STOR` and then closed. For `RETR` and `STOR` the final
`226 Transfer complete.` (or an error reply) is written to the control
connection by the transfer thread when it finishes.

## What it does not do

- There is one account, `Anonymous`; there is no user database and no
  real password check.
- Only the commands above exist: no `TYPE`, `MODE`, `STRU`, `MKD`, `RMD`,
  `RNFR`/`RNTO`, `SIZE`, `REST`, `ABOR` or TLS. Data is sent as raw bytes.
- The `PASV` reply announces `ServerContext.ip`, which defaults to
  `0.0.0.0`; the command-line entry point does not change it, so clients
  have to connect back to the server's address themselves.
- Only IPv4 is supported.

## Using it from Python

```python
import os

from pyftpserve.server import Server, main
from pyftpserve.session import ServerContext

# Same as the command line; blocks until interrupted.
main(["2121", "/srv/ftp"])

# Or build the server yourself.
ctx = ServerContext(root=os.path.realpath("/srv/ftp"), port=2121, ip="127.0.0.1")
server = Server(ctx)
server.serve_forever()   # call server.close() from another thread to stop
```

`Server.handle_input(session, data)` feeds received bytes to a session and
runs every complete command; `Server.flush(session)` sends queued replies.

`pyftpserve.dispatch.process_command(ctx, line, session)` runs one command
line against a `pyftpserve.session.Session`; the queued reply can be read
back with `Session.take_outgoing()`:

```python
from pyftpserve.dispatch import process_command
from pyftpserve.session import ServerContext, Session

ctx = ServerContext(root="/srv/ftp")
session = Session()
process_command(ctx, "USER Anonymous", session)
process_command(ctx, "PASS", session)
process_command(ctx, "PWD", session)
print(session.take_outgoing())
```

Other modules: `pyftpserve.netutils` (TCP socket helpers raising
`NetworkError`), `pyftpserve.account`, `pyftpserve.filesystem`,
`pyftpserve.datachannel` and `pyftpserve.transfer` (the command handlers).

## Running the tests

```
pip install .[test]
pytest
```