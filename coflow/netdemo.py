"""A minimal TCP echo-acknowledge server and client.

The client connects, sends its message followed by a NUL byte and reads the
reply. The server reads one message per connection, writes its text to an
output stream, answers ``ok`` and closes the connection.
"""

from __future__ import annotations

import argparse
import socket
import sys
from typing import TextIO

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 2001
BUFFER_SIZE = 512
REPLY = b"ok"
_TIMEOUT = 10.0


def _text(data: bytes) -> str:
    """Decode ``data`` up to its first NUL byte."""
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def run_server(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    max_clients: int | None = None,
    out: TextIO | None = None,
) -> int:
    """Serve clients one at a time and return how many were served.

    Serves forever when ``max_clients`` is ``None``.
    """
    if max_clients is not None and max_clients < 0:
        raise ValueError("max_clients must not be negative")
    stream = sys.stdout if out is None else out
    served = 0
    with socket.create_server((host, port)) as listener:
        while max_clients is None or served < max_clients:
            conn, _ = listener.accept()
            with conn:
                try:
                    data = conn.recv(BUFFER_SIZE)
                except OSError:
                    data = b""
                stream.write(_text(data))
                stream.flush()
                try:
                    conn.sendall(REPLY)
                except OSError:
                    pass
            served += 1
    return served


def run_client(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    message: str | bytes = "hello",
) -> str:
    """Send ``message`` to the server and return its reply."""
    payload = message.encode("utf-8") if isinstance(message, str) else bytes(message)
    with socket.create_connection((host, port), timeout=_TIMEOUT) as conn:
        conn.sendall(payload + b"\0")
        reply = conn.recv(BUFFER_SIZE)
    return _text(reply)


def main(argv: list[str] | None = None) -> int:
    """Run the demo server or client from the command line."""
    parser = argparse.ArgumentParser(
        prog="coflow-netdemo", description="A tiny TCP server and client."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    server = commands.add_parser("server", help="accept clients and answer ok")
    server.add_argument("--host", default=DEFAULT_HOST)
    server.add_argument("--port", type=int, default=DEFAULT_PORT)
    server.add_argument("--max-clients", type=int, default=None)

    client = commands.add_parser("client", help="send a message and print the reply")
    client.add_argument("--host", default=DEFAULT_HOST)
    client.add_argument("--port", type=int, default=DEFAULT_PORT)
    client.add_argument("--message", default="hello")

    args = parser.parse_args(argv)
    if args.command == "server":
        run_server(args.host, args.port, args.max_clients)
        return 0
    reply = run_client(args.host, args.port, args.message)
    print("connect")
    print(reply)
    return 0