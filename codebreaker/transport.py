"""
Blocking byte transports for the session controller.

SocketTransport talks TCP over IPv4 to a remote arbiter; LoopbackTransport
plays against an in-process Arbiter (tests, sweeps).
"""

from __future__ import annotations

import logging
import socket

from .codec import GUESS_BYTES, bytes_to_guess
from .errors import ConnectionFailed, ConnectionLost

log = logging.getLogger(__name__)

LOCALHOST_ALIAS = {"localhost": "127.0.0.1"}


def resolve_host(name: str) -> str:
    """IPv4 literal for a configured host; 'localhost' maps to loopback."""
    return LOCALHOST_ALIAS.get(name, name)


class SocketTransport:
    """
    One long-lived TCP connection.

    Use as a context manager; the socket is closed on every exit path.
    """

    def __init__(self, host: str, port: int, sock: socket.socket | None = None):
        self.host = resolve_host(host)
        self.port = port
        self.sock = sock

    def connect(self):
        try:
            socket.inet_pton(socket.AF_INET, self.host)
        except OSError:
            raise ConnectionFailed(f"not an IPv4 address: {self.host!r}") from None
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.connect((self.host, self.port))
        except OSError as e:
            sock.close()
            raise ConnectionFailed(f"connect to {self.host}:{self.port}: {e}") from e
        log.debug("connected to %s:%d", self.host, self.port)
        self.sock = sock

    def close(self):
        if self.sock is not None:
            log.debug("closing connection")
            self.sock.close()
            self.sock = None

    def __enter__(self) -> SocketTransport:
        if self.sock is None:
            self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def send(self, data: bytes):
        try:
            self.sock.sendall(data)
        except OSError as e:
            raise ConnectionLost(f"send: {e}") from e

    def recv_exact(self, n: int) -> bytes:
        """Read exactly n bytes, across as many partial reads as it takes."""
        buf = bytearray()
        while len(buf) < n:
            try:
                chunk = self.sock.recv(n - len(buf))
            except OSError as e:
                raise ConnectionLost(f"receive: {e}") from e
            if not chunk:
                raise ConnectionLost(
                    f"connection closed after {len(buf)} of {n} bytes")
            buf += chunk
        return bytes(buf)


class LoopbackTransport:
    """Feeds guesses straight to an Arbiter and queues its answers."""

    def __init__(self, arbiter):
        self.arbiter = arbiter
        self._pending = bytearray()
        self._inbox = bytearray()

    def __enter__(self) -> LoopbackTransport:
        return self

    def __exit__(self, exc_type, exc, tb):
        pass

    def send(self, data: bytes):
        if self.arbiter.finished:
            raise ConnectionLost("arbiter closed the game")
        self._pending += data
        while len(self._pending) >= GUESS_BYTES:
            message = bytes_to_guess(bytes(self._pending[:GUESS_BYTES]))
            del self._pending[:GUESS_BYTES]
            self._inbox.append(self.arbiter.evaluate(message))

    def recv_exact(self, n: int) -> bytes:
        if len(self._inbox) < n:
            raise ConnectionLost(
                f"connection closed after {len(self._inbox)} of {n} bytes")
        out = bytes(self._inbox[:n])
        del self._inbox[:n]
        return out
