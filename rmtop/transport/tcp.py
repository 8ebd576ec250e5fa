# rmtop/transport/tcp.py
from __future__ import annotations

import socket
from typing import Optional

from .base import Transport
from .errors import TransportClosedError, TransportIOError, TransportOpenError


class TCPTransport(Transport):
    """
    Plain TCP transport implemented via the socket module.

    connect_timeout bounds connection setup only; read_timeout is the poll
    granularity of read(n), which returns b"" when it expires.
    """

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 6379,
        connect_timeout: float = 3.0,
        read_timeout: float = 0.5,
    ):
        self.host = host
        self.port = int(port)
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.sock: Optional[socket.socket] = None

    def describe(self) -> str:
        return f"tcp://{self.host}:{self.port}"

    def open(self) -> None:
        try:
            self.sock = socket.create_connection((self.host, self.port), timeout=self.connect_timeout)
            self.sock.settimeout(self.read_timeout)
        except OSError as e:
            self.sock = None
            raise TransportOpenError(str(e)) from None

    def close(self) -> None:
        if self.sock is not None:
            try:
                self.sock.close()
            finally:
                self.sock = None

    def is_open(self) -> bool:
        return self.sock is not None

    def read(self, n: int) -> bytes:
        if self.sock is None:
            raise TransportIOError("read while transport not open")

        try:
            data = self.sock.recv(n)
        except socket.timeout:
            return b""
        except OSError as e:
            self.sock = None
            raise TransportIOError(f"TCP read failed: {e}") from None

        if not data:
            self.sock = None
            raise TransportClosedError("connection closed by server")
        return data

    def write(self, data: bytes) -> int:
        if self.sock is None:
            raise TransportIOError("write while transport not open")

        try:
            self.sock.sendall(data)
            return len(data)
        except OSError as e:
            self.sock = None
            raise TransportIOError(f"TCP write failed: {e}") from None

    def flush(self) -> None:
        if self.sock is None:
            raise TransportIOError("flush while transport not open")
        # sendall() leaves nothing buffered on our side
