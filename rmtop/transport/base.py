from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Transport(ABC):
    """
    Abstract byte-stream transport to the monitored server (TCP, pyserial URL).

    Contract:
      - open()/close() manage the underlying connection.
      - read(n) returns 0..n bytes. It returns b"" when no data arrived within the
        read timeout, and raises TransportClosedError once the peer has closed.
      - write(data) returns the number of bytes written.
      - flush() forces pending output to be transmitted.
    """

    @abstractmethod
    def open(self) -> None: ...

    @abstractmethod
    def close(self) -> None: ...

    @abstractmethod
    def read(self, n: int) -> bytes: ...

    @abstractmethod
    def write(self, data: bytes) -> int: ...

    @abstractmethod
    def flush(self) -> None: ...

    def describe(self) -> str:
        return type(self).__name__

    def __enter__(self) -> "Transport":
        self.open()
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        self.close()
