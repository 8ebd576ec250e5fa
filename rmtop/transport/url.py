# rmtop/transport/url.py
from __future__ import annotations

from typing import Optional

import serial
from serial import SerialException

from .base import Transport
from .errors import TransportIOError, TransportOpenError


class URLTransport(Transport):
    """
    Transport opened from a pyserial URL (socket://host:port, rfc2217://..., loop://).

    Useful for servers reachable through a serial/ser2net bridge.
    read(n) returns whatever arrived before the timeout, possibly b"".
    """

    def __init__(self, url: str, timeout: float = 0.5):
        self.url = url
        self.timeout = timeout
        self.ser: Optional[serial.SerialBase] = None

    def describe(self) -> str:
        return self.url

    def open(self) -> None:
        try:
            self.ser = serial.serial_for_url(
                self.url,
                timeout=self.timeout,
                write_timeout=self.timeout,
            )
            self.ser.reset_input_buffer()
        except (SerialException, ValueError) as e:
            self.ser = None
            raise TransportOpenError(str(e)) from None

    def close(self) -> None:
        if self.ser is not None:
            try:
                self.ser.close()
            finally:
                self.ser = None

    def is_open(self) -> bool:
        return self.ser is not None and self.ser.is_open

    def read(self, n: int) -> bytes:
        if self.ser is None:
            raise TransportIOError("read while transport not open")

        try:
            # read what is buffered, else block up to timeout for the first byte
            waiting = self.ser.in_waiting
            return self.ser.read(min(n, waiting) if waiting else 1)
        except SerialException as e:
            self.ser = None
            raise TransportIOError(f"URL transport read failed: {e}") from None

    def write(self, data: bytes) -> int:
        if self.ser is None:
            raise TransportIOError("write while transport not open")

        try:
            return self.ser.write(data)
        except SerialException as e:
            self.ser = None
            raise TransportIOError(f"URL transport write failed: {e}") from None

    def flush(self) -> None:
        if self.ser is None:
            raise TransportIOError("flush while transport not open")

        try:
            self.ser.flush()
        except SerialException as e:
            self.ser = None
            raise TransportIOError(f"URL transport flush failed: {e}") from None
