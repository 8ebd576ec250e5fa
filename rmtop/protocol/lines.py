from __future__ import annotations

import logging
from typing import Optional

ACK_LINE = "+OK"
ERROR_PREFIX = "-"


def is_ack(line: str) -> bool:
    """Positive acknowledgement sent for AUTH / MONITOR."""
    return line == ACK_LINE


def is_error(line: str) -> bool:
    """Server error reply (-ERR, -NOAUTH, -WRONGPASS ...)."""
    return line.startswith(ERROR_PREFIX)


class LineReader:
    """
    Reassembles newline-terminated text lines from arbitrary byte chunks.

    Lines are returned without the trailing CRLF / LF.
    """

    def __init__(self, max_line: int = 16 * 1024 * 1024, logger: Optional[logging.Logger] = None):
        self.buffer = bytearray()
        self.max_line = int(max_line)
        self._log = logger or logging.getLogger(__name__)

    # ---------------- Public API ----------------
    def feed(self, data: bytes) -> None:
        """Feed raw bytes into the reader buffer."""
        self.buffer.extend(data)

    def get_line(self) -> Optional[str]:
        """Return the next complete line, if available."""
        idx = self.buffer.find(b"\n")
        if idx < 0:
            if len(self.buffer) > self.max_line:
                self._log.warning(
                    "LINE_TOO_LONG buffered=%d max=%d, discarding",
                    len(self.buffer),
                    self.max_line,
                )
                self.buffer.clear()
            return None

        raw = bytes(self.buffer[:idx])
        del self.buffer[: idx + 1]

        if raw.endswith(b"\r"):
            raw = raw[:-1]
        return raw.decode("utf-8", errors="replace")

    def lines(self) -> list[str]:
        """Drain every complete line currently buffered."""
        out: list[str] = []
        while True:
            line = self.get_line()
            if line is None:
                return out
            out.append(line)
