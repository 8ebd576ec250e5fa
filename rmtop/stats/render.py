from __future__ import annotations

import sys
from datetime import datetime
from typing import Sequence, TextIO

HEADERS = ("DATE & TIME", "COUNT", "RPS", "COMMAND")
SIZES = (20, 10, 10)
NO_DATA = "-" * 10
TIME_FORMAT = "%Y/%m/%d %H:%M:%S"

_DIM = "\x1b[2m"
_BOLD = "\x1b[1m"
_RESET = "\x1b[0m"


def pretty_num(value: int | float) -> str:
    """Thousands-separated number; integral floats render without decimals, others at full precision."""
    if isinstance(value, float) and value.is_integer():
        return f"{int(value):,}"
    return f"{value:,}"


class TableRenderer:
    """
    Fixed-width text table: three right-aligned columns plus the command name.

    The header is printed before the first row; separator() closes an interval.
    """

    def __init__(self, out: TextIO | None = None, *, color: bool = True):
        self._out = out or sys.stdout
        self._color = color
        self._header_done = False

    def _paint(self, text: str, code: str) -> str:
        return f"{code}{text}{_RESET}" if self._color else text

    def _cells(self, cells: Sequence[str], *, dim: Sequence[bool] = (False, False, False, False)) -> str:
        parts = []
        for i, cell in enumerate(cells):
            padded = cell.rjust(SIZES[i]) if i < len(SIZES) else cell
            parts.append(self._paint(padded, _DIM) if dim[i] else padded)
        return " | ".join(parts)

    def _write(self, line: str) -> None:
        self._out.write(line.rstrip() + "\n")
        self._out.flush()

    def header(self) -> None:
        self._write(self._paint(self._cells(HEADERS), _BOLD))
        self.separator()
        self._header_done = True

    def row(self, *cells: str) -> None:
        if not self._header_done:
            self.header()
        self._write(self._cells(cells))

    def placeholder(self, ts: datetime) -> None:
        if not self._header_done:
            self.header()
        self._write(
            self._cells(
                (ts.strftime(TIME_FORMAT), NO_DATA, NO_DATA, NO_DATA),
                dim=(False, True, True, True),
            )
        )

    def separator(self) -> None:
        widths = list(SIZES) + [len(HEADERS[-1])]
        self._write("-+-".join("-" * w for w in widths))
