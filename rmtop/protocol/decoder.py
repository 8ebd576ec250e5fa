# rmtop/protocol/decoder.py
"""
Decoder for MONITOR feed lines.

Line layout (one executed command per line):

    1339518083.107412 [0 127.0.0.1:60866] "HSET" "user:1" "name" "bob"

The command name is the first quoted token after the bracketed
``[<db> <client-addr>]`` prefix; the remaining quoted tokens are the arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

ARG_SEPARATOR = '" "'


@dataclass(frozen=True, slots=True)
class CommandEvent:
    name: str
    args: Tuple[str, ...] = ()

    @property
    def key(self) -> str | None:
        return self.args[0] if self.args else None


def _name_bounds(line: str) -> tuple[int, int] | None:
    start = line.find("]")
    if start < 0:
        return None

    # skip `] "`
    start += 3
    end = line.find('"', start)
    if end < 0:
        return None
    return start, end


def extract_command_name(line: str) -> str:
    """Return the command name of a monitor line, or "" if the line has none."""
    bounds = _name_bounds(line)
    if bounds is None:
        return ""
    start, end = bounds
    return line[start:end]


def split_args(rest: str) -> Tuple[str, ...]:
    """Split the `"a" "b" "c"` tail of a line into unquoted tokens."""
    rest = rest.strip()
    if not rest:
        return ()

    if rest.startswith('"'):
        rest = rest[1:]
    if rest.endswith('"'):
        rest = rest[:-1]
    return tuple(rest.split(ARG_SEPARATOR))


def decode_line(line: str) -> CommandEvent:
    """
    Decode one monitor line into a CommandEvent.

    Lines without the bracketed prefix decode to an event with an empty name.
    """
    bounds = _name_bounds(line)
    if bounds is None:
        return CommandEvent(name="")

    start, end = bounds
    return CommandEvent(name=line[start:end], args=split_args(line[end + 1:]))
