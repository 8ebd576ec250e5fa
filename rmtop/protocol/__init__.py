# protocol/__init__.py

from .decoder import CommandEvent, decode_line, extract_command_name
from .args import KeyValueRecord, GeoRecord, ArgsRecord, DecodeResult, decode_pairs, decode_geo
from .lines import LineReader, is_ack, is_error
from .loader import CommandTable, CommandSpec, DecodedCommand

__all__ = [
    "CommandEvent", "decode_line", "extract_command_name",
    "KeyValueRecord", "GeoRecord", "ArgsRecord", "DecodeResult",
    "decode_pairs", "decode_geo",
    "LineReader", "is_ack", "is_error",
    "CommandTable", "CommandSpec", "DecodedCommand",
]
