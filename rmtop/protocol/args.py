# rmtop/protocol/args.py
"""
Argument decoders: regroup a flat positional argument list into records
according to a command's fixed arity pattern.

All decoders are pure and never raise on malformed input; tokens that do not
complete a group are dropped and reported through ``DecodeResult.dropped``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Sequence, Tuple, Union


@dataclass(frozen=True, slots=True)
class KeyValueRecord:
    key: str
    value: str


@dataclass(frozen=True, slots=True)
class GeoRecord:
    # kept as text so the source precision is preserved
    longitude: str
    latitude: str
    member: str


@dataclass(frozen=True, slots=True)
class ArgsRecord:
    values: Tuple[str, ...]


Record = Union[KeyValueRecord, GeoRecord, ArgsRecord]


@dataclass(frozen=True, slots=True)
class DecodeResult:
    records: Tuple[Record, ...]
    dropped: int = 0

    @property
    def anomaly(self) -> bool:
        return self.dropped > 0


def decode_pairs(values: Sequence[str]) -> DecodeResult:
    """(values[2i], values[2i+1]) -> KeyValueRecord; an odd trailing token is dropped."""
    n = len(values) // 2
    records = tuple(KeyValueRecord(key=values[2 * i], value=values[2 * i + 1]) for i in range(n))
    return DecodeResult(records=records, dropped=len(values) - 2 * n)


def decode_geo(values: Sequence[str]) -> DecodeResult:
    """Consecutive (longitude, latitude, member) triples; remainder tokens are dropped."""
    n = len(values) // 3
    records = tuple(
        GeoRecord(longitude=values[3 * i], latitude=values[3 * i + 1], member=values[3 * i + 2])
        for i in range(n)
    )
    return DecodeResult(records=records, dropped=len(values) - 3 * n)


def decode_args(values: Sequence[str]) -> DecodeResult:
    """Forward the arguments unchanged as a single record."""
    return DecodeResult(records=(ArgsRecord(values=tuple(values)),))


DECODERS: Dict[str, Callable[[Sequence[str]], DecodeResult]] = {
    "pairs": decode_pairs,
    "geo": decode_geo,
    "raw": decode_args,
}


def record_as_dict(record: Record) -> Dict[str, Any]:
    d = asdict(record)
    if isinstance(record, ArgsRecord):
        d["values"] = list(record.values)
    return d
