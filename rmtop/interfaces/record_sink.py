from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Tuple

from rmtop.protocol.args import Record, record_as_dict


@dataclass(frozen=True, slots=True)
class DecodedBatch:
    """
    Structured records decoded from one monitor line.
    """
    command: str                # e.g. "HSET"
    key: Optional[str]
    kind: str                   # "pairs" | "geo" | "raw"
    records: Tuple[Record, ...]
    dropped: int = 0            # trailing tokens that did not complete a record
    ts_utc: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        out = {
            "command": self.command,
            "key": self.key,
            "kind": self.kind,
            "records": [record_as_dict(r) for r in self.records],
            "dropped": self.dropped or None,
            "ts_utc": self.ts_utc,
        }
        return {k: v for k, v in out.items() if v is not None}


class RecordSink(Protocol):
    def on_batch(self, batch: DecodedBatch) -> None: ...
    def close(self) -> None: ...
