# rmtop/app/sinks.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from rmtop.interfaces.record_sink import DecodedBatch, RecordSink
from rmtop.recording.async_writer import AsyncWriter


RECORDS_LOGGER = "rmtop.records"


class LoggingRecordSink(RecordSink):
    """Emit each decoded batch as one structured log line."""

    def __init__(self, logger: Optional[logging.Logger] = None, *, level: int = logging.INFO):
        self._log = logger or logging.getLogger(RECORDS_LOGGER)
        self._level = level

    def on_batch(self, batch: DecodedBatch) -> None:
        if not self._log.isEnabledFor(self._level):
            return
        d = batch.as_dict()
        self._log.log(
            self._level,
            "RECORDS cmd=%s key=%s kind=%s records=%s",
            batch.command,
            batch.key,
            batch.kind,
            json.dumps(d["records"], ensure_ascii=False),
        )

    def close(self) -> None:
        return None


@dataclass
class JsonlRecordSink(RecordSink):
    """Append one JSON object per batch to file_path through a batched writer thread."""

    file_path: Path
    flush_interval_s: float = 0.5
    logger: Optional[logging.Logger] = None

    def __post_init__(self) -> None:
        self.file_path = Path(self.file_path)
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        self._writer: Optional[AsyncWriter] = AsyncWriter(
            path=self.file_path,
            flush_interval=self.flush_interval_s,
            logger=self.logger,
        )

    def on_batch(self, batch: DecodedBatch) -> None:
        if self._writer is None:
            return

        if batch.ts_utc is None:
            batch = replace(batch, ts_utc=datetime.now(timezone.utc).isoformat())

        self._writer.write(json.dumps(batch.as_dict(), ensure_ascii=False))

    def close(self) -> None:
        if self._writer is not None:
            self._writer.close()
            self._writer = None
