# rmtop/runtime/dispatcher.py
from __future__ import annotations

import logging
import threading
from queue import Queue, Empty
from typing import List, Optional

from rmtop.interfaces.record_sink import DecodedBatch, RecordSink
from rmtop.protocol.decoder import CommandEvent
from rmtop.protocol.loader import CommandTable


class DecodeDispatcher:
    """
    Fire-and-forget argument decoding off the ingestion path.

    submit() only enqueues; worker threads run the command table decoders and
    fan the resulting batch out to every sink. Completion order across lines
    is not guaranteed when more than one worker runs.
    """

    def __init__(
        self,
        table: CommandTable,
        sinks: Optional[List[RecordSink]] = None,
        *,
        workers: int = 1,
        logger: Optional[logging.Logger] = None,
    ):
        if workers < 1:
            raise ValueError("workers must be >= 1")

        self.table = table
        self._sinks: List[RecordSink] = list(sinks or [])
        self._log = logger or logging.getLogger(__name__)

        self._queue: Queue[CommandEvent] = Queue()
        self._stop_event = threading.Event()
        self._lock = threading.Lock()

        self.decoded = 0
        self.ignored = 0
        self.anomalies = 0

        self._threads = [
            threading.Thread(target=self._worker, daemon=True, name=f"rmtop-decode-{i}")
            for i in range(workers)
        ]
        for t in self._threads:
            t.start()

    # ---------------- Public API ----------------
    def submit(self, event: CommandEvent) -> None:
        """Queue an event for decoding (no-op after close())."""
        if self._stop_event.is_set():
            return
        self._queue.put(event)

    def pending(self) -> int:
        return self._queue.qsize()

    def join(self) -> None:
        """Block until every submitted event has been processed."""
        self._queue.join()

    def close(self) -> None:
        """Drain queued events, stop workers and close sinks."""
        if self._stop_event.is_set():
            return
        self._stop_event.set()
        for t in self._threads:
            t.join(timeout=None)

        for s in list(self._sinks):
            try:
                s.close()
            except Exception:
                self._log.exception("SINK_CLOSE_ERROR")

        self._log.info(
            "DECODE_DISPATCHER_CLOSED decoded=%d ignored=%d anomalies=%d",
            self.decoded,
            self.ignored,
            self.anomalies,
        )

    # ---------------- Internal ----------------
    def _worker(self) -> None:
        while not self._stop_event.is_set() or not self._queue.empty():
            try:
                event = self._queue.get(timeout=0.1)
            except Empty:
                continue

            try:
                self.dispatch(event)
            except Exception:
                self._log.exception("DECODE_FAILED cmd=%s", event.name)
            finally:
                self._queue.task_done()

    def dispatch(self, event: CommandEvent) -> Optional[DecodedBatch]:
        """Decode one event synchronously and hand the batch to the sinks."""
        decoded = self.table.decode(event)
        if decoded is None:
            with self._lock:
                self.ignored += 1
            return None

        result = decoded.result
        with self._lock:
            self.decoded += 1
            if result.anomaly:
                self.anomalies += 1

        if result.anomaly:
            self._log.debug(
                "ARGS_DECODE_ANOMALY cmd=%s key=%s dropped=%d",
                event.name,
                decoded.key,
                result.dropped,
            )

        batch = DecodedBatch(
            command=event.name,
            key=decoded.key,
            kind=decoded.spec.decoder,
            records=result.records,
            dropped=result.dropped,
        )

        for s in list(self._sinks):
            try:
                s.on_batch(batch)
            except Exception:
                self._log.exception("SINK_ON_BATCH_ERROR cmd=%s", event.name)

        return batch
