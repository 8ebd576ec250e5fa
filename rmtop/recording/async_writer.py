# rmtop/recording/async_writer.py
from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from queue import Queue, Empty
from typing import Optional, Any, Callable, List


def append_lines(path: Path, batch: List[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        for line in batch:
            f.write(line + "\n")


class AsyncWriter:
    """
    Threaded, batched line writer.

    Items are queued by write() and flushed every flush_interval seconds
    (and on close) through write_func(path, batch).
    """

    def __init__(
        self,
        path: Path,
        write_func: Callable[[Path, List[Any]], None] = append_lines,
        flush_interval: float = 0.5,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._path = Path(path)
        self._write_func = write_func
        self._flush_interval = float(flush_interval)

        self._log = logger or logging.getLogger(__name__)

        self._queue: Queue[Any] = Queue()
        self._stop_event = threading.Event()

        self._thread = threading.Thread(target=self._worker, daemon=True, name="rmtop-writer")
        self._thread.start()

    # ---------------- Public API ----------------
    def write(self, item: Any) -> None:
        """Queue an item for writing (no-op after close())."""
        if self._stop_event.is_set():
            return
        self._queue.put(item)

    def close(self) -> None:
        """Flush remaining items and stop the writer thread."""
        if self._stop_event.is_set():
            return
        self._stop_event.set()
        self._thread.join(timeout=None)

    # ---------------- Internal ----------------
    def _worker(self) -> None:
        batch: List[Any] = []
        last_flush = time.time()

        while not self._stop_event.is_set() or not self._queue.empty():
            try:
                item = self._queue.get(timeout=0.1)
                batch.append(item)
            except Empty:
                pass

            now = time.time()
            if batch and (now - last_flush >= self._flush_interval or self._stop_event.is_set()):
                self._flush_safe(batch)
                batch.clear()
                last_flush = now

        if batch:
            self._flush_safe(batch)

    def _flush_safe(self, batch: List[Any]) -> None:
        """Flush with exception safety (never kill the worker thread)."""
        try:
            self._write_func(self._path, batch)
        except Exception:
            # drop this batch, keep the thread alive
            self._log.exception("ASYNC_WRITER_FLUSH_FAILED path=%s batch_len=%d", self._path, len(batch))
