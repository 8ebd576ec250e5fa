# rmtop/stats/reporter.py
from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from .aggregator import FrequencyAggregator, Snapshot
from .render import TableRenderer, TIME_FORMAT, pretty_num


def format_rate(f: float) -> float:
    """Round a per-second rate for display only."""
    if f > 500:
        return float(round(f, 0))
    if f > 50:
        return round(f, 1)
    if f > 0.3:
        return round(f, 2)
    return f


class IntervalReporter(threading.Thread):
    """
    Thread that wakes every tick_s and renders the aggregator window once
    interval_s has elapsed since the previous render.
    """

    def __init__(
        self,
        aggregator: FrequencyAggregator,
        renderer: TableRenderer,
        *,
        interval_s: float = 60.0,
        tick_s: float = 0.25,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(daemon=True, name="rmtop-reporter")
        self.aggregator = aggregator
        self.renderer = renderer
        self.interval_s = float(interval_s)
        self.tick_s = float(tick_s)
        self._clock = clock
        self._log = logger or logging.getLogger(__name__)
        self._stop_event = threading.Event()
        self._last = clock()
        self.renders = 0

    def run(self) -> None:
        self._log.info("REPORTER_STARTED interval_s=%s tick_s=%s", self.interval_s, self.tick_s)
        while not self._stop_event.wait(self.tick_s):
            try:
                self.tick()
            except Exception:
                self._log.exception("REPORTER_TICK_FAILED")

    def stop(self) -> None:
        self._stop_event.set()

    def tick(self) -> bool:
        """Render if the interval elapsed. Returns True when a render happened."""
        now = self._clock()
        if now - self._last < self.interval_s:
            return False

        self.render(self.aggregator.snapshot_and_mark_rendered())
        self._last = self._clock()
        return True

    def render(self, snap: Snapshot) -> None:
        self.renders += 1

        if not snap.has_data:
            self.renderer.placeholder(snap.taken_at)
            self.renderer.separator()
            self._log.debug("REPORT_EMPTY")
            return

        stamp = snap.taken_at.strftime(TIME_FORMAT)
        for i, stat in enumerate(snap.stats):
            if stat.count == 0:
                break
            rate = format_rate(stat.count / self.interval_s)
            self.renderer.row(
                stamp if i == 0 else " ",
                pretty_num(stat.count),
                pretty_num(rate),
                stat.name.upper(),
            )

        self.renderer.separator()
        self._log.debug("REPORT_RENDERED commands=%d total=%d", len(snap.stats), snap.total)
