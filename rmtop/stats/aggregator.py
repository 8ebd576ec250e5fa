# rmtop/stats/aggregator.py
"""
Windowed command-frequency counter.

Two states per window:

  Accumulating (dirty=False) -- increments add to the current window.
  Rendered     (dirty=True)  -- the reporter consumed the window; the next
                                increment zeroes every count before counting.

The reset is lazy: it runs inside the same critical section as the first
increment of the new window, so no event is lost at a window boundary.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, List, Optional, Tuple


@dataclass
class CommandStat:
    name: str
    count: int = 0


@dataclass(frozen=True)
class Snapshot:
    """
    Window view handed to the reporter, safe to share across threads.

    stats are copies ordered by descending count, ties by first-seen order.
    """
    has_data: bool
    stats: Tuple[CommandStat, ...]
    taken_at: datetime

    @property
    def total(self) -> int:
        return sum(s.count for s in self.stats)


class FrequencyAggregator:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_name: Dict[str, CommandStat] = {}
        self._ordered: List[CommandStat] = []
        self._dirty = False
        self._has_data = False

    # ---------------- state ----------------
    @property
    def dirty(self) -> bool:
        with self._lock:
            return self._dirty

    @property
    def has_data(self) -> bool:
        with self._lock:
            return self._has_data

    def count(self, name: str) -> int:
        with self._lock:
            stat = self._by_name.get(name)
            return stat.count if stat else 0

    def stats(self) -> List[CommandStat]:
        """Copies in first-seen order."""
        with self._lock:
            return [replace(s) for s in self._ordered]

    # ---------------- write path ----------------
    def increment(self, name: str) -> None:
        with self._lock:
            if self._dirty:
                self._reset_locked()

            stat = self._by_name.get(name)
            if stat is None:
                stat = CommandStat(name=name)
                self._by_name[name] = stat
                self._ordered.append(stat)

            stat.count += 1
            self._has_data = True

    def reset_window(self) -> None:
        with self._lock:
            self._reset_locked()

    def _reset_locked(self) -> None:
        for stat in self._ordered:
            stat.count = 0
        self._has_data = False
        self._dirty = False

    # ---------------- read path ----------------
    def snapshot_and_mark_rendered(self, now: Optional[datetime] = None) -> Snapshot:
        """
        Return the current window and mark it rendered.

        A window already rendered with no increments since reports has_data=False.
        """
        with self._lock:
            has_data = self._has_data and not self._dirty
            # sorted() is stable: ties keep first-seen order
            ordered = sorted(self._ordered, key=lambda s: s.count, reverse=True)
            stats = tuple(replace(s) for s in ordered)
            if has_data:
                self._dirty = True

        return Snapshot(has_data=has_data, stats=stats, taken_at=now or datetime.now())
