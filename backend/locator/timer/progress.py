"""
Progress state of a locate run.

The pipeline is the only writer of the counters; progress reports read them
from another thread through `snapshot()`.
"""

import threading
from dataclasses import dataclass
from typing import Optional

from ..constants.constants import LOCATE_TIMER
from .timer import Timer, TimerRegistry, format_duration


@dataclass(frozen=True)
class ProgressSnapshot:
    completed:      int
    total:          int
    occurrences:    int

    def percent(self) -> int:
        # nothing to do yet (e.g. seeds not generated)
        if self.total == 0:
            return 0
        return self.completed * 100 // self.total


class ProgressCounters:
    def __init__(self):
        self._lock = threading.Lock()
        self._completed = 0
        self._total = 0
        self._occurrences = 0

    def reset(self, total: int = 0):
        with self._lock:
            self._completed = 0
            self._total = total
            self._occurrences = 0

    def set_total(self, total: int):
        with self._lock:
            if total < self._completed:
                raise ValueError(f"total {total} is below completed count {self._completed}")
            self._total = total

    def advance(self, occurrences: int = 0):
        """Mark one unit as completed along with the occurrences it produced."""
        if occurrences < 0:
            raise ValueError("occurrence count cannot decrease")
        with self._lock:
            if self._completed >= self._total:
                raise ValueError(f"completed count would exceed total {self._total}")
            self._completed += 1
            self._occurrences += occurrences

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return ProgressSnapshot(
                completed=self._completed,
                total=self._total,
                occurrences=self._occurrences,
            )


class ProgressMonitor:
    """
    Timer registry plus progress counters of one run.

    Args:
    timers: registry to use, a fresh one by default
    counters: counters to use, fresh ones by default
    """

    def __init__(self, timers: Optional[TimerRegistry] = None, counters: Optional[ProgressCounters] = None):
        self.timers = timers if timers is not None else TimerRegistry()
        self.counters = counters if counters is not None else ProgressCounters()

    def start(self, name: str):
        self.timers.start(name)

    def stop(self, name: str):
        self.timers.stop(name)

    def elapsed(self, name: str) -> float:
        return self.timers.elapsed(name)

    def timer(self, name: str) -> Timer:
        return self.timers.timer(name)

    def snapshot(self) -> ProgressSnapshot:
        return self.counters.snapshot()

    def report(self) -> str:
        snap = self.snapshot()
        lap = self.elapsed(LOCATE_TIMER)
        return (f"Located {snap.completed} out of {snap.total} with {snap.occurrences} "
                f"occurrences in {format_duration(lap)}: {snap.percent()}% done.")
