import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional


@dataclass
class TimePeriod:
    start:  float
    end:    Optional[float] = None      # unset while the timer is running

    @property
    def running(self) -> bool:
        return self.end is None or self.end <= self.start


class TimerRegistry:
    """
    Named timers for measuring the running time of pipeline phases.

    Starting a name that already exists overwrites its period. Entries live as
    long as the registry. Reads may come from another thread (progress reports)
    so every access goes through one lock.
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self.clock = clock
        self._timers: Dict[str, TimePeriod] = {}
        self._lock = threading.Lock()

    def start(self, name: str):
        with self._lock:
            self._timers[name] = TimePeriod(start=self.clock())

    def stop(self, name: str):
        with self._lock:
            period = self._timers.get(name)
            if period is None:
                raise KeyError(f"timer '{name}' was never started")
            period.end = self.clock()

    def duration(self, name: str) -> float:
        """Seconds between start and stop of a finished timer."""
        with self._lock:
            period = self._timers[name]
            if period.running:
                raise ValueError(f"timer '{name}' is still running")
            return period.end - period.start

    def elapsed(self, name: str) -> float:
        """
        Lap of the timer in seconds.

        Returns the duration if the timer has been stopped, otherwise the time
        since its start. An unknown timer has a lap of 0.
        """
        with self._lock:
            period = self._timers.get(name)
            if period is None:
                return 0.0
            if not period.running:
                return period.end - period.start
            return self.clock() - period.start

    def names(self):
        with self._lock:
            return list(self._timers)

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._timers

    def timer(self, name: str) -> "Timer":
        return Timer(self, name)


class Timer:
    """
    Scoped timer: starts on enter, stops on every exit from the block.

        with registry.timer("find"):
            ...
    """

    def __init__(self, registry: TimerRegistry, name: str):
        self.registry = registry
        self.name = name

    def __enter__(self) -> "Timer":
        self.registry.start(self.name)
        return self

    def __exit__(self, exc_type, exc, tb):
        self.registry.stop(self.name)
        return False

    @property
    def elapsed(self) -> float:
        return self.registry.elapsed(self.name)


def format_duration(seconds: float) -> str:
    return f"{seconds:.4f} seconds"
