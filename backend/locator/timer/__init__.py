from .timer import TimePeriod, Timer, TimerRegistry
from .progress import ProgressCounters, ProgressMonitor, ProgressSnapshot
from .listener import ProgressListener

__all__ = [
    "TimePeriod",
    "Timer",
    "TimerRegistry",
    "ProgressCounters",
    "ProgressMonitor",
    "ProgressSnapshot",
    "ProgressListener",
]
