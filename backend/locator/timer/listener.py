import queue
import signal
import sys
import threading
from typing import IO, Optional

from .progress import ProgressMonitor

_STOP = object()


class ProgressListener:
    """
    Prints a progress report of `monitor` whenever it is triggered.

    Reports are produced on a dedicated daemon thread; `trigger()` only posts a
    request, so it is safe to call from a signal handler and never blocks the
    pipeline.
    """

    def __init__(self, monitor: ProgressMonitor, output: IO = None):
        self.monitor = monitor
        self.output = output
        self._requests = queue.SimpleQueue()
        self._thread: Optional[threading.Thread] = None
        self._signum = None
        self._previous_handler = None

    def start(self) -> "ProgressListener":
        if self._thread is None:
            self._thread = threading.Thread(target=self._run, name="progress-listener", daemon=True)
            self._thread.start()
        return self

    def trigger(self):
        self._requests.put(None)

    def install(self, signum: int = None) -> "ProgressListener":
        """Start the listener and trigger a report on each `signum`, SIGUSR1 by default."""
        if signum is None:
            signum = signal.SIGUSR1
        self.start()
        self._signum = signum
        self._previous_handler = signal.signal(signum, self._handle_signal)
        return self

    def close(self, timeout: float = 1.0):
        if self._signum is not None:
            signal.signal(self._signum, self._previous_handler)
            self._signum = None
        if self._thread is not None:
            self._requests.put(_STOP)
            self._thread.join(timeout=timeout)
            self._thread = None

    def __enter__(self) -> "ProgressListener":
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _handle_signal(self, signum, frame):
        self.trigger()

    def _run(self):
        while True:
            request = self._requests.get()
            if request is _STOP:
                break
            output = self.output if self.output is not None else sys.stdout
            print(self.monitor.report(), file=output, flush=True)
