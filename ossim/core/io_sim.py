"""
IO simulator: one short-lived thread per Input/Output operation
"""

import logging
import threading

from .timer import wait_time

logger = logging.getLogger(__name__)


class IOSimulator:
    """
    Runs simulated device transfers on worker threads

    Every IO task takes the same lock for the length of its transfer, so
    overlapping tasks would still serialise. The engine joins each task
    before moving on, which keeps one task in flight at a time.
    """

    def __init__(self):
        self.lock = threading.Lock()
        self._count_lock = threading.Lock()
        self.in_flight = 0
        self.completed = 0

    def _io_task(self, duration_ms: int):
        with self._count_lock:
            self.in_flight += 1
        try:
            with self.lock:
                wait_time(duration_ms)
        finally:
            with self._count_lock:
                self.in_flight -= 1
                self.completed += 1

    def spawn(self, duration_ms: int, name: str = "io-sim") -> threading.Thread:
        thread = threading.Thread(target=self._io_task, args=(duration_ms,), name=name, daemon=True)
        thread.start()
        return thread

    def run(self, duration_ms: int, name: str = "io-sim"):
        """Spawn one IO task and block until it finishes"""
        logger.debug("io task %s for %d ms", name, duration_ms)
        self.spawn(duration_ms, name).join()
