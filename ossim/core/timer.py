"""
Shared countdown timer driven by a background thread
"""

import logging
import math
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def wait_time(msec: float, clock: Clock = time.monotonic):
    """Sleep until `msec` milliseconds have passed on a monotonic clock"""
    deadline = clock() + msec / 1000
    remaining = deadline - clock()
    while remaining > 0:
        time.sleep(remaining)
        remaining = deadline - clock()


class Timer:
    """
    Countdown cell shared between the engine and one timer thread

    The engine arms a countdown and blocks in `countdown()`; the timer thread
    waits out the deadline, records the instant it expired, and drives the
    countdown negative, which is the completion sentinel.

    Args:
        clock: monotonic clock used for deadlines and the completion instant
    """

    def __init__(self, clock: Clock = time.monotonic):
        self.clock = clock
        self._cond = threading.Condition()
        self._countdown = -1
        self._deadline: Optional[float] = None
        self._running = False
        self._completion_instant: Optional[float] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def countdown(self) -> int:
        """Milliseconds left on the armed countdown, negative once completed"""
        with self._cond:
            if self._countdown > 0 and self._deadline is not None:
                return max(0, math.ceil((self._deadline - self.clock()) * 1000))
            return self._countdown

    @property
    def completion_instant(self) -> Optional[float]:
        return self._completion_instant

    def start(self):
        if self._thread is not None:
            raise RuntimeError("timer already started")
        self._running = True
        self._thread = threading.Thread(target=self._loop, name="sim-timer", daemon=True)
        self._thread.start()
        logger.debug("timer thread started")

    def stop(self):
        """Stop the timer thread and wait for it to exit"""
        with self._cond:
            self._running = False
            self._cond.notify_all()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        logger.debug("timer thread stopped")

    def countdown_ms(self, msec: int) -> float:
        """
        Arm the countdown and block until it expires

        Args:
            msec: countdown length in milliseconds

        Returns:
            clock value recorded by the timer thread when the countdown hit zero
        """
        if not self._running:
            raise RuntimeError("timer is not running")
        with self._cond:
            self._completion_instant = None
            self._deadline = None
            self._countdown = msec
            self._cond.notify_all()
            self._cond.wait_for(lambda: self._countdown < 0 or not self._running)
            if self._countdown >= 0:
                raise RuntimeError("timer stopped before the countdown completed")
            return self._completion_instant

    def _loop(self):
        with self._cond:
            while self._running:
                if self._countdown > 0:
                    if self._deadline is None:
                        self._deadline = self.clock() + self._countdown / 1000
                    remaining = self._deadline - self.clock()
                    if remaining > 0:
                        self._cond.wait(remaining)
                    else:
                        self._countdown = 0
                elif self._countdown == 0:
                    self._completion_instant = self.clock()
                    self._countdown = -1
                    self._deadline = None
                    self._cond.notify_all()
                else:
                    self._cond.wait()
