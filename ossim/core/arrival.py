"""
Arrival feed: appends newly arriving operations to the live queue
"""

import logging
import threading
from typing import Callable, Iterable, List, Optional

from .operation import META_DATA_END, META_DATA_START, Operation
from .sync import OperationQueue
from .timer import wait_time

logger = logging.getLogger(__name__)


class ArrivalFeed:
    """
    Background producer for mid-run process arrivals

    Each round reads the next meta-data line from `source`, parses it and
    appends the operations to the queue, then waits `interval_ms`. The feed
    closes the queue when it exits, so the engine knows when to stop.

    Args:
        source: iterable of meta-data text lines (an open file works)
        queue: live queue the engine is draining
        parse_line: turns one meta-data line into operations
        rounds: maximum number of lines to read
        interval_ms: pause between rounds
    """

    def __init__(self, source: Iterable[str], queue: OperationQueue,
                 parse_line: Callable[[str, Optional[int]], List[Operation]],
                 rounds: int = 10, interval_ms: int = 100):
        self.source = iter(source)
        self.queue = queue
        self.parse_line = parse_line
        self.rounds = rounds
        self.interval_ms = interval_ms

        self.arrived: List[Operation] = []
        self.rounds_done = 0
        self.exhausted = False
        self.error: Optional[Exception] = None
        self._line_no = 0
        self._thread: Optional[threading.Thread] = None

    def _next_line(self) -> Optional[str]:
        """Next meaningful line, or None once the source runs out"""
        for raw in self.source:
            self._line_no += 1
            line = raw.strip()
            if not line or line == META_DATA_START:
                continue
            if line == META_DATA_END:
                return None
            return line
        return None

    def run(self):
        try:
            for _ in range(self.rounds):
                line = self._next_line()
                if line is None:
                    self.exhausted = True
                    logger.info("arrival feed exhausted after %d of %d rounds",
                                self.rounds_done, self.rounds)
                    break
                operations = self.parse_line(line, self._line_no)
                self.queue.extend(operations)
                self.arrived.extend(operations)
                self.rounds_done += 1
                logger.debug("arrival round %d: %d operations", self.rounds_done, len(operations))
                wait_time(self.interval_ms)
        except Exception as e:
            self.error = e
            logger.error("arrival feed stopped: %s", e)
        finally:
            self.queue.close()

    def start(self):
        self._thread = threading.Thread(target=self.run, name="arrival-feed", daemon=True)
        self._thread.start()

    def join(self, timeout: Optional[float] = None):
        if self._thread is not None:
            self._thread.join(timeout)

    @property
    def alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
