"""
Thread-safe operation queue shared by the engine and the arrival feed
"""

import threading
from collections import deque
from typing import Deque, Iterable, Iterator, Optional

from .operation import Operation


class OperationQueue:
    """
    FIFO of operations with producer/consumer semantics

    Producers append while the engine drains. `get()` blocks until an
    operation is available or the queue is closed and empty.
    """

    def __init__(self, operations: Iterable[Operation] = ()):
        self._items: Deque[Operation] = deque(operations)
        self._cond = threading.Condition()
        self._closed = False

    def append(self, operation: Operation):
        self.extend([operation])

    def extend(self, operations: Iterable[Operation]):
        with self._cond:
            if self._closed:
                raise RuntimeError("cannot add operations to a closed queue")
            self._items.extend(operations)
            self._cond.notify_all()

    def close(self):
        """Mark that no more operations will be added"""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, timeout: Optional[float] = None) -> Optional[Operation]:
        """
        Remove and return the next operation

        Returns:
            the operation, or None once the queue is closed and drained
            (or the timeout elapsed)
        """
        with self._cond:
            self._cond.wait_for(lambda: self._items or self._closed, timeout)
            if self._items:
                return self._items.popleft()
            return None

    def drain(self) -> Iterator[Operation]:
        """Yield operations in order until the queue is closed and empty"""
        while True:
            operation = self.get()
            if operation is None:
                return
            yield operation

    def __len__(self):
        with self._cond:
            return len(self._items)
