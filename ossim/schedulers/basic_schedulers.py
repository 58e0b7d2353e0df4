"""
Basic scheduling policies
- FIFO (arrival order)
- SJF (Shortest Job First, by IO operation count)
- Round Robin
"""

from typing import List, Optional

from ossim.core.scheduler_base import BaseScheduler, ProcessBucket


def order_by_io_ascending(buckets: List[ProcessBucket]) -> List[ProcessBucket]:
    """Fewest IO operations first; ties keep arrival order"""
    return sorted(buckets, key=lambda b: b.io_count)


class FIFOScheduler(BaseScheduler):
    """
    FIFO scheduler
    Runs processes in the order they arrived
    """

    def __init__(self, time_slice: Optional[int] = None):
        super().__init__("FIFO", time_slice)

    def order_buckets(self, buckets: List[ProcessBucket]) -> List[ProcessBucket]:
        return list(buckets)


class SJFScheduler(BaseScheduler):
    """
    SJF (Shortest Job First) scheduler
    A job's length is measured by its Input/Output operation count
    """

    def __init__(self, time_slice: Optional[int] = None):
        super().__init__("SJF", time_slice)

    def order_buckets(self, buckets: List[ProcessBucket]) -> List[ProcessBucket]:
        return order_by_io_ascending(buckets)


class RoundRobinScheduler(BaseScheduler):
    """
    Round Robin scheduler

    The quantum is carried as `time_slice` but processes are not preempted;
    the run order is ascending IO count like SJF.
    """

    def __init__(self, time_slice: Optional[int] = None):
        super().__init__("RR", time_slice)

    def order_buckets(self, buckets: List[ProcessBucket]) -> List[ProcessBucket]:
        return order_by_io_ascending(buckets)
