"""
Advanced scheduling policies
- PS (Priority Scheduling, most IO operations first)
- SRT (Shortest Remaining Time)
"""

from typing import List, Optional

from ossim.core.scheduler_base import BaseScheduler, ProcessBucket
from ossim.schedulers.basic_schedulers import order_by_io_ascending


class PriorityScheduler(BaseScheduler):
    """
    Priority scheduler
    Processes with more Input/Output operations run first
    """

    def __init__(self, time_slice: Optional[int] = None):
        super().__init__("PS", time_slice)

    def order_buckets(self, buckets: List[ProcessBucket]) -> List[ProcessBucket]:
        # negated key keeps equal counts in arrival order
        return sorted(buckets, key=lambda b: -b.io_count)


class SRTScheduler(BaseScheduler):
    """
    SRT (Shortest Remaining Time) scheduler

    Without preemption the remaining time of every process is its full
    length, so this orders like SJF.
    """

    def __init__(self, time_slice: Optional[int] = None):
        super().__init__("SRT", time_slice)

    def order_buckets(self, buckets: List[ProcessBucket]) -> List[ProcessBucket]:
        return order_by_io_ascending(buckets)
