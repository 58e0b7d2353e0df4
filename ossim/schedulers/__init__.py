"""
Scheduling policies
"""

from typing import Optional

from ossim.core.errors import UnknownPolicyError
from ossim.core.scheduler_base import BaseScheduler
from .basic_schedulers import FIFOScheduler, SJFScheduler, RoundRobinScheduler
from .advanced_schedulers import PriorityScheduler, SRTScheduler

# scheduling code -> scheduler class
ALGORITHMS = {
    'FIFO': FIFOScheduler,
    'PS': PriorityScheduler,
    'SJF': SJFScheduler,
    'RR': RoundRobinScheduler,
    'SRT': SRTScheduler,
}


def create_scheduler(code: str, quantum: Optional[int] = None) -> BaseScheduler:
    """
    Build the scheduler for a CPU scheduling code

    Raises:
        UnknownPolicyError: the code is not in ALGORITHMS
    """
    try:
        scheduler_class = ALGORITHMS[code]
    except KeyError:
        raise UnknownPolicyError(code) from None
    return scheduler_class(time_slice=quantum)


__all__ = [
    'ALGORITHMS',
    'create_scheduler',
    'FIFOScheduler',
    'SJFScheduler',
    'RoundRobinScheduler',
    'PriorityScheduler',
    'SRTScheduler'
]
