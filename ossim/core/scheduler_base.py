"""
Scheduler framework: process buckets, IO counting and stable reordering
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .operation import Operation, OperationKind

logger = logging.getLogger(__name__)


@dataclass
class ProcessBucket:
    """Operations of one process, from its A{begin} to its A{finish}"""
    ordinal: int
    operations: List[Operation] = field(default_factory=list)

    @property
    def io_count(self) -> int:
        return sum(1 for op in self.operations if op.is_io)


@dataclass
class ScheduleResult:
    """
    Reordered run plus the identity map

    identity[i] is the original arrival ordinal of the i-th scheduled process.
    """
    operations: List[Operation]
    identity: List[int]
    algorithm: str = ""


def partition(operations: List[Operation]) -> Tuple[List[Operation], List[ProcessBucket], List[Operation]]:
    """
    Split a run into prefix, per-process buckets and trailer

    Operations that sit between one A{finish} and the next A{begin} travel
    with the following bucket.

    Returns:
        (prefix, buckets, trailer)
    """
    prefix: List[Operation] = []
    buckets: List[ProcessBucket] = []
    pending: List[Operation] = []
    current: Optional[ProcessBucket] = None

    for op in operations:
        is_app = op.kind == OperationKind.APPLICATION
        if current is None:
            if is_app and op.is_begin:
                current = ProcessBucket(ordinal=len(buckets) + 1, operations=pending + [op])
                pending = []
            elif buckets:
                pending.append(op)
            else:
                prefix.append(op)
            continue

        current.operations.append(op)
        if is_app and not op.is_begin:
            buckets.append(current)
            current = None

    if current is not None:
        # unterminated process still counts as a bucket
        buckets.append(current)
    return prefix, buckets, pending


class BaseScheduler:
    """
    Base scheduler

    Subclasses choose the ordering by overriding `order_buckets`.
    """

    def __init__(self, name: str = "Base Scheduler", time_slice: Optional[int] = None):
        self.name = name
        # accepted for preemptive policies, never enforced
        self.time_slice = time_slice

    def order_buckets(self, buckets: List[ProcessBucket]) -> List[ProcessBucket]:
        """
        Return buckets in run order (implemented by subclasses)

        Must be stable: buckets with equal keys keep arrival order.
        """
        raise NotImplementedError("Subclasses must implement order_buckets()")

    def schedule(self, operations: List[Operation]) -> ScheduleResult:
        """
        Reorder a validated run

        Args:
            operations: operations in arrival order

        Returns:
            ScheduleResult with the reordered operations and identity map
        """
        prefix, buckets, trailer = partition(list(operations))
        ordered = self.order_buckets(buckets)

        reordered = list(prefix)
        for bucket in ordered:
            reordered.extend(bucket.operations)
        reordered.extend(trailer)

        identity = [bucket.ordinal for bucket in ordered]
        logger.debug("%s: run order %s (io counts %s)", self.name, identity,
                     [bucket.io_count for bucket in ordered])
        return ScheduleResult(operations=reordered, identity=identity, algorithm=self.name)

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"
