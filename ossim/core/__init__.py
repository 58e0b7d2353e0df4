"""
Core modules for the operation-replay OS simulator
"""

from .errors import (SimulationError, UnknownPolicyError, OperationBeforeProcessStartError,
                     DeviceCountZeroError, ProcessStateError, ConfigFormatError,
                     MetaDataFormatError)
from .operation import Operation, OperationKind, DeviceClass
from .config import Configuration, LogTarget
from .process import PCB, ProcessState
from .devices import DeviceRegistry
from .timer import Timer, wait_time
from .io_sim import IOSimulator
from .sync import OperationQueue
from .scheduler_base import BaseScheduler, ScheduleResult, ProcessBucket
from .engine import ExecutionEngine, SimulationLog, TimelineEntry
from .arrival import ArrivalFeed

__all__ = [
    'SimulationError',
    'UnknownPolicyError',
    'OperationBeforeProcessStartError',
    'DeviceCountZeroError',
    'ProcessStateError',
    'ConfigFormatError',
    'MetaDataFormatError',
    'Operation',
    'OperationKind',
    'DeviceClass',
    'Configuration',
    'LogTarget',
    'PCB',
    'ProcessState',
    'DeviceRegistry',
    'Timer',
    'wait_time',
    'IOSimulator',
    'OperationQueue',
    'BaseScheduler',
    'ScheduleResult',
    'ProcessBucket',
    'ExecutionEngine',
    'SimulationLog',
    'TimelineEntry',
    'ArrivalFeed'
]
