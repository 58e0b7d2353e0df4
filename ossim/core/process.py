"""
Process control block (PCB) and process state machine
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from .errors import ProcessStateError


class ProcessState(Enum):
    """Process states"""
    START = "Start"
    READY = "Ready"
    RUNNING = "Running"
    WAITING = "Waiting"
    EXIT = "Exit"


TRANSITIONS: Dict[ProcessState, FrozenSet[ProcessState]] = {
    ProcessState.START: frozenset({ProcessState.READY}),
    ProcessState.READY: frozenset({ProcessState.RUNNING}),
    ProcessState.RUNNING: frozenset({ProcessState.WAITING, ProcessState.EXIT}),
    ProcessState.WAITING: frozenset({ProcessState.RUNNING}),
    ProcessState.EXIT: frozenset(),
}


class PCB:
    """
    Process control block

    Tracks one process's state and the simulated instants it moved between
    states. `ordinal` is the arrival-order display number, not the position
    the scheduler gave it.
    """

    def __init__(self, ordinal: int, position: int):
        """
        Args:
            ordinal: 1-based arrival-order number used in every log line
            position: 0-based position in the scheduled run order
        """
        self.ordinal = ordinal
        self.position = position
        self.state = ProcessState.START
        self.history: List[Tuple[ProcessState, float]] = []

        self.start_time: Optional[float] = None
        self.finish_time: Optional[float] = None
        self.operations_run = 0
        self.io_operations = 0

    def transition(self, new_state: ProcessState, at: Optional[float] = None):
        """Move to `new_state`, rejecting moves the state machine does not allow"""
        if new_state not in TRANSITIONS[self.state]:
            raise ProcessStateError(
                f"process {self.ordinal}: {self.state.value} -> {new_state.value} is not allowed")
        self.state = new_state
        if at is not None:
            self.history.append((new_state, at))
            if new_state == ProcessState.RUNNING and self.start_time is None:
                self.start_time = at
            elif new_state == ProcessState.EXIT:
                self.finish_time = at

    @property
    def is_active(self) -> bool:
        return self.state not in (ProcessState.START, ProcessState.EXIT)

    @property
    def turnaround_time(self) -> Optional[float]:
        if self.start_time is None or self.finish_time is None:
            return None
        return self.finish_time - self.start_time

    def __repr__(self):
        return f"P{self.ordinal}[{self.state.value}]"

    def __str__(self):
        return f"Process {self.ordinal}: State={self.state.value}, Operations={self.operations_run}"
