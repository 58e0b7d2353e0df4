"""
Execution engine: dispatches operations, drives simulated time and writes
the timestamped simulation log
"""

import logging
import time
from dataclasses import dataclass
from typing import Dict, IO, Iterable, List, Optional, Sequence, Union

from .config import Configuration
from .devices import DeviceRegistry
from .errors import OperationBeforeProcessStartError
from .io_sim import IOSimulator
from .operation import DeviceClass, Operation, OperationKind
from .process import PCB, ProcessState
from .sync import OperationQueue
from .timer import Clock, Timer

logger = logging.getLogger(__name__)

# multi-unit devices and the name used for their unit index in the log
UNIT_NAMES = {DeviceClass.HARD_DRIVE: "HDD", DeviceClass.PROJECTOR: "PROJ"}


@dataclass
class TimelineEntry:
    """One timed operation span, in elapsed seconds"""
    ordinal: int
    start_time: float
    end_time: float
    kind: OperationKind
    label: str
    state: ProcessState  # Running for CPU/memory work, Waiting for IO

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


class SimulationLog:
    """
    Writes identical log lines to every sink

    Lines are formatted once and written to each sink in the same call, so
    sinks can only differ in where they end up, never in content.
    """

    def __init__(self, sinks: Iterable[IO[str]] = ()):
        self.sinks = list(sinks)
        self.event_log: List[str] = []

    def write(self, elapsed: float, message: str) -> str:
        line = f"{elapsed:.6f} - {message}"
        self.event_log.append(line)
        self.write_raw(line + "\n")
        return line

    def write_raw(self, text: str):
        """Write pre-formatted text to every sink without recording it"""
        for sink in self.sinks:
            sink.write(text)
            sink.flush()


class ExecutionEngine:
    """
    Single-threaded dispatcher for a scheduled run

    Consumes operations strictly in queue order. The engine is the only
    writer of device-registry state and of the timer's countdown.
    """

    def __init__(self, config: Configuration, identity: Sequence[int] = (),
                 sinks: Iterable[IO[str]] = (), clock: Clock = time.monotonic,
                 algorithm: str = ""):
        """
        Args:
            config: validated configuration
            identity: scheduled position -> original process ordinal
            sinks: text streams that receive the log
            clock: monotonic clock shared with the timer
            algorithm: scheduler name reported in the results
        """
        self.config = config
        self.identity = list(identity)
        self.algorithm = algorithm or config.scheduling_code
        self.clock = clock

        self.devices = DeviceRegistry(config)
        self.timer = Timer(clock)
        self.io = IOSimulator()
        self.log = SimulationLog(sinks)

        self.reference: Optional[float] = None
        self.process_counter = -1
        self.pcb: Optional[PCB] = None
        self.processes: List[PCB] = []
        self.timeline: List[TimelineEntry] = []
        self.operations_run = 0

        self._handlers = {
            OperationKind.SYSTEM: self._run_system,
            OperationKind.APPLICATION: self._run_application,
            OperationKind.PROCESS: self._run_process,
            OperationKind.MEMORY: self._run_memory,
            OperationKind.INPUT: self._run_io,
            OperationKind.OUTPUT: self._run_io,
        }

    # ------------------------------------------------------------------
    # time and logging helpers

    def elapsed(self, instant: Optional[float] = None) -> float:
        """Seconds since the reference instant"""
        if instant is None:
            instant = self.clock()
        return instant - self.reference

    def log_event(self, message: str, instant: Optional[float] = None) -> float:
        """Write one log line stamped at `instant` (now if omitted)"""
        stamp = self.elapsed(instant)
        self.log.write(stamp, message)
        return stamp

    def resolve_ordinal(self, position: int) -> int:
        """Display number of the process at a scheduled position"""
        if position < len(self.identity):
            return self.identity[position]
        # arrived after scheduling, numbered after the scheduled ones
        return position + 1

    def _require_process(self, operation: Operation) -> PCB:
        if self.pcb is None or not self.pcb.is_active:
            raise OperationBeforeProcessStartError(operation)
        return self.pcb

    def _add_timeline(self, pcb: PCB, operation: Operation, start: float, end: float,
                      state: ProcessState = ProcessState.RUNNING):
        self.timeline.append(TimelineEntry(pcb.ordinal, start, end, operation.kind,
                                           operation.label, state))

    # ------------------------------------------------------------------
    # operation handlers

    def _run_system(self, operation: Operation):
        if operation.is_begin:
            self.log_event("Simulator program starting")
        else:
            self.log_event("Simulator program ending")

    def _run_application(self, operation: Operation):
        if operation.is_begin:
            if self.pcb is not None and self.pcb.is_active:
                logger.warning("process %d never finished before the next A{begin}", self.pcb.ordinal)

            self.process_counter += 1
            pcb = PCB(self.resolve_ordinal(self.process_counter), self.process_counter)
            self.pcb = pcb
            self.processes.append(pcb)

            stamp = self.log_event(f"OS: preparing process {pcb.ordinal}")
            pcb.transition(ProcessState.READY, stamp)
            stamp = self.log_event(f"OS: starting process {pcb.ordinal}")
            pcb.transition(ProcessState.RUNNING, stamp)
        else:
            pcb = self._require_process(operation)
            stamp = self.log_event(f"OS: removing process {pcb.ordinal}")
            pcb.transition(ProcessState.EXIT, stamp)

    def _run_process(self, operation: Operation):
        pcb = self._require_process(operation)
        start = self.log_event(f"Process {pcb.ordinal}: start processing action")
        done = self.timer.countdown_ms(self.devices.device_time(operation))
        end = self.log_event(f"Process {pcb.ordinal}: end processing action", done)
        self._add_timeline(pcb, operation, start, end)

    def _run_memory(self, operation: Operation):
        pcb = self._require_process(operation)
        if operation.label == "allocate":
            start = self.log_event(f"Process {pcb.ordinal}: allocating memory")
            done = self.timer.countdown_ms(self.devices.device_time(operation))
            address = self.devices.allocate_memory()
            end = self.log_event(f"Process {pcb.ordinal}: memory allocated at 0x{address:08x}", done)
        else:
            start = self.log_event(f"Process {pcb.ordinal}: start memory blocking")
            self.timer.countdown_ms(self.devices.device_time(operation))
            end = self.log_event(f"Process {pcb.ordinal}: end memory blocking")
        self._add_timeline(pcb, operation, start, end)

    def _run_io(self, operation: Operation):
        pcb = self._require_process(operation)
        direction = "input" if operation.kind == OperationKind.INPUT else "output"

        message = f"Process {pcb.ordinal}: start {operation.label} {direction}"
        unit = UNIT_NAMES.get(operation.device)
        if unit is not None:
            message += f" on {unit} {self.devices.assign(operation.device)}"

        start = self.log_event(message)
        pcb.transition(ProcessState.WAITING, start)
        pcb.io_operations += 1
        self.io.run(self.devices.device_time(operation), name=f"io-p{pcb.ordinal}")
        end = self.log_event(f"Process {pcb.ordinal}: end {operation.label} {direction}")
        pcb.transition(ProcessState.RUNNING, end)
        self._add_timeline(pcb, operation, start, end, ProcessState.WAITING)

    # ------------------------------------------------------------------

    def dispatch(self, operation: Operation):
        """Execute one operation"""
        logger.debug("dispatch %s", operation)
        self._handlers[operation.kind](operation)
        self.operations_run += 1
        if self.pcb is not None and operation.kind not in (OperationKind.SYSTEM, OperationKind.APPLICATION):
            self.pcb.operations_run += 1

    def run(self, queue: Union[OperationQueue, Iterable[Operation]]) -> Dict:
        """
        Drain the queue and simulate every operation

        Args:
            queue: live OperationQueue (drained until closed) or a plain
                iterable of operations

        Returns:
            result dictionary (log, timeline, processes)
        """
        if not isinstance(queue, OperationQueue):
            queue = OperationQueue(queue)
            queue.close()

        self.timer.start()
        self.reference = self.clock()
        try:
            for operation in queue.drain():
                self.dispatch(operation)
        finally:
            self.timer.stop()

        logger.info("%s run finished: %d operations, %d processes",
                    self.algorithm, self.operations_run, len(self.processes))
        return self.get_results()

    def get_results(self) -> Dict:
        total_time = self.timeline[-1].end_time if self.timeline else 0.0
        return {
            'algorithm': self.algorithm,
            'event_log': list(self.log.event_log),
            'timeline': list(self.timeline),
            'processes': list(self.processes),
            'operations_run': self.operations_run,
            'total_time': total_time,
        }
