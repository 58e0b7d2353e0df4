import io
import re

import pytest

from ossim.core.engine import ExecutionEngine
from ossim.core.errors import OperationBeforeProcessStartError
from ossim.core.operation import OperationKind
from ossim.core.process import ProcessState
from ossim.core.sync import OperationQueue
from ossim.schedulers import create_scheduler

from conftest import PROGRAM, make_config, ops

LINE = re.compile(r"^(\d+\.\d{6}) - (.*)$")


def split(lines):
    parsed = [LINE.match(line) for line in lines]
    assert all(parsed), lines
    return [float(m.group(1)) for m in parsed], [m.group(2) for m in parsed]


def run(operations, config=None, identity=None, sinks=()):
    config = config or make_config()
    if identity is None:
        identity = create_scheduler(config.scheduling_code).schedule(operations).identity
    engine = ExecutionEngine(config, identity, sinks)
    return engine, engine.run(operations)


def test_single_process_end_to_end():
    config = make_config(processor=10)
    _, results = run(ops("A{begin}0; P{run}5; A{finish}0;"), config, [1])
    stamps, messages = split(results['event_log'])
    assert messages == [
        "OS: preparing process 1",
        "OS: starting process 1",
        "Process 1: start processing action",
        "Process 1: end processing action",
        "OS: removing process 1",
    ]
    processing = stamps[3] - stamps[2]
    assert 0.05 <= processing < 0.5


def test_timestamps_never_decrease():
    _, results = run(ops(PROGRAM))
    stamps, _ = split(results['event_log'])
    assert stamps == sorted(stamps)


def test_every_sink_gets_identical_content():
    monitor, log_file = io.StringIO(), io.StringIO()
    _, results = run(ops(PROGRAM), sinks=[monitor, log_file])
    assert monitor.getvalue() == log_file.getvalue()
    assert monitor.getvalue().splitlines() == results['event_log']


def test_full_program_log():
    _, results = run(ops(PROGRAM))
    _, messages = split(results['event_log'])
    assert messages == [
        "Simulator program starting",
        "OS: preparing process 1",
        "OS: starting process 1",
        "Process 1: start processing action",
        "Process 1: end processing action",
        "Process 1: start hard drive input on HDD 0",
        "Process 1: end hard drive input",
        "Process 1: start monitor output",
        "Process 1: end monitor output",
        "OS: removing process 1",
        "OS: preparing process 2",
        "OS: starting process 2",
        "Process 2: allocating memory",
        "Process 2: memory allocated at 0x00000000",
        "Process 2: start processing action",
        "Process 2: end processing action",
        "OS: removing process 2",
        "OS: preparing process 3",
        "OS: starting process 3",
        "Process 3: start projector output on PROJ 0",
        "Process 3: end projector output",
        "Process 3: start keyboard input",
        "Process 3: end keyboard input",
        "Process 3: start hard drive output on HDD 1",
        "Process 3: end hard drive output",
        "OS: removing process 3",
        "Simulator program ending",
    ]


def test_display_numbers_follow_arrival_order_after_reordering():
    config = make_config(scheduling_code="PS")
    _, results = run(ops(PROGRAM), config)
    _, messages = split(results['event_log'])
    preparing = [m for m in messages if m.startswith("OS: preparing")]
    assert preparing == ["OS: preparing process 3", "OS: preparing process 1",
                         "OS: preparing process 2"]
    assert [p.ordinal for p in results['processes']] == [3, 1, 2]
    assert [p.position for p in results['processes']] == [0, 1, 2]


def test_memory_addresses_are_hex_and_wrap():
    config = make_config(system_memory=512, memory_block_size=256)
    _, results = run(ops("A{begin}0; M{allocate}1; M{allocate}1; M{allocate}1; M{allocate}1; A{finish}0;"),
                     config, [1])
    allocated = [line.split(" at ")[1] for line in results['event_log'] if "allocated at" in line]
    assert allocated == ["0x00000000", "0x00000100", "0x00000200", "0x00000000"]


def test_memory_block_has_no_allocator_effect():
    engine, results = run(ops("A{begin}0; M{block}2; A{finish}0;"), identity=[1])
    _, messages = split(results['event_log'])
    assert messages[2:4] == ["Process 1: start memory blocking", "Process 1: end memory blocking"]
    assert engine.devices.last_mem_addr == -1


def test_projector_round_robin_in_log():
    config = make_config(projector_quantity=2)
    _, results = run(ops("A{begin}0; O{projector}1; O{projector}1; O{projector}1; A{finish}0;"),
                     config, [1])
    suffixes = [line.rsplit(" on ", 1)[1] for line in results['event_log'] if " on PROJ" in line]
    assert suffixes == ["PROJ 0", "PROJ 1", "PROJ 0"]


def test_io_waits_for_device_time():
    config = make_config(keyboard=30)
    _, results = run(ops("A{begin}0; I{keyboard}2; A{finish}0;"), config, [1])
    stamps, _ = split(results['event_log'])
    assert stamps[3] - stamps[2] >= 0.06


def test_process_state_machine():
    _, results = run(ops("A{begin}0; I{scanner}1; P{run}1; A{finish}0;"), identity=[1])
    pcb = results['processes'][0]
    assert pcb.state == ProcessState.EXIT
    assert [state for state, _ in pcb.history] == [
        ProcessState.READY, ProcessState.RUNNING, ProcessState.WAITING,
        ProcessState.RUNNING, ProcessState.EXIT]
    assert pcb.io_operations == 1
    assert pcb.operations_run == 2
    assert pcb.turnaround_time >= 0


def test_timeline_covers_timed_operations():
    _, results = run(ops(PROGRAM))
    timeline = results['timeline']
    assert len(timeline) == 8
    assert all(entry.end_time >= entry.start_time for entry in timeline)
    waiting = [entry for entry in timeline if entry.state == ProcessState.WAITING]
    assert {entry.kind for entry in waiting} == {OperationKind.INPUT, OperationKind.OUTPUT}


@pytest.mark.parametrize("program", [
    "P{run}1;",
    "S{begin}0; M{allocate}1; S{finish}0.",
    "A{begin}0; A{finish}0; I{keyboard}1;",
])
def test_operation_without_process_is_rejected(program):
    engine = ExecutionEngine(make_config(), [1])
    with pytest.raises(OperationBeforeProcessStartError):
        engine.run(ops(program))
    assert not engine.timer.running


def test_late_arrivals_are_numbered_after_scheduled_processes():
    queue = OperationQueue(ops("A{begin}0; A{finish}0;"))
    queue.extend(ops("A{begin}0; P{run}1; A{finish}0;"))
    queue.close()
    engine = ExecutionEngine(make_config(), [1])
    results = engine.run(queue)
    assert [p.ordinal for p in results['processes']] == [1, 2]


def test_system_operations_have_no_delay():
    _, results = run(ops("S{begin}0; S{finish}0."), identity=[])
    stamps, messages = split(results['event_log'])
    assert messages == ["Simulator program starting", "Simulator program ending"]
    assert stamps[1] - stamps[0] < 0.05
    assert results['total_time'] == 0.0
