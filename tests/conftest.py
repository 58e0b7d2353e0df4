import matplotlib
matplotlib.use("Agg")

import pytest

from ossim.core.config import Configuration, LogTarget
from ossim.utils.input_parser import InputParser


CONFIG_TEXT = """Start Simulator Configuration File
Version/Phase: 5.0
File Path: program.mdf
Monitor display time {msec}: 2
Processor cycle time {msec}: 1
Scanner cycle time {msec}: 2
Hard drive cycle time {msec}: 1
Keyboard cycle time {msec}: 3
Memory cycle time {msec}: 1
Projector cycle time {msec}: 2
Processor Quantum Number: 3
CPU Scheduling Code: {code}
Log: Log to Both
Log File Path: {log_path}
System memory {kbytes}: 1024
Memory block size {kbytes}: 256
Projector quantity: 2
Hard drive quantity: 2
End Simulator Configuration File
"""

META_DATA_TEXT = """Start Program Meta-Data Code:
S{begin}0; A{begin}0; P{run}3; I{hard drive}2; O{monitor}1; A{finish}0;
A{begin}0; M{allocate}2; P{run}2; A{finish}0;
A{begin}0; O{projector}1; I{keyboard}1; O{hard drive}1; A{finish}0; S{finish}0.
End Program Meta-Data Code.
"""


def make_config(**overrides) -> Configuration:
    fields = dict(
        version=5.0,
        meta_data_path="program.mdf",
        monitor=2, processor=1, scanner=2, hard_drive=1, keyboard=3, memory=1, projector=2,
        log_target=LogTarget.MONITOR,
        log_path="sim.lgf",
        system_memory=1024,
        memory_block_size=256,
        hdd_quantity=2,
        projector_quantity=2,
        quantum=3,
        scheduling_code="FIFO",
    )
    fields.update(overrides)
    return Configuration(**fields)


def ops(text: str):
    return InputParser.parse_meta_line(text)


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def program_files(tmp_path):
    """Write a config/meta-data pair and return the config path"""
    def _write(code="FIFO", meta_data=META_DATA_TEXT):
        log_path = tmp_path / "sim.lgf"
        config_path = tmp_path / "sim.conf"
        config_path.write_text(CONFIG_TEXT.replace("{code}", code).replace("{log_path}", str(log_path)))
        (tmp_path / "program.mdf").write_text(meta_data)
        return str(config_path)
    return _write


# io counts per process: 2, 0, 3
PROGRAM = ("S{begin}0; A{begin}0; P{run}3; I{hard drive}2; O{monitor}1; A{finish}0;"
           "A{begin}0; M{allocate}2; P{run}2; A{finish}0;"
           "A{begin}0; O{projector}1; I{keyboard}1; O{hard drive}1; A{finish}0; S{finish}0.")
