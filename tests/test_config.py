import pytest
from pydantic import ValidationError

from ossim.core.config import Configuration, LogTarget
from ossim.core.errors import DeviceCountZeroError, UnknownPolicyError
from ossim.core.operation import DeviceClass, Operation, OperationKind

from conftest import make_config


def test_cycle_time_lookup():
    config = make_config(hard_drive=15, monitor=20)
    assert config.cycle_time(DeviceClass.HARD_DRIVE) == 15
    assert config.cycle_time(DeviceClass.MONITOR) == 20
    assert set(config.cycle_times) == set(DeviceClass)


@pytest.mark.parametrize("field", ["processor", "memory", "system_memory", "memory_block_size", "quantum"])
def test_numeric_fields_must_be_positive(field):
    with pytest.raises(ValidationError):
        make_config(**{field: 0})


@pytest.mark.parametrize("field", ["hdd_quantity", "projector_quantity"])
def test_zero_device_count_is_rejected(field):
    with pytest.raises(DeviceCountZeroError):
        make_config(**{field: 0})


def test_unknown_scheduling_code_is_rejected():
    with pytest.raises(UnknownPolicyError):
        make_config(scheduling_code="STR")


def test_configuration_is_read_only():
    config = make_config()
    with pytest.raises(ValidationError):
        config.processor = 5


def test_log_target_values():
    assert LogTarget("Log to Both") == LogTarget.BOTH
    assert make_config(log_target=LogTarget.FILE).log_target == LogTarget.FILE


def test_operation_label_must_match_kind():
    with pytest.raises(ValidationError):
        Operation.from_code("I", "monitor", 1)
    with pytest.raises(ValidationError):
        Operation.from_code("P", "run", -1)


def test_operation_device_and_rendering():
    op = Operation.from_code("O", "hard drive", 6)
    assert op.kind == OperationKind.OUTPUT
    assert op.is_io
    assert op.device == DeviceClass.HARD_DRIVE
    assert str(op) == "O{hard drive}6"
    assert Operation.from_code("A", "begin", 0).device is None
