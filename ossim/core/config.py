"""
Typed simulator configuration
"""

from enum import Enum
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import DeviceCountZeroError, UnknownPolicyError
from .operation import DeviceClass

SCHEDULING_CODES = ("FIFO", "PS", "SJF", "RR", "SRT")


class LogTarget(Enum):
    """Where the simulation log goes"""
    MONITOR = "Log to Monitor"
    FILE = "Log to File"
    BOTH = "Log to Both"


class Configuration(BaseModel):
    """
    Validated hardware profile and run settings

    Memory sizes are stored in kbytes. Read-only once built.
    """
    model_config = ConfigDict(frozen=True)

    version: float = 0.0
    meta_data_path: str = ""

    # cycle times (msec per cycle)
    monitor: int = Field(gt=0)
    processor: int = Field(gt=0)
    scanner: int = Field(gt=0)
    hard_drive: int = Field(gt=0)
    keyboard: int = Field(gt=0)
    memory: int = Field(gt=0)
    projector: int = Field(gt=0)

    log_target: LogTarget = LogTarget.MONITOR
    log_path: str = ""

    system_memory: int = Field(gt=0)
    memory_block_size: int = Field(gt=0)
    hdd_quantity: int = Field(ge=0)
    projector_quantity: int = Field(ge=0)

    quantum: int = Field(gt=0)
    scheduling_code: str = "FIFO"

    @field_validator("scheduling_code")
    @classmethod
    def _check_scheduling_code(cls, value: str) -> str:
        if value not in SCHEDULING_CODES:
            raise UnknownPolicyError(value)
        return value

    @model_validator(mode="after")
    def _check_device_counts(self) -> "Configuration":
        if self.hdd_quantity == 0:
            raise DeviceCountZeroError("Hard drive")
        if self.projector_quantity == 0:
            raise DeviceCountZeroError("Projector")
        return self

    @property
    def cycle_times(self) -> Dict[DeviceClass, int]:
        return {
            DeviceClass.MONITOR: self.monitor,
            DeviceClass.PROCESSOR: self.processor,
            DeviceClass.SCANNER: self.scanner,
            DeviceClass.HARD_DRIVE: self.hard_drive,
            DeviceClass.KEYBOARD: self.keyboard,
            DeviceClass.MEMORY: self.memory,
            DeviceClass.PROJECTOR: self.projector,
        }

    def cycle_time(self, device: DeviceClass) -> int:
        """Milliseconds per cycle for a device class"""
        return self.cycle_times[device]
