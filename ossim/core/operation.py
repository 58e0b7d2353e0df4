"""
Meta-data operation records
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class OperationKind(Enum):
    """Operation kind, valued by its one-letter meta-data code"""
    SYSTEM = "S"
    APPLICATION = "A"
    PROCESS = "P"
    MEMORY = "M"
    INPUT = "I"
    OUTPUT = "O"


META_DATA_START = "Start Program Meta-Data Code:"
META_DATA_END = "End Program Meta-Data Code."


class DeviceClass(Enum):
    """Hardware classes with their own cycle time"""
    MONITOR = "Monitor"
    PROCESSOR = "Processor"
    SCANNER = "Scanner"
    HARD_DRIVE = "Hard Drive"
    KEYBOARD = "Keyboard"
    MEMORY = "Memory"
    PROJECTOR = "Projector"


ALLOWED_LABELS: Dict[OperationKind, FrozenSet[str]] = {
    OperationKind.SYSTEM: frozenset({"begin", "finish"}),
    OperationKind.APPLICATION: frozenset({"begin", "finish"}),
    OperationKind.PROCESS: frozenset({"run"}),
    OperationKind.MEMORY: frozenset({"allocate", "block"}),
    OperationKind.INPUT: frozenset({"hard drive", "keyboard", "scanner"}),
    OperationKind.OUTPUT: frozenset({"hard drive", "monitor", "projector"}),
}

# IO labels name the device they talk to
LABEL_DEVICES: Dict[str, DeviceClass] = {
    "hard drive": DeviceClass.HARD_DRIVE,
    "keyboard": DeviceClass.KEYBOARD,
    "scanner": DeviceClass.SCANNER,
    "monitor": DeviceClass.MONITOR,
    "projector": DeviceClass.PROJECTOR,
}


class Operation(BaseModel):
    """
    One meta-data instruction

    Immutable once built; the label must belong to the allowed set of its kind.
    """
    model_config = ConfigDict(frozen=True)

    kind: OperationKind
    label: str
    cycles: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_label(self) -> "Operation":
        if self.label not in ALLOWED_LABELS[self.kind]:
            raise ValueError(f"label '{self.label}' is not valid for {self.kind.name.lower()} operations")
        return self

    @classmethod
    def from_code(cls, code: str, label: str, cycles: int) -> "Operation":
        return cls(kind=OperationKind(code), label=label, cycles=cycles)

    @property
    def code(self) -> str:
        return self.kind.value

    @property
    def is_io(self) -> bool:
        return self.kind in (OperationKind.INPUT, OperationKind.OUTPUT)

    @property
    def is_begin(self) -> bool:
        return self.label == "begin"

    @property
    def device(self) -> Optional[DeviceClass]:
        """Device class whose cycle time applies, None for S/A operations"""
        if self.kind == OperationKind.PROCESS:
            return DeviceClass.PROCESSOR
        if self.kind == OperationKind.MEMORY:
            return DeviceClass.MEMORY
        if self.is_io:
            return LABEL_DEVICES[self.label]
        return None

    def __str__(self) -> str:
        return f"{self.code}{{{self.label}}}{self.cycles}"
