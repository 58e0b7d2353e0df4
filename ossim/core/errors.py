"""
Exception hierarchy for the simulator
"""

from typing import Optional


class SimulationError(Exception):
    """Base class for every error raised by the simulator"""


class UnknownPolicyError(SimulationError):
    """Scheduling code is not one of the supported policies"""

    def __init__(self, code: str):
        super().__init__(f"unknown scheduling code '{code}'")
        self.code = code


class OperationBeforeProcessStartError(SimulationError):
    """A process-level operation arrived while no process was running"""

    def __init__(self, operation):
        super().__init__(f"operation {operation} has no active process (missing A{{begin}})")
        self.operation = operation


class DeviceCountZeroError(SimulationError):
    """A round-robin device class was configured with zero devices"""

    def __init__(self, device: str):
        super().__init__(f"{device} quantity must be at least 1")
        self.device = device


class ProcessStateError(SimulationError):
    """Illegal PCB state transition"""


class ConfigFormatError(SimulationError):
    """Malformed configuration file"""

    def __init__(self, message: str, line: Optional[int] = None):
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)
        self.line = line


class MetaDataFormatError(SimulationError):
    """
    Malformed meta-data record

    Attributes:
        part: which part of the record failed ("code", "description", "cycle")
        line: 1-based line number in the meta-data file, if known
    """

    def __init__(self, part: str, token: str, line: Optional[int] = None):
        message = f"{part} error in '{token}'"
        if line is not None:
            message = f"{part.capitalize()} error in line {line} of the meta data file: '{token}'"
        super().__init__(message)
        self.part = part
        self.token = token
        self.line = line
