"""
Device registry: cycle-time lookup, memory bump allocator and
round-robin assignment of hard drives and projectors
"""

from .config import Configuration
from .operation import DeviceClass, Operation


class DeviceRegistry:
    """
    Stateful hardware allocators for one run

    Cursors start at -1 (unused). Only the execution engine mutates them.
    """

    def __init__(self, config: Configuration):
        self.config = config
        self.last_mem_addr = -1
        self.last_hdd = -1
        self.last_projector = -1

    def device_time(self, operation: Operation) -> int:
        """Simulated milliseconds an operation keeps its device busy"""
        device = operation.device
        if device is None:
            return 0
        return self.config.cycle_time(device) * operation.cycles

    def allocate_memory(self) -> int:
        """
        Bump-allocate one memory block

        Returns:
            block address in kbytes; wraps silently to 0 once the next
            block would pass the system memory size
        """
        if self.last_mem_addr == -1:
            self.last_mem_addr = 0
            return 0

        self.last_mem_addr += self.config.memory_block_size
        if self.last_mem_addr > self.config.system_memory:
            self.last_mem_addr = 0
        return self.last_mem_addr

    @staticmethod
    def _next_index(last: int, count: int) -> int:
        if last == -1 or last + 1 >= count:
            return 0
        return last + 1

    def assign_hdd(self) -> int:
        self.last_hdd = self._next_index(self.last_hdd, self.config.hdd_quantity)
        return self.last_hdd

    def assign_projector(self) -> int:
        self.last_projector = self._next_index(self.last_projector, self.config.projector_quantity)
        return self.last_projector

    def assign(self, device: DeviceClass) -> int:
        """Round-robin index for a multi-unit device class"""
        if device == DeviceClass.HARD_DRIVE:
            return self.assign_hdd()
        if device == DeviceClass.PROJECTOR:
            return self.assign_projector()
        raise ValueError(f"{device.value} is not a multi-unit device")

    def __repr__(self):
        return (f"DeviceRegistry(mem={self.last_mem_addr}, hdd={self.last_hdd}, "
                f"proj={self.last_projector})")
