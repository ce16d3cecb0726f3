"""A monitor reporting the share of memory that is free."""

from __future__ import annotations

import psutil

from ..models.data import Measurement
from ..models.monitor import Monitor, MonitorFrequency


class MemoryUtilizationMonitor(Monitor):
    """Reports free memory as a fraction of total memory, 100 times a second."""

    def __init__(self) -> None:
        self._name = "Memory Utilization"
        self._frequency = MonitorFrequency.hertz(100)

    def name(self) -> str:
        return self._name

    def frequency(self) -> MonitorFrequency:
        return self._frequency

    def poll(self) -> Measurement:
        memory = psutil.virtual_memory()
        utilization = float(memory.free) / float(memory.total)
        return Measurement({"utilization": utilization})