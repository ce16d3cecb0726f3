"""A monitor reporting aggregate CPU load."""

from __future__ import annotations

import psutil

from ..models.data import Measurement
from ..models.monitor import Monitor, MonitorFrequency

_SAMPLE_SECONDS = 0.75
_FIELDS = ("idle", "interrupt", "nice", "system", "user")


class CpuUtilizationMonitor(Monitor):
    """Samples CPU load over a short window on each poll.

    Every field of the measurement is a fraction of total CPU time
    (idle, interrupt, nice, system, user); a field the platform does not
    report is 0.
    """

    def __init__(self, name: str, frequency: MonitorFrequency) -> None:
        self._name = name
        self._frequency = frequency

    def name(self) -> str:
        return self._name

    def frequency(self) -> MonitorFrequency:
        return self._frequency

    def poll(self) -> Measurement:
        load = psutil.cpu_times_percent(interval=_SAMPLE_SECONDS)
        record = {
            field: float(getattr(load, field, 0.0)) / 100.0 for field in _FIELDS
        }
        return Measurement(record)