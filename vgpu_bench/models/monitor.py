"""Monitors that are polled periodically while a benchmark runs."""

from __future__ import annotations

import abc
import dataclasses
import datetime
import logging

from .data import Measurement

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class MonitorFrequency:
    """How often a monitor is polled, as a period in seconds.

    For a rate of ``f`` hertz the period is ``1 / f`` seconds.
    """

    period: float
    hz: int | None = None

    def __post_init__(self) -> None:
        if self.period <= 0:
            raise ValueError(f"monitor period must be positive, got {self.period}")

    @classmethod
    def hertz(cls, hz: int) -> MonitorFrequency:
        if hz <= 0:
            raise ValueError(f"monitor frequency must be positive, got {hz} Hz")
        return cls(period=1.0 / hz, hz=hz)

    @classmethod
    def every(cls, seconds: float | datetime.timedelta) -> MonitorFrequency:
        if isinstance(seconds, datetime.timedelta):
            seconds = seconds.total_seconds()
        return cls(period=float(seconds))

    def as_duration(self) -> float:
        """The time between polls, in seconds."""
        return self.period


class Monitor(abc.ABC):
    """A named source of measurements, polled at a fixed frequency."""

    @abc.abstractmethod
    def name(self) -> str:
        """The monitor's name, used for its output file."""

    @abc.abstractmethod
    def frequency(self) -> MonitorFrequency:
        """How often the monitor is polled."""

    def on_start(self) -> None:
        """Called before the benchmark starts; only logs by default."""
        logger.debug("%s: no start hook to run", self.name())

    @abc.abstractmethod
    def poll(self) -> Measurement:
        """Take one measurement; raise on failure."""

    def on_stop(self) -> None:
        """Called after the benchmark finishes; only logs by default."""
        logger.debug("%s: no stop hook to run", self.name())