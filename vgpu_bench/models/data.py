"""Measurement records, their collections, and the bundles that write them out."""

from __future__ import annotations

import abc
import dataclasses
import logging
import os
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any, Generic, TypeVar

from ..util import io as io_util
from ..util.log_setup import log_assert

logger = logging.getLogger(__name__)

T = TypeVar("T")
C = TypeVar("C", bound=type)


def measurement(cls: C) -> C:
    """Class decorator turning a plain class into a recordable measurement.

    The class becomes a dataclass (if it is not one already), which gives it
    a readable repr and named fields that serve as the CSV columns.
    """
    if dataclasses.is_dataclass(cls):
        return cls
    return dataclasses.dataclass(cls)


def to_record(measurable: Any) -> dict[str, Any]:
    """Return the named fields of a measurable value, in field order.

    Mappings, objects with a ``to_record`` method, dataclass instances and
    named tuples are accepted; anything else raises TypeError.
    """
    if isinstance(measurable, Mapping):
        return {str(key): value for key, value in measurable.items()}
    if not isinstance(measurable, type):
        method = getattr(measurable, "to_record", None)
        if callable(method):
            return dict(method())
        if dataclasses.is_dataclass(measurable):
            return {
                field.name: getattr(measurable, field.name)
                for field in dataclasses.fields(measurable)
            }
        as_dict = getattr(measurable, "_asdict", None)
        if isinstance(measurable, tuple) and callable(as_dict):
            return dict(as_dict())
    raise TypeError(f"{type(measurable).__name__} is not a measurable record")


class Measurement:
    """A type-erased measurable value, as produced by monitors."""

    __slots__ = ("_measurable",)

    def __init__(self, measurable: Any) -> None:
        to_record(measurable)
        self._measurable = measurable

    def to_record(self) -> dict[str, Any]:
        return to_record(self._measurable)

    def __repr__(self) -> str:
        return "Measurement()"


class Measurements(Generic[T]):
    """An ordered collection of measurable values."""

    def __init__(self) -> None:
        self._items: list[T] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"Measurements({self._items!r})"

    def push(self, item: T) -> None:
        self._items.append(item)

    def clear(self) -> None:
        self._items.clear()

    def write(self, path: str | os.PathLike[str]) -> None:
        """Write the values as CSV to ``path`` with a ``.csv`` extension.

        An existing file is replaced. When there is nothing to write, no
        file is left behind.
        """
        target = Path(path).with_suffix(".csv")
        logger.debug("writing measurements to %s", target)

        if target.exists():
            target.unlink()
            log_assert(not target.exists(), f"{target} could not be removed")

        if not self._items:
            logger.warning("%s no measurable to write, skipping", target)
            return

        with io_util.csv_writer(target) as writer:
            for row in self._items:
                writer.serialize(to_record(row))
            writer.flush()


@dataclasses.dataclass
class MonitorBundle:
    """Measurements collected by each monitor, keyed by monitor name."""

    monitor_measurements: dict[str, Measurements[Measurement]] = dataclasses.field(
        default_factory=dict
    )

    def write(self, path: str | os.PathLike[str]) -> None:
        """Write one ``<name>.csv`` per monitor into directory ``path``."""
        base = Path(path)
        for name, measurements in self.monitor_measurements.items():
            measurements.write((base / name).with_suffix(".csv"))


@dataclasses.dataclass
class BenchmarkBundle(Generic[T]):
    """A benchmark's own measurements together with its monitors' results."""

    measurements: Measurements[T]
    monitor_bundle: MonitorBundle = dataclasses.field(default_factory=MonitorBundle)

    def write(self, path: str | os.PathLike[str]) -> None:
        """Write ``measurements.csv`` and a ``monitors`` directory under ``path``."""
        base = Path(path)
        self.measurements.write(base / "measurements.csv")
        self.monitor_bundle.write(base / "monitors")


@dataclasses.dataclass
class DriverBundle(Generic[T]):
    """Results of every benchmark run by a driver, keyed by benchmark name."""

    benchmark_bundles: dict[str, BenchmarkBundle[T]] = dataclasses.field(
        default_factory=dict
    )

    def write(self, path: str | os.PathLike[str]) -> None:
        """Write each benchmark's bundle into its own directory under ``path``."""
        base = Path(path)
        for name, bundle in self.benchmark_bundles.items():
            bundle.write(base / name)


class Writer(abc.ABC):
    """Something that stores measurements at a path."""

    @abc.abstractmethod
    def append(self, data: Measurements[Any], path: str | os.PathLike[str]) -> None:
        """Add ``data`` to whatever is already stored at ``path``."""

    @abc.abstractmethod
    def write(self, data: Measurements[Any], path: str | os.PathLike[str]) -> None:
        """Store ``data`` at ``path``, replacing what was there."""