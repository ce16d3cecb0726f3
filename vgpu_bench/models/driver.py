"""The driver that runs benchmarks and writes their results."""

from __future__ import annotations

import dataclasses
import enum
import logging
import os
from pathlib import Path
from typing import Generic, TypeVar

from ..util import annotations
from ..util import io as io_util
from ..util.log_setup import log_assert
from .benchmark import Benchmark
from .data import BenchmarkBundle, DriverBundle

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DriverWriteMode(enum.Enum):
    """How the output directory is prepared before results are written."""

    NO_MASH = "no_mash"
    """Fail if the output directory is not empty."""
    PURGE = "purge"
    """Empty the output directory first."""
    RELAXED = "relaxed"
    """Leave existing content and overwrite as necessary."""


@dataclasses.dataclass
class DriverOptions:
    """Where and how benchmark output is stored."""

    output_dir: Path = dataclasses.field(default_factory=lambda: Path("output"))
    write_mode: DriverWriteMode = DriverWriteMode.RELAXED
    on_error_continue: bool = False


class DriverBuilder(Generic[T]):
    """Collects options and benchmarks for a driver."""

    def __init__(self) -> None:
        self.options = DriverOptions()
        self.benchmarks: list[Benchmark[T]] = []

    def on_error_continue(self, should_continue: bool) -> DriverBuilder[T]:
        self.options.on_error_continue = should_continue
        return self

    def write_mode(self, write_mode: DriverWriteMode) -> DriverBuilder[T]:
        self.options.write_mode = write_mode
        return self

    def output_dir(self, output_dir: str | os.PathLike[str]) -> DriverBuilder[T]:
        self.options.output_dir = Path(output_dir)
        return self

    def add(self, benchmark: Benchmark[T]) -> DriverBuilder[T]:
        self.benchmarks.append(benchmark)
        return self

    def build(self) -> Driver[T]:
        return Driver(self.options, self.benchmarks)


class Driver(Generic[T]):
    """Runs a sequence of benchmarks and writes their results."""

    def __init__(self, options: DriverOptions, benchmarks: list[Benchmark[T]]) -> None:
        self.options = options
        self.benchmarks = list(benchmarks)

    @staticmethod
    def builder() -> DriverBuilder:
        return DriverBuilder()

    @classmethod
    def from_benchmark(cls, benchmark: Benchmark[T]) -> Driver[T]:
        """A driver with default options running a single benchmark."""
        return cls(DriverOptions(), [benchmark])

    def run(self) -> None:
        """Run every benchmark and write the results to the output directory."""
        output_dir = self.options.output_dir
        write_mode = self.options.write_mode

        bundle = self.extract()

        logger.debug("preparing data landing")
        io_util.create_data_landing(output_dir)
        if write_mode is DriverWriteMode.NO_MASH:
            log_assert(
                io_util.dir_is_empty(output_dir),
                f"Driver enforces output directory is empty: {output_dir}",
            )
        elif write_mode is DriverWriteMode.PURGE:
            io_util.dir_purge(output_dir)
        logger.debug("landing ready")

        bundle.write(output_dir)

    def extract(self) -> DriverBundle[T]:
        """Run every benchmark and return their results without writing them."""
        bundles: dict[str, BenchmarkBundle[T]] = {}

        annotations.mark("benchmark-stage")
        logger.debug("commencing benchmarks")
        for benchmark in self.benchmarks:
            name = benchmark.metadata.name
            logger.info("%s: commencing", name)
            try:
                bundle = benchmark.run(self.options)
            except Exception as exc:
                logger.error("%s failed: %s", name, exc)
                if not self.options.on_error_continue:
                    raise
                logger.debug("continuing to next benchmark...")
                continue
            logger.info("%s: completed", name)
            bundles[name] = bundle
        logger.debug("completed benchmarks")

        return DriverBundle(benchmark_bundles=bundles)