"""Benchmarks: a measured function run alongside periodically polled monitors."""

from __future__ import annotations

import dataclasses
import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Generic, TypeVar

from ..util import annotations
from ..util import io as io_util
from .data import BenchmarkBundle, Measurement, Measurements, MonitorBundle
from .monitor import Monitor

if TYPE_CHECKING:
    from .driver import DriverOptions

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclasses.dataclass(frozen=True)
class BenchmarkMetadata:
    """Descriptive data for a benchmark."""

    name: str


class BenchmarkFn(Generic[T]):
    """A function producing measurements; it may be run only once."""

    def __init__(self, func: Callable[[], Measurements[T]]) -> None:
        self._func: Callable[[], Measurements[T]] | None = func

    def extract(self) -> Measurements[T]:
        """Call the function and return its measurements."""
        func, self._func = self._func, None
        if func is None:
            raise RuntimeError("benchmark function has already been run")
        return func()

    def run(self, name: str) -> Measurements[T]:
        """Call the function inside an annotated range named after ``name``."""
        with annotations.annotated_range(f"benching {name}"):
            return self.extract()


class _Worker(threading.Thread):
    """A thread that records its exception and breaks the shared barrier."""

    def __init__(self, name: str, work: Callable[[], None], barrier: threading.Barrier):
        super().__init__(name=name, daemon=True)
        self._work = work
        self._barrier = barrier
        self.error: BaseException | None = None

    def run(self) -> None:
        try:
            self._work()
        except BaseException as exc:  # noqa: BLE001 - reported by the owner
            self.error = exc
            self._barrier.abort()


def _first_error(workers: list[_Worker]) -> BaseException | None:
    return next((worker.error for worker in workers if worker.error is not None), None)


class Benchmark(Generic[T]):
    """A benchmark function together with the monitors polled while it runs."""

    def __init__(
        self,
        metadata: BenchmarkMetadata,
        func: BenchmarkFn[T] | Callable[[], Measurements[T]],
    ) -> None:
        self.metadata = metadata
        self._func: BenchmarkFn[T] | None = (
            func if isinstance(func, BenchmarkFn) else BenchmarkFn(func)
        )
        self.monitors: list[Monitor] = []

    @classmethod
    def from_fn(
        cls, func: BenchmarkFn[T] | Callable[[], Measurements[T]]
    ) -> Benchmark[T]:
        """Create a benchmark named "Unnamed"."""
        return cls(BenchmarkMetadata("Unnamed"), func)

    def monitor(self, monitor: Monitor) -> Benchmark[T]:
        """Add a monitor; returns the benchmark for chaining."""
        self.monitors.append(monitor)
        return self

    def run(self, options: DriverOptions) -> BenchmarkBundle[T]:
        """Run the function while polling every monitor in its own thread."""
        bm_name = self.metadata.name
        io_util.create_data_landing(Path(options.output_dir) / bm_name)
        logger.debug("%s: augmented with %d monitors", bm_name, len(self.monitors))

        self._lifecycle_hook("on_start", lambda mon: mon.on_start())
        logger.debug("%s: started all monitors", bm_name)

        func, self._func = self._func, None
        if func is None:
            raise RuntimeError(f"{bm_name}: benchmark function has already been run")

        barrier = threading.Barrier(len(self.monitors) + 1)
        complete = threading.Event()
        lock = threading.Lock()
        collected: dict[str, Measurements[Measurement]] = {}
        start_time = time.monotonic()

        workers = [
            _Worker(
                f"monitor-{index}",
                self._polling_work(mon, barrier, complete, start_time, collected, lock),
                barrier,
            )
            for index, mon in enumerate(self.monitors)
        ]
        for worker in workers:
            worker.start()

        try:
            logger.debug("%s: waiting to execute", bm_name)
            try:
                barrier.wait()
            except threading.BrokenBarrierError:
                complete.set()
                for worker in workers:
                    worker.join()
                error = _first_error(workers)
                raise RuntimeError(f"Unit thread exception: {error!r}") from error
            logger.debug("%s: starting execution", bm_name)
            measurements = func.run(bm_name)
            logger.debug("%s: completed execution", bm_name)
        finally:
            complete.set()
            for worker in workers:
                worker.join()

        error = _first_error(workers)
        if error is not None:
            raise RuntimeError(f"Unit thread exception: {error!r}") from error

        monitor_bundle = MonitorBundle(monitor_measurements=collected)

        self._lifecycle_hook("on_stop", lambda mon: mon.on_stop())
        logger.debug("%s: stopped all monitors", bm_name)

        return BenchmarkBundle(measurements=measurements, monitor_bundle=monitor_bundle)

    @staticmethod
    def _polling_work(
        mon: Monitor,
        barrier: threading.Barrier,
        complete: threading.Event,
        start_time: float,
        sink: dict[str, Measurements[Measurement]],
        lock: threading.Lock,
    ) -> Callable[[], None]:
        def work() -> None:
            mon_name = mon.name()
            period = mon.frequency().as_duration()
            results: Measurements[Measurement] = Measurements()

            logger.debug("%s: waiting to poll", mon_name)
            barrier.wait()
            logger.debug("%s: starting polling", mon_name)

            while True:
                since_start = time.monotonic() - start_time
                complete.wait(period - since_start % period)

                poll_start = time.monotonic()
                error: Exception | None = None
                value: Measurement | None = None
                try:
                    value = mon.poll()
                except Exception as exc:  # noqa: BLE001 - logged, polling continues
                    error = exc
                poll_end = time.monotonic()
                elapsed = poll_end - poll_start

                if elapsed > period:
                    this_poll = int((poll_start - start_time) // period)
                    next_poll = int((poll_end - start_time) // period)
                    logger.warning(
                        "%s: missed %d poll trigger(s)", mon_name, next_poll - this_poll
                    )

                if complete.is_set():
                    break
                if error is None:
                    logger.debug("%s: polled in %.6fs", mon_name, elapsed)
                    results.push(value)
                else:
                    logger.error("%s: failed to poll with error '%s'", mon_name, error)

            with lock:
                sink[mon_name] = results

        return work

    def _lifecycle_hook(
        self, lifecycle_name: str, func: Callable[[Monitor], R]
    ) -> dict[str, R]:
        """Run ``func`` on every monitor at once, each in its own thread."""
        if not self.monitors:
            return {}
        results: dict[str, R] = {}
        lock = threading.Lock()
        barrier = threading.Barrier(len(self.monitors))

        def make_work(mon: Monitor) -> Callable[[], None]:
            def work() -> None:
                mon_name = mon.name()
                logger.debug("%s: blocking on '%s' lifecycle barrier", mon_name, lifecycle_name)
                barrier.wait()
                logger.debug("%s: released from '%s' lifecycle barrier", mon_name, lifecycle_name)
                result = func(mon)
                with lock:
                    results[mon_name] = result

            return work

        workers = [
            _Worker(f"{lifecycle_name}-{index}", make_work(mon), barrier)
            for index, mon in enumerate(self.monitors)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        error = _first_error(workers)
        if error is not None:
            raise RuntimeError(f"lifecycle hook exception: {error!r}") from error
        return results

    def __repr__(self) -> str:
        return f"Benchmark(name={self.metadata.name!r}, monitors={len(self.monitors)})"