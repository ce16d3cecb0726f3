# vgpu_bench

A small library for running a benchmark function while background monitors
poll system state, then writing every measurement to CSV files.

## Installation

```
pip install .
```

## Concepts

- **Measurements** (`vgpu_bench.models.data`): an ordered collection of
  records. Decorate a class with `measurement` to make it a dataclass whose
  fields become the CSV columns, then `push` instances into a `Measurements`.
  Mappings, dataclass instances, named tuples and objects with a `to_record`
  method are all accepted as records.
- **Measurement**: a single record produced by a monitor, e.g.
  `Measurement({"value": 5})`.
- **BenchmarkFn** (`vgpu_bench.models.benchmark`): wraps the callable that does
  the work and returns `Measurements`. It can be run once; `run(name)` calls it
  inside an annotated range named `"benching <name>"`.
- **Benchmark**: a `BenchmarkFn` with a name (`BenchmarkMetadata`) and any
  number of monitors added with `.monitor(...)`. `Benchmark.from_fn(func)`
  creates one named `"Unnamed"`.
- **Monitor** (`vgpu_bench.models.monitor`): an abstract class with `name()`,
  `frequency()` and `poll()`, plus optional `on_start()` / `on_stop()` hooks.
  Each monitor is polled in its own thread at its `MonitorFrequency`
  (`MonitorFrequency.hertz(n)` or `MonitorFrequency.every(seconds)`) while the
  benchmark runs. A failed poll is logged and polling continues.
- **Ready-made monitors** (`vgpu_bench.monitors`):
  `CpuUtilizationMonitor(name, frequency)` samples CPU load over 0.75 s and
  reports `idle`, `interrupt`, `nice`, `system` and `user` as fractions;
  `MemoryUtilizationMonitor()` reports free memory as a fraction of total,
  at 100 Hz.
- **Driver** (`vgpu_bench.models.driver`): runs benchmarks one after another
  and writes the results under an output directory (default `output`). The
  `DriverWriteMode` chooses how that directory is prepared: `RELAXED`
  (default, keep existing content), `PURGE` (empty it first) or `NO_MASH`
  (fail with `AssertionError` if it is not empty). With
  `on_error_continue(True)` a failing benchmark is logged and skipped;
  otherwise its exception propagates. `Driver.extract()` returns the results
  as a `DriverBundle` without writing anything.

## Example

```python
from vgpu_bench.models.benchmark import Benchmark, BenchmarkFn, BenchmarkMetadata
from vgpu_bench.models.data import Measurement, Measurements, measurement
from vgpu_bench.models.driver import Driver, DriverWriteMode
from vgpu_bench.models.monitor import Monitor, MonitorFrequency
from vgpu_bench.monitors.cpu_utilization import CpuUtilizationMonitor
from vgpu_bench.util.log_setup import init_default


@measurement
class ExampleMeasurement:
    time: int
    amplitude: int


class ConstantMonitor(Monitor):
    def name(self):
        return "Constant"

    def frequency(self):
        return MonitorFrequency.hertz(100)

    def poll(self):
        return Measurement({"value": 5})


def work():
    measurements = Measurements()
    for i in range(10):
        measurements.push(ExampleMeasurement(time=i, amplitude=i * i))
    return measurements


init_default()
benchmark = (
    Benchmark(BenchmarkMetadata("My Benchmark"), BenchmarkFn(work))
    .monitor(ConstantMonitor())
    .monitor(CpuUtilizationMonitor("CPU Utilization", MonitorFrequency.hertz(1)))
)
(
    Driver.builder()
    .add(benchmark)
    .write_mode(DriverWriteMode.PURGE)
    .on_error_continue(True)
    .build()
    .run()
)
```

After a run, each benchmark has its own directory under the output
directory, with one CSV per monitor:

```
output/My Benchmark/measurements.csv
output/My Benchmark/monitors/Constant.csv
output/My Benchmark/monitors/CPU Utilization.csv
```

A collection that holds no records is not written.

## Utilities

- `vgpu_bench.util.io`: directory checks (`dir_exists`, `dir_is_empty`,
  `dir_is_permissive`), `dir_purge`, `create_data_landing`, file listing
  (`get_files`, `get_files_with_extension`, `files_with_extension`) and CSV
  writers (`csv_writer`, which appends and writes a header only into a new
  file, `csv_writer_relative` and the in-memory `csv_string_writer`).
- `vgpu_bench.util.exec.call_program(path, args)`: runs a program and captures
  its output, raising `ProgramFailedError` on a non-zero exit status.
- `vgpu_bench.util.log_setup`: `init(handlers)` / `init_default()` attach
  handlers to the `vgpu_bench` logger (once), and `log_assert` logs an error
  before raising `AssertionError`.
- `vgpu_bench.util.annotations`: `mark`, `range_push`, `range_pop`, the
  `annotated_range` context manager and `active_ranges`, which track nested
  named ranges per thread.

## What it does not do

- There is no command-line tool; the package is used as a library.
- Annotations are recorded per thread and written to the debug log only; they
  are not sent to any external profiler.
- `Writer` is an abstract interface with no concrete implementation; results
  are written through the bundles' `write` methods as CSV.
- There is no plotting of results.