from pathlib import Path

import pytest

from vgpu_bench.models.benchmark import Benchmark, BenchmarkMetadata
from vgpu_bench.models.data import Measurements, measurement
from vgpu_bench.models.driver import (
    Driver,
    DriverBuilder,
    DriverOptions,
    DriverWriteMode,
)


@measurement
class Sample:
    time: int
    amplitude: int


def good_fn():
    result = Measurements()
    for i in range(3):
        result.push(Sample(time=i, amplitude=i * i))
    return result


def bad_fn():
    raise ValueError("failure")


def test_default_options():
    options = DriverOptions()
    assert options.output_dir == Path("output")
    assert options.write_mode is DriverWriteMode.RELAXED
    assert options.on_error_continue is False


def test_builder_sets_options(tmp_path):
    bench = Benchmark(BenchmarkMetadata("A"), good_fn)
    driver = (
        DriverBuilder()
        .on_error_continue(True)
        .write_mode(DriverWriteMode.PURGE)
        .output_dir(tmp_path)
        .add(bench)
        .build()
    )
    assert driver.options == DriverOptions(tmp_path, DriverWriteMode.PURGE, True)
    assert driver.benchmarks == [bench]


def test_from_benchmark_uses_defaults():
    bench = Benchmark.from_fn(good_fn)
    driver = Driver.from_benchmark(bench)
    assert driver.options == DriverOptions()
    assert driver.benchmarks == [bench]


def test_run_writes_measurements(tmp_path):
    out = tmp_path / "out"
    bench = Benchmark(BenchmarkMetadata("Bench"), good_fn)
    Driver.builder().output_dir(out).add(bench).build().run()
    text = (out / "Bench" / "measurements.csv").read_text()
    assert text == "time,amplitude\n0,0\n1,1\n2,4\n"


def test_extract_keys_by_name(tmp_path):
    driver = (
        Driver.builder()
        .output_dir(tmp_path)
        .add(Benchmark(BenchmarkMetadata("One"), good_fn))
        .add(Benchmark(BenchmarkMetadata("Two"), good_fn))
        .build()
    )
    bundle = driver.extract()
    assert sorted(bundle.benchmark_bundles) == ["One", "Two"]
    assert len(bundle.benchmark_bundles["One"].measurements) == 3


def test_extract_raises_without_continue(tmp_path):
    driver = (
        Driver.builder()
        .output_dir(tmp_path)
        .add(Benchmark(BenchmarkMetadata("Bad"), bad_fn))
        .build()
    )
    with pytest.raises(ValueError, match="failure"):
        driver.extract()


def test_extract_continues_past_failures(tmp_path):
    driver = (
        Driver.builder()
        .output_dir(tmp_path)
        .on_error_continue(True)
        .add(Benchmark(BenchmarkMetadata("Bad"), bad_fn))
        .add(Benchmark(BenchmarkMetadata("Good"), good_fn))
        .build()
    )
    bundle = driver.extract()
    assert list(bundle.benchmark_bundles) == ["Good"]


def test_purge_removes_stale_files(tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    stale = out / "stale.txt"
    stale.write_text("old")
    (
        Driver.builder()
        .output_dir(out)
        .write_mode(DriverWriteMode.PURGE)
        .add(Benchmark(BenchmarkMetadata("Bench"), good_fn))
        .build()
        .run()
    )
    assert not stale.exists()
    assert (out / "Bench" / "measurements.csv").is_file()


def test_relaxed_keeps_existing_files(tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    kept = out / "keep.txt"
    kept.write_text("old")
    Driver.builder().output_dir(out).add(
        Benchmark(BenchmarkMetadata("Bench"), good_fn)
    ).build().run()
    assert kept.read_text() == "old"


def test_no_mash_rejects_non_empty_output(tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    (out / "existing.txt").write_text("x")
    driver = (
        Driver.builder()
        .output_dir(out)
        .write_mode(DriverWriteMode.NO_MASH)
        .add(Benchmark(BenchmarkMetadata("Bench"), good_fn))
        .build()
    )
    with pytest.raises(AssertionError) as info:
        driver.run()
    assert "output directory is empty" in str(info.value)
    assert not (out / "Bench" / "measurements.csv").exists()