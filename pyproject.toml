[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vgpu_bench"
version = "0.1.0"
description = "Run benchmarks alongside periodically polled monitors and write their measurements to CSV."
requires-python = ">=3.10"
dependencies = [
    "psutil",
]
keywords = ["benchmark", "monitoring", "measurements", "csv", "profiling"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["vgpu_bench"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
