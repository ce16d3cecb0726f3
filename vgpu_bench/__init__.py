"""Run benchmarks alongside polling monitors and record their measurements."""

__version__ = "0.1.0"