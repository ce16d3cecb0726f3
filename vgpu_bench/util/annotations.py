"""Per-thread named marks and nested ranges for annotating benchmark runs."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)

_local = threading.local()


def _stack() -> list[str]:
    stack = getattr(_local, "stack", None)
    if stack is None:
        stack = []
        _local.stack = stack
    return stack


def mark(message: str) -> None:
    """Record an instantaneous event."""
    logger.debug("mark: %s", message)


def range_push(message: str) -> int:
    """Open a nested range; return its zero-based depth."""
    stack = _stack()
    depth = len(stack)
    stack.append(str(message))
    logger.debug("range push [%d]: %s", depth, message)
    return depth


def range_pop() -> int:
    """Close the innermost range; return the depth it was opened at."""
    stack = _stack()
    if not stack:
        raise IndexError("no annotation range is open")
    message = stack.pop()
    depth = len(stack)
    logger.debug("range pop [%d]: %s", depth, message)
    return depth


@contextmanager
def annotated_range(message: str) -> Iterator[int]:
    """Keep a range open for the duration of a ``with`` block."""
    depth = range_push(message)
    try:
        yield depth
    finally:
        range_pop()


def active_ranges() -> tuple[str, ...]:
    """Names of the ranges open in the current thread, outermost first."""
    return tuple(_stack())