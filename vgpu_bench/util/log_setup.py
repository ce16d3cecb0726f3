"""Logging initialisation for the package and a logging assertion helper."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable

LOGGER_NAME = "vgpu_bench"
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def init(handlers: Iterable[logging.Handler]) -> bool:
    """Attach ``handlers`` to the package logger.

    Returns False, after a notice on stderr, if logging was already set up.
    """
    handlers = list(handlers)
    package_logger = logging.getLogger(LOGGER_NAME)
    if package_logger.handlers:
        print(
            "Logger failed to initialize... "
            "Was it already initialized by another driver?",
            file=sys.stderr,
        )
        return False
    for handler in handlers:
        package_logger.addHandler(handler)
    if handlers:
        package_logger.setLevel(min(handler.level or 1 for handler in handlers))
    logger.debug("logging initialized")
    return True


def init_default() -> bool:
    """Log DEBUG and above to the terminal."""
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FORMAT))
    return init([handler])


def log_assert(assertion: object, message: str | None = None) -> None:
    """Log an error and raise AssertionError when ``assertion`` is false."""
    if not assertion:
        text = message if message is not None else "Assertion failed"
        logger.error("%s", text)
        raise AssertionError(text)