import logging

import pytest

from vgpu_bench.util.log_setup import init, init_default, log_assert


@pytest.fixture(autouse=True)
def package_logger():
    pkg = logging.getLogger("vgpu_bench")
    saved_handlers = pkg.handlers[:]
    saved_level = pkg.level
    pkg.handlers.clear()
    yield pkg
    pkg.handlers[:] = saved_handlers
    pkg.setLevel(saved_level)


def test_init_installs_handlers(package_logger):
    handler = logging.NullHandler()
    handler.setLevel(logging.INFO)
    assert init([handler]) is True
    assert package_logger.handlers == [handler]
    assert package_logger.level == logging.INFO


def test_second_init_is_refused(package_logger, capsys):
    assert init([logging.NullHandler()]) is True
    assert init([logging.NullHandler()]) is False
    assert "already initialized" in capsys.readouterr().err
    assert len(package_logger.handlers) == 1


def test_init_default_logs_debug(package_logger):
    assert init_default() is True
    (handler,) = package_logger.handlers
    assert isinstance(handler, logging.StreamHandler)
    assert handler.level == logging.DEBUG
    assert package_logger.isEnabledFor(logging.DEBUG)


def test_log_assert_failure_logs_and_raises(caplog):
    with pytest.raises(AssertionError, match="output directory is empty"):
        log_assert(False, "Driver enforces output directory is empty: out")
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert [r.getMessage() for r in errors] == [
        "Driver enforces output directory is empty: out"
    ]


def test_log_assert_default_message(caplog):
    with pytest.raises(AssertionError, match="Assertion failed"):
        log_assert(0)
    errors = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert errors[0].startswith("Assertion failed")


def test_log_assert_true_logs_nothing(caplog):
    caplog.set_level(logging.DEBUG)
    log_assert(True, "never shown")
    assert all("never shown" not in r.getMessage() for r in caplog.records)