"""Running external programs and reporting their failures."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Iterable

logger = logging.getLogger(__name__)


def _describe_status(returncode: int) -> str:
    if returncode < 0:
        return f"signal: {-returncode}"
    return f"exit status: {returncode}"


class ProgramFailedError(RuntimeError):
    """An external program exited unsuccessfully."""

    def __init__(self, program: str, returncode: int, stderr: str) -> None:
        self.program = program
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            f"'{program}' exited with failure "
            f"({_describe_status(returncode)}, err: '{stderr}')"
        )


def call_program(
    program_path: str | os.PathLike[str],
    args: Iterable[str | os.PathLike[str]] = (),
) -> subprocess.CompletedProcess[bytes]:
    """Run a program with arguments, capturing its output.

    Raises OSError if the program cannot be started and
    ProgramFailedError if it exits with a non-zero status.
    """
    program = os.fspath(program_path)
    argv = [os.fspath(arg) for arg in args]
    logger.debug("executing process '%s'", " ".join([program, *argv]))

    try:
        completed = subprocess.run([program, *argv], capture_output=True, check=False)
    except OSError as exc:
        raise OSError(
            exc.errno, f"'{program}' was unable to execute, is it in your PATH?"
        ) from exc

    if completed.returncode != 0:
        error = ProgramFailedError(
            program,
            completed.returncode,
            completed.stderr.decode("utf-8", errors="replace"),
        )
        logger.error("%s", error)
        raise error

    logger.debug("completed program '%s' successfully", program)
    return completed