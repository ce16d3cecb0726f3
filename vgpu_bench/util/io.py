"""Filesystem helpers and a small CSV record writer used for result output."""

from __future__ import annotations

import csv
import dataclasses
import io
import logging
import os
import shutil
import stat
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import IO, Any

logger = logging.getLogger(__name__)


def _record_items(record: Any) -> tuple[list[str] | None, list[Any]]:
    """Split a record into (field names or None, values)."""
    if isinstance(record, Mapping):
        return [str(key) for key in record.keys()], list(record.values())
    to_record = getattr(record, "to_record", None)
    if callable(to_record):
        return _record_items(to_record())
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        names = [field.name for field in dataclasses.fields(record)]
        return names, [getattr(record, name) for name in names]
    if isinstance(record, (str, bytes)):
        raise TypeError(f"cannot serialize {type(record).__name__} as a CSV record")
    if isinstance(record, Iterable):
        return None, list(record)
    raise TypeError(f"cannot serialize {type(record).__name__} as a CSV record")


def _format_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return value


class CsvRecordWriter:
    """Writes mappings, dataclasses or sequences as CSV rows.

    The header is taken from the field names of the first record and is
    written only when ``write_header`` is true.
    """

    def __init__(self, stream: IO[str], write_header: bool = True) -> None:
        self._stream = stream
        self._writer = csv.writer(stream, lineterminator="\n")
        self._write_header = write_header
        self._started = False
        self._width: int | None = None

    def _check_width(self, width: int) -> None:
        if self._width is None:
            self._width = width
        elif width != self._width:
            raise ValueError(
                f"found record with {width} fields, "
                f"but the previous record has {self._width} fields"
            )

    def serialize(self, record: Any) -> None:
        """Write one record, preceded by the header if it is the first one."""
        names, values = _record_items(record)
        if not self._started:
            self._started = True
            if self._write_header and names is not None:
                self._check_width(len(names))
                self._writer.writerow(names)
        self._check_width(len(values))
        self._writer.writerow([_format_value(value) for value in values])

    def flush(self) -> None:
        self._stream.flush()

    def close(self) -> None:
        if not self._stream.closed:
            self._stream.flush()
            self._stream.close()

    def getvalue(self) -> str:
        """Return everything written so far to an in-memory writer."""
        getvalue = getattr(self._stream, "getvalue", None)
        if getvalue is None:
            raise TypeError("writer is not backed by an in-memory buffer")
        return getvalue()

    def __enter__(self) -> CsvRecordWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def dir_exists(path: str | os.PathLike[str]) -> bool:
    return Path(path).is_dir()


def dir_is_empty(path: str | os.PathLike[str]) -> bool:
    if not dir_exists(path):
        return False
    with os.scandir(path) as entries:
        return next(entries, None) is None


def dir_is_permissive(path: str | os.PathLike[str]) -> bool:
    """True if ``path`` is a directory whose permissions allow writing."""
    if not dir_exists(path):
        return False
    return bool(os.stat(path).st_mode & (stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH))


def dir_create_all(path: str | os.PathLike[str]) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def dir_purge(path: str | os.PathLike[str]) -> None:
    """Remove everything inside a directory, keeping the directory."""
    if not dir_exists(path):
        raise FileNotFoundError(f"{os.fspath(path)!r} does not exist")
    shutil.rmtree(path)
    Path(path).mkdir(parents=True, exist_ok=True)


def create_data_landing(path: str | os.PathLike[str]) -> None:
    """Make sure ``path`` is a directory that output can be written into."""
    if not dir_exists(path):
        dir_create_all(path)
    elif not dir_is_permissive(path):
        raise PermissionError(f"{os.fspath(path)!r} is not permissive")


def create_or_append(path: str | os.PathLike[str]) -> IO[str]:
    """Open ``path`` for appending, creating missing parent directories."""
    target = Path(path)
    if target.name == "":
        raise ValueError("Path must have a parent")
    target.parent.mkdir(parents=True, exist_ok=True)
    return target.open("a", newline="", encoding="utf-8")


def get_files(directory: str | os.PathLike[str], recursive: bool) -> list[Path]:
    """List files under ``directory`` in sorted order.

    A path that is itself a file is returned on its own.
    """
    root = Path(directory)
    if root.is_file():
        return [root]
    if not root.is_dir():
        return []
    if not recursive:
        return [entry for entry in sorted(root.iterdir()) if entry.is_file()]
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            candidate = Path(dirpath) / name
            if candidate.is_file():
                files.append(candidate)
    return files


def _extension(path: Path) -> str | None:
    name = path.name
    index = name.rfind(".")
    if index <= 0:
        return None
    return name[index + 1:]


def get_files_with_extension(
    directory: str | os.PathLike[str], recursive: bool, ext: str
) -> list[Path]:
    return [path for path in get_files(directory, recursive) if _extension(path) == ext]


def files_with_extension(
    files: Iterable[str | os.PathLike[str]], ext: str
) -> list[Path]:
    """Keep the existing files with extension ``ext``; warn about the rest."""
    kept: list[Path] = []
    for item in files:
        path = Path(item)
        if path.is_file() and _extension(path) == ext:
            kept.append(path)
        else:
            logger.warning("'%s' is not a .%s file; file dropped", path, ext)
    return kept


def csv_writer_relative(relative_path: str | os.PathLike[str]) -> CsvRecordWriter:
    path = Path(relative_path)
    if path.is_absolute():
        raise ValueError(f"Argument '{path}' is not a relative path")
    return csv_writer(path)


def csv_writer(path: str | os.PathLike[str]) -> CsvRecordWriter:
    """Open a CSV writer appending to ``path``; the header goes only into new files."""
    stream = create_or_append(path)
    write_header = os.fstat(stream.fileno()).st_size == 0
    return CsvRecordWriter(stream, write_header)


def csv_string_writer() -> CsvRecordWriter:
    return CsvRecordWriter(io.StringIO(), True)