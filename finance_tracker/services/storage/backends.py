"""
Key-Value Storage Backends

DESIGN DECISION: Two backends cover every use case we have:
1. InMemoryKeyValueStore - tests and throwaway sessions
2. FileKeyValueStore - one file per key in a data directory

TRADEOFFS:
- Whole values are rewritten on every save (fine for one user's history)
- No locking between processes (last writer wins)

The file backend writes to a temporary file and renames it over the
target, so a crash mid-write leaves the previous value intact.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.services.storage.interface import KeyValueStore, StorageError


_VALID_KEY = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")

# Transient filesystem errors (busy file, flaky network mount) get retried
_io_retry = retry(
    retry=retry_if_exception_type(OSError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    reraise=True,
)


def _check_key(key: str) -> str:
    if not _VALID_KEY.match(key):
        raise StorageError(f"Invalid storage key: {key!r}")
    return key


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed storage. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(_check_key(key))

    def set_item(self, key: str, value: str) -> None:
        self._data[_check_key(key)] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(_check_key(key), None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class FileKeyValueStore(KeyValueStore):
    """
    Directory-backed storage with one UTF-8 file per key.

    The directory is created on first write.
    """

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        return self._directory / _check_key(key)

    @_io_retry
    def _read(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    @_io_retry
    def _write(self, path: Path, value: str) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._directory,
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    @_io_retry
    def _remove(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass

    def get_item(self, key: str) -> Optional[str]:
        try:
            return self._read(self._path_for(key))
        except OSError as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        try:
            self._write(self._path_for(key), value)
        except OSError as e:
            raise StorageError(f"Failed to write {key}: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            self._remove(self._path_for(key))
        except OSError as e:
            raise StorageError(f"Failed to remove {key}: {e}") from e

    def keys(self) -> list[str]:
        if not self._directory.is_dir():
            return []
        return sorted(
            p.name for p in self._directory.iterdir()
            if p.is_file() and _VALID_KEY.match(p.name)
        )
