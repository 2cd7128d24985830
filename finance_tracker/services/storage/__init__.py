"""
Storage Services Package

Provides the key-value storage interface, its in-memory and file
implementations, and the record store built on top of them.
"""

from pathlib import Path
from typing import Optional

from finance_tracker.config import StorageSettings, get_settings
from finance_tracker.services.storage.interface import (
    CorruptDataError,
    DuplicateError,
    KeyValueStore,
    NotFoundError,
    StorageError,
)
from finance_tracker.services.storage.backends import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
)
from finance_tracker.services.storage.record_store import RecordStore


def create_backend(settings: Optional[StorageSettings] = None) -> KeyValueStore:
    """Build the key-value backend selected in configuration."""
    settings = settings or get_settings().storage
    if settings.backend == "memory":
        return InMemoryKeyValueStore()
    return FileKeyValueStore(Path(settings.data_dir).expanduser())


__all__ = [
    # Interfaces
    "KeyValueStore",
    # Exceptions
    "CorruptDataError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "RecordStore",
    "create_backend",
]
