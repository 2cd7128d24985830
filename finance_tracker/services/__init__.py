"""Services package."""

from finance_tracker.services.csv_codec import (
    MalformedRowError,
    decode,
    encode,
    export_filename,
    tokenize_line,
)
from finance_tracker.services.storage import (
    CorruptDataError,
    DuplicateError,
    FileKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
    NotFoundError,
    RecordStore,
    StorageError,
    create_backend,
)

__all__ = [
    # CSV
    "MalformedRowError",
    "decode",
    "encode",
    "export_filename",
    "tokenize_line",
    # Storage services
    "CorruptDataError",
    "DuplicateError",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "NotFoundError",
    "RecordStore",
    "StorageError",
    "create_backend",
]
