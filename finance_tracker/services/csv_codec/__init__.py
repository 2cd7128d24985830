"""CSV import/export package."""

from finance_tracker.services.csv_codec.codec import (
    HEADER,
    MalformedRowError,
    decode,
    encode,
    export_filename,
    parse_row,
)
from finance_tracker.services.csv_codec.tokenizer import tokenize_line

__all__ = [
    "HEADER",
    "MalformedRowError",
    "decode",
    "encode",
    "export_filename",
    "parse_row",
    "tokenize_line",
]
