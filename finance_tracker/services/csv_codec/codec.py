"""
CSV Import/Export

Export writes a fixed five-column layout with every field quoted.
Import reads the same layout back, one row at a time, and keeps going
past bad rows: partial success is the expected outcome for hand-edited
files, and it is reported as counts rather than errors.

DESIGN DECISION: A row is only imported if it produces a valid
Transaction. Rows with an unknown type, a missing category, an
unparseable date or an amount that is not a positive number are
skipped. Nothing that would break the at-rest invariants gets in.
"""

import datetime as dt
from collections.abc import Iterable
from typing import Optional

from pydantic import ValidationError

from finance_tracker.audit import get_logger
from finance_tracker.models.transaction import (
    ImportResult,
    Transaction,
    TransactionType,
)
from finance_tracker.services.csv_codec.tokenizer import QUOTE, tokenize_line
from finance_tracker.validation import parse_amount, parse_date


logger = get_logger(__name__)

HEADER = ("Date", "Type", "Category", "Amount", "Description")
MIN_FIELDS = 4


class MalformedRowError(ValueError):
    """A CSV data row that cannot become a Transaction."""

    def __init__(self, reason: str, line_number: Optional[int] = None):
        self.reason = reason
        self.line_number = line_number
        super().__init__(reason if line_number is None else f"line {line_number}: {reason}")


def _cell(value: str) -> str:
    # The grammar has no quote escape and rows are newline-delimited
    cleaned = value.replace(QUOTE, "").replace("\r", " ").replace("\n", " ")
    return f'{QUOTE}{cleaned}{QUOTE}'


def encode(transactions: Iterable[Transaction]) -> Optional[str]:
    """
    Serialize transactions to CSV text.

    Returns:
        The CSV document, or None if there is nothing to export
    """
    rows = [
        ",".join(_cell(cell) for cell in (
            t.date.isoformat(),
            t.type.value,
            t.category,
            format(t.amount, "f"),
            t.description or "",
        ))
        for t in transactions
    ]
    if not rows:
        return None
    return "\n".join([",".join(HEADER), *rows])


def parse_row(fields: list[str], line_number: Optional[int] = None) -> Transaction:
    """
    Build a transaction from one tokenized data row.

    The returned transaction carries a fresh id and timestamp.

    Raises:
        MalformedRowError: If the row cannot be imported
    """
    if len(fields) < MIN_FIELDS:
        raise MalformedRowError(
            f"expected at least {MIN_FIELDS} fields, got {len(fields)}", line_number
        )

    values = [f.strip() for f in fields]
    raw_date, raw_type, category, raw_amount = values[:MIN_FIELDS]
    description = values[4] if len(values) > 4 else ""

    transaction_type = raw_type.lower()
    if transaction_type not in (TransactionType.INCOME.value, TransactionType.EXPENSE.value):
        raise MalformedRowError(f"unknown type {raw_type!r}", line_number)

    # Thousands separators, as spreadsheets write them
    amount = parse_amount(raw_amount.replace(",", ""))
    if amount is None or amount <= 0:
        raise MalformedRowError(f"invalid amount {raw_amount!r}", line_number)

    date = parse_date(raw_date)
    if date is None:
        raise MalformedRowError(f"invalid date {raw_date!r}", line_number)

    try:
        return Transaction(
            type=transaction_type,
            category=category,
            amount=amount,
            date=date,
            description=description or None,
        )
    except ValidationError as e:
        raise MalformedRowError(
            "; ".join(err["msg"] for err in e.errors()), line_number
        ) from e


def decode(text: str) -> ImportResult:
    """
    Parse CSV text into importable transactions.

    The first non-blank line is the header and is skipped by position;
    its content is never checked.
    """
    lines = [line.rstrip("\r") for line in text.split("\n") if line.strip()]
    if len(lines) < 2:
        return ImportResult()

    transactions = []
    skipped = 0
    for line_number, line in enumerate(lines[1:], start=2):
        try:
            transactions.append(parse_row(tokenize_line(line), line_number))
        except MalformedRowError as e:
            skipped += 1
            logger.debug("csv_row_skipped", line=e.line_number, reason=e.reason)

    return ImportResult(transactions=transactions, skipped=skipped)


def export_filename(today: Optional[dt.date] = None, prefix: str = "finance-tracker") -> str:
    """Download name for an export made on `today`."""
    return f"{prefix}-{(today or dt.date.today()).isoformat()}.csv"
