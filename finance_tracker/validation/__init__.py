"""Input validation package."""

from finance_tracker.validation.validator import (
    TransactionValidator,
    parse_amount,
    parse_date,
    validate_budget,
    validate_currency,
    validate_transaction,
)

__all__ = [
    "TransactionValidator",
    "parse_amount",
    "parse_date",
    "validate_budget",
    "validate_currency",
    "validate_transaction",
]
