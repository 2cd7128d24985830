"""
Input Validation

DESIGN DECISION: Validation never raises at the user. It returns an
ordered list of human-readable messages, one per violated rule, and
the caller decides how to display them.

All rules are checked independently; a bad type does not hide a bad
amount. Rule order is fixed: type, category, amount, date.

The parsing helpers here are shared with the CSV codec so that a form
and an imported row accept exactly the same amounts and dates.
"""

import datetime as dt
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional, Union

from finance_tracker.models.transaction import TransactionInput, TransactionType


TYPE_MESSAGE = "Please select a valid transaction type"
CATEGORY_MESSAGE = "Please select a category"
AMOUNT_MESSAGE = "Please enter a valid amount greater than 0"
DATE_MISSING_MESSAGE = "Please select a date"
DATE_FUTURE_MESSAGE = "Date cannot be in the future"
BUDGET_MESSAGE = "Please enter a valid budget amount greater than 0"
CURRENCY_MESSAGE = "Please enter a currency symbol of 1 to 5 characters"

CURRENCY_MAX_LENGTH = 5

_VALID_TYPES = frozenset(t.value for t in TransactionType)


def parse_amount(value: Any) -> Optional[Decimal]:
    """
    Parse a user-entered amount.

    Returns None for anything that is not a finite number.
    Sign is not checked here.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None
    return amount if amount.is_finite() else None


def parse_date(value: Any) -> Optional[dt.date]:
    """Parse an ISO date (a trailing time part is ignored). None if unparseable."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return dt.date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return dt.datetime.fromisoformat(text).date()
    except ValueError:
        return None


class TransactionValidator:
    """
    Validates raw transaction and budget input before persistence.
    """

    def __init__(self, today: Optional[Callable[[], dt.date]] = None):
        """
        Args:
            today: Returns the current date. Defaults to the system date;
                tests pass a fixed one.
        """
        self._today = today or dt.date.today

    def validate_transaction(
        self,
        data: Union[TransactionInput, Mapping[str, Any]],
    ) -> list[str]:
        """
        Check a transaction input.

        Returns:
            Error messages in rule order; empty means valid
        """
        if not isinstance(data, TransactionInput):
            data = TransactionInput.model_validate(data)

        errors = []

        if data.type not in _VALID_TYPES:
            errors.append(TYPE_MESSAGE)

        if not data.category or not data.category.strip():
            errors.append(CATEGORY_MESSAGE)

        amount = parse_amount(data.amount)
        if amount is None or amount <= 0:
            errors.append(AMOUNT_MESSAGE)

        # Same-day dates are fine; anything after today is not
        selected = parse_date(data.date)
        if selected is None:
            errors.append(DATE_MISSING_MESSAGE)
        elif selected > self._today():
            errors.append(DATE_FUTURE_MESSAGE)

        return errors

    def validate_budget(self, amount: Any) -> Optional[str]:
        """Return an error message, or None if the budget amount is valid."""
        parsed = parse_amount(amount)
        if parsed is None or parsed <= 0:
            return BUDGET_MESSAGE
        return None

    def validate_currency(self, currency: Any) -> Optional[str]:
        """Return an error message, or None if the currency symbol is usable."""
        if not isinstance(currency, str):
            return CURRENCY_MESSAGE
        if not 1 <= len(currency.strip()) <= CURRENCY_MAX_LENGTH:
            return CURRENCY_MESSAGE
        return None


_default_validator = TransactionValidator()


def validate_transaction(data: Union[TransactionInput, Mapping[str, Any]]) -> list[str]:
    """Validate against today's system date."""
    return _default_validator.validate_transaction(data)


def validate_budget(amount: Any) -> Optional[str]:
    return _default_validator.validate_budget(amount)


def validate_currency(currency: Any) -> Optional[str]:
    return _default_validator.validate_currency(currency)
