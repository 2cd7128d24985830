"""
Aggregation Engine

DESIGN DECISION: Every aggregate is recomputed from the full transaction
list on every call. There are no maintained indices or cached sums.
One user's history is small enough that a linear pass is always fast,
and nothing can drift out of sync with the stored records.

The functions in this module are pure and take the transaction list
explicitly. The Aggregator class binds them to a RecordStore.
"""

import datetime as dt
from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Optional

from finance_tracker.config import TrackerSettings, get_settings
from finance_tracker.models.summary import (
    BudgetLevel,
    BudgetStatus,
    MonthBucket,
    Totals,
    TransactionFilter,
)
from finance_tracker.models.transaction import Transaction, TransactionType, UserSettings
from finance_tracker.services.storage import RecordStore


MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

ZERO = Decimal("0")


# =============================================================================
# PURE AGGREGATIONS
# =============================================================================

def calculate_totals(transactions: Iterable[Transaction]) -> Totals:
    """Sum amounts by type. An empty list gives all zeros."""
    income = ZERO
    expenses = ZERO
    for t in transactions:
        if t.type == TransactionType.INCOME:
            income += t.amount
        else:
            expenses += t.amount
    return Totals(income=income, expenses=expenses, balance=income - expenses)


def expenses_by_category(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """
    Expense total per category, in first-seen order.

    Income never contributes, and categories without expenses are absent.
    """
    sums: dict[str, Decimal] = {}
    for t in transactions:
        if t.type == TransactionType.EXPENSE:
            sums[t.category] = sums.get(t.category, ZERO) + t.amount
    return sums


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """Move a (year, zero-based month) pair by `offset` months."""
    return divmod(year * 12 + month + offset, 12)


def monthly_series(
    transactions: Iterable[Transaction],
    month_count: int = 6,
    reference_date: Optional[dt.date] = None,
) -> list[MonthBucket]:
    """
    Income and expenses for `month_count` consecutive months, oldest first.

    The last bucket is the month of `reference_date` (today by default).
    Transactions outside the window are ignored.
    """
    if month_count < 0:
        raise ValueError(f"month_count must not be negative: {month_count}")

    reference = reference_date or dt.date.today()
    keys = [
        _shift_month(reference.year, reference.month - 1, -offset)
        for offset in range(month_count - 1, -1, -1)
    ]
    income = dict.fromkeys(keys, ZERO)
    expenses = dict.fromkeys(keys, ZERO)

    for t in transactions:
        key = (t.date.year, t.date.month - 1)
        if key not in income:
            continue
        if t.type == TransactionType.INCOME:
            income[key] += t.amount
        else:
            expenses[key] += t.amount

    return [
        MonthBucket(
            label=f"{MONTH_ABBREVIATIONS[month]} {year}",
            year=year,
            month=month,
            income=income[(year, month)],
            expenses=expenses[(year, month)],
        )
        for year, month in keys
    ]


def filter_transactions(
    transactions: Iterable[Transaction],
    criteria: TransactionFilter,
) -> list[Transaction]:
    """Apply the history page filters. Order is preserved."""
    result = list(transactions)

    if criteria.type != "all":
        result = [t for t in result if t.type.value == criteria.type]

    if criteria.category != "all":
        result = [t for t in result if t.category == criteria.category]

    if criteria.month:
        year, month = (int(part) for part in criteria.month.split("-"))
        result = [t for t in result if t.date.year == year and t.date.month == month]

    return result


def sort_newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Sort by date, newest first. Same-day records keep their order."""
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def calculate_budget_status(
    expenses: Decimal,
    budget: Decimal,
    warning_percent: float = 70.0,
    critical_percent: float = 90.0,
) -> BudgetStatus:
    """Spending progress against `budget`, capped at 100 %."""
    percentage = min(float(expenses / budget * 100), 100.0)

    if percentage >= critical_percent:
        level = BudgetLevel.CRITICAL
    elif percentage >= warning_percent:
        level = BudgetLevel.WARNING
    else:
        level = BudgetLevel.NORMAL

    return BudgetStatus(
        budget=budget,
        spent=expenses,
        remaining=max(budget - expenses, ZERO),
        percentage=percentage,
        level=level,
    )


# =============================================================================
# STORE-BOUND AGGREGATOR
# =============================================================================

class Aggregator:
    """
    Runs the aggregations above over everything in a RecordStore.

    GUARANTEES:
    - Only reports what is stored
    - Every call reads the store afresh
    """

    def __init__(
        self,
        store: RecordStore,
        settings: Optional[TrackerSettings] = None,
    ):
        self._store = store
        self._settings = settings or get_settings().tracker

    def _transactions(self) -> Sequence[Transaction]:
        return self._store.list_transactions()

    def totals(self) -> Totals:
        return calculate_totals(self._transactions())

    def by_category(self) -> dict[str, Decimal]:
        return expenses_by_category(self._transactions())

    def monthly_series(
        self,
        month_count: Optional[int] = None,
        reference_date: Optional[dt.date] = None,
    ) -> list[MonthBucket]:
        """Trend buckets; the window defaults to the configured month count."""
        if month_count is None:
            month_count = self._settings.monthly_series_months
        return monthly_series(self._transactions(), month_count, reference_date)

    def filtered(self, criteria: TransactionFilter) -> list[Transaction]:
        """Filtered history, newest first."""
        return sort_newest_first(filter_transactions(self._transactions(), criteria))

    def recent(self, limit: Optional[int] = None) -> list[Transaction]:
        """The newest `limit` transactions."""
        if limit is None:
            limit = self._settings.recent_limit
        return sort_newest_first(self._transactions())[:limit]

    def budget_status(
        self,
        settings: Optional[UserSettings] = None,
    ) -> Optional[BudgetStatus]:
        """
        Spending against the monthly budget.

        Returns None if no budget is set. Spending is the all-time
        expense total.
        """
        settings = settings or self._store.get_settings()
        if settings.monthly_budget is None:
            return None
        return calculate_budget_status(
            self.totals().expenses,
            settings.monthly_budget,
            warning_percent=self._settings.budget_warning_percent,
            critical_percent=self._settings.budget_critical_percent,
        )
