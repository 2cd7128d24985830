"""Aggregation package."""

from finance_tracker.queries.aggregator import (
    Aggregator,
    calculate_budget_status,
    calculate_totals,
    expenses_by_category,
    filter_transactions,
    monthly_series,
    sort_newest_first,
)

__all__ = [
    "Aggregator",
    "calculate_budget_status",
    "calculate_totals",
    "expenses_by_category",
    "filter_transactions",
    "monthly_series",
    "sort_newest_first",
]
