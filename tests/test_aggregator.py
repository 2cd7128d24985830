"""
Tests for the aggregation engine.
"""

import pytest
from datetime import date
from decimal import Decimal

from finance_tracker.config import StorageSettings, TrackerSettings
from finance_tracker.models.summary import BudgetLevel, TransactionFilter
from finance_tracker.models.transaction import Transaction, TransactionType, UserSettings
from finance_tracker.queries import (
    Aggregator,
    calculate_budget_status,
    calculate_totals,
    expenses_by_category,
    filter_transactions,
    monthly_series,
    sort_newest_first,
)
from finance_tracker.services.storage import InMemoryKeyValueStore, RecordStore


def income(amount, day=date(2024, 1, 15), category="💰 Salary") -> Transaction:
    return Transaction(
        type=TransactionType.INCOME,
        category=category,
        amount=Decimal(str(amount)),
        date=day,
    )


def expense(amount, day=date(2024, 1, 15), category="🍔 Food & Dining") -> Transaction:
    return Transaction(
        type=TransactionType.EXPENSE,
        category=category,
        amount=Decimal(str(amount)),
        date=day,
    )


@pytest.fixture
def store():
    return RecordStore(
        InMemoryKeyValueStore(),
        storage_settings=StorageSettings(key_prefix="financeTracker"),
        default_currency="₹",
    )


class TestTotals:
    """Tests for calculate_totals."""

    def test_totals(self):
        """Test income, expenses and balance."""
        totals = calculate_totals([income(100), expense(40), expense(10)])
        assert totals.income == Decimal("100")
        assert totals.expenses == Decimal("50")
        assert totals.balance == Decimal("50")

    def test_empty(self):
        """Test that no transactions give zeros."""
        totals = calculate_totals([])
        assert totals.income == totals.expenses == totals.balance == 0

    def test_negative_balance(self):
        """Test that the balance can go below zero."""
        assert calculate_totals([income(10), expense(25)]).balance == Decimal("-15")

    def test_decimal_precision(self):
        """Test that cents add up exactly."""
        totals = calculate_totals([expense("0.1"), expense("0.2")])
        assert totals.expenses == Decimal("0.3")


class TestByCategory:
    """Tests for expenses_by_category."""

    def test_expenses_only(self):
        """Test that income never appears in the breakdown."""
        result = expenses_by_category([
            income(1000),
            expense(20, category="Food"),
            expense(5, category="Travel"),
            expense(30, category="Food"),
        ])
        assert result == {"Food": Decimal("50"), "Travel": Decimal("5")}

    def test_first_seen_order(self):
        """Test categories keep the order they first appeared in."""
        result = expenses_by_category([
            expense(1, category="B"),
            expense(1, category="A"),
        ])
        assert list(result) == ["B", "A"]

    def test_no_expenses(self):
        """Test an income-only list."""
        assert expenses_by_category([income(5)]) == {}


class TestMonthlySeries:
    """Tests for monthly_series."""

    def test_six_months_ending_june(self):
        """Test labels for a window ending mid-year."""
        series = monthly_series([], 6, date(2024, 6, 15))
        assert [b.label for b in series] == [
            "Jan 2024", "Feb 2024", "Mar 2024", "Apr 2024", "May 2024", "Jun 2024",
        ]
        assert [b.month for b in series] == [0, 1, 2, 3, 4, 5]
        assert all(b.income == 0 and b.expenses == 0 for b in series)

    def test_window_crosses_year(self):
        """Test that months wrap into the previous year."""
        series = monthly_series([], 4, date(2024, 2, 10))
        assert [b.label for b in series] == [
            "Nov 2023", "Dec 2023", "Jan 2024", "Feb 2024",
        ]
        assert series[0].year == 2023
        assert series[0].month == 10

    def test_buckets_amounts(self):
        """Test sums per month and that outside records are ignored."""
        series = monthly_series(
            [
                income(100, date(2024, 5, 1)),
                expense(30, date(2024, 5, 31)),
                expense(20, date(2024, 6, 2)),
                expense(999, date(2023, 12, 31)),
                expense(999, date(2023, 5, 10)),
            ],
            2,
            date(2024, 6, 15),
        )
        may, june = series
        assert (may.income, may.expenses) == (Decimal("100"), Decimal("30"))
        assert (june.income, june.expenses) == (0, Decimal("20"))

    def test_zero_months(self):
        """Test an empty window."""
        assert monthly_series([income(1)], 0, date(2024, 6, 15)) == []

    def test_negative_months(self):
        """Test that a negative window is an error."""
        with pytest.raises(ValueError):
            monthly_series([], -1, date(2024, 6, 15))


class TestFilterAndSort:
    """Tests for history filtering and ordering."""

    def test_filter_by_type(self):
        """Test the type filter."""
        records = [income(1), expense(2)]
        result = filter_transactions(records, TransactionFilter(type="expense"))
        assert result == [records[1]]

    def test_filter_by_category(self):
        """Test the category filter."""
        records = [expense(1, category="A"), expense(2, category="B")]
        result = filter_transactions(records, TransactionFilter(category="B"))
        assert result == [records[1]]

    def test_filter_by_month(self):
        """Test the month filter."""
        records = [expense(1, date(2024, 1, 31)), expense(2, date(2024, 2, 1))]
        result = filter_transactions(records, TransactionFilter(month="2024-02"))
        assert result == [records[1]]

    def test_default_filter_keeps_everything(self):
        """Test that 'all' filters nothing."""
        records = [income(1), expense(2)]
        assert filter_transactions(records, TransactionFilter()) == records

    def test_sort_newest_first_is_stable(self):
        """Test date-descending order with ties kept in storage order."""
        old = expense(1, date(2024, 1, 1))
        same_a = expense(2, date(2024, 3, 1))
        same_b = expense(3, date(2024, 3, 1))
        assert sort_newest_first([old, same_a, same_b]) == [same_a, same_b, old]


class TestBudgetStatus:
    """Tests for calculate_budget_status."""

    def test_normal(self):
        """Test spending well below budget."""
        status = calculate_budget_status(Decimal("200"), Decimal("1000"))
        assert status.percentage == pytest.approx(20.0)
        assert status.remaining == Decimal("800")
        assert status.level == BudgetLevel.NORMAL

    def test_warning_and_critical(self):
        """Test the 70 and 90 percent thresholds."""
        assert calculate_budget_status(Decimal("70"), Decimal("100")).level == BudgetLevel.WARNING
        assert calculate_budget_status(Decimal("90"), Decimal("100")).level == BudgetLevel.CRITICAL

    def test_overspent_is_capped(self):
        """Test that overspending caps at 100 percent and zero remaining."""
        status = calculate_budget_status(Decimal("1500"), Decimal("1000"))
        assert status.percentage == 100.0
        assert status.remaining == 0
        assert status.spent == Decimal("1500")


class TestAggregator:
    """Tests for the store-bound Aggregator."""

    def test_reads_store_afresh(self, store):
        """Test that new records show up without any refresh."""
        aggregator = Aggregator(store, TrackerSettings())
        assert aggregator.totals().balance == 0
        store.add(income(100))
        store.add(expense(40))
        assert aggregator.totals().balance == Decimal("60")
        assert aggregator.by_category() == {"🍔 Food & Dining": Decimal("40")}

    def test_configured_window(self, store):
        """Test that the default month count comes from settings."""
        aggregator = Aggregator(store, TrackerSettings(monthly_series_months=3))
        assert len(aggregator.monthly_series(reference_date=date(2024, 6, 15))) == 3
        assert len(aggregator.monthly_series(12, date(2024, 6, 15))) == 12

    def test_recent(self, store):
        """Test the newest records, limited."""
        for day in range(1, 8):
            store.add(expense(day, date(2024, 1, day)))
        aggregator = Aggregator(store, TrackerSettings(recent_limit=5))

        recent = aggregator.recent()
        assert [t.date.day for t in recent] == [7, 6, 5, 4, 3]
        assert len(aggregator.recent(2)) == 2

    def test_filtered_is_newest_first(self, store):
        """Test that history comes back newest first."""
        store.add(expense(1, date(2024, 1, 1)))
        store.add(expense(2, date(2024, 2, 1)))
        history = Aggregator(store, TrackerSettings()).filtered(TransactionFilter())
        assert [t.date.month for t in history] == [2, 1]

    def test_budget_status_without_budget(self, store):
        """Test that no budget means no status."""
        assert Aggregator(store, TrackerSettings()).budget_status() is None

    def test_budget_status_with_budget(self, store):
        """Test status against the saved budget."""
        store.save_settings(UserSettings(monthly_budget=Decimal("100")))
        store.add(expense(75))
        status = Aggregator(store, TrackerSettings()).budget_status()
        assert status.level == BudgetLevel.WARNING
        assert status.remaining == Decimal("25")

    def test_budget_thresholds_from_settings(self, store):
        """Test configurable thresholds."""
        store.add(expense(50))
        settings = TrackerSettings(budget_warning_percent=40.0, budget_critical_percent=45.0)
        status = Aggregator(store, settings).budget_status(
            UserSettings(monthly_budget=Decimal("100"))
        )
        assert status.level == BudgetLevel.CRITICAL


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
