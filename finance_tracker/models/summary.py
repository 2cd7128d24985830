"""
Derived Models for Finance Tracker

Everything in this module is computed fresh from the transaction list
on every call. None of it is ever persisted.
"""

from decimal import Decimal
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field

from finance_tracker.models.transaction import Transaction


class Totals(BaseModel):
    """All-time income, expenses and the balance between them."""

    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")


class MonthBucket(BaseModel):
    """
    Income and expenses for one calendar month.

    `month` is zero-based (0 = January) to match the chart series.
    """

    label: str = Field(..., description="Abbreviated month and year, e.g. 'Jan 2024'")
    year: int
    month: int = Field(..., ge=0, le=11)
    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")


class BudgetLevel(str, Enum):
    """How close spending is to the monthly budget."""
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class BudgetStatus(BaseModel):
    """Progress of spending against the monthly budget."""

    budget: Decimal = Field(..., gt=0)
    spent: Decimal = Field(..., ge=0)
    remaining: Decimal = Field(..., ge=0, description="Never below zero")
    percentage: float = Field(..., ge=0.0, le=100.0, description="Capped at 100")
    level: BudgetLevel


class TransactionFilter(BaseModel):
    """
    Transaction history filter.

    `all` disables the type or category filter; `month` is `YYYY-MM`.
    """

    type: Literal["all", "income", "expense"] = "all"
    category: str = "all"
    month: Optional[str] = Field(
        default=None,
        pattern=r"^\d{4}-(0[1-9]|1[0-2])$",
    )


class DashboardSummary(BaseModel):
    """Everything the dashboard page renders, in one call."""

    currency: str
    totals: Totals
    by_category: dict[str, Decimal] = Field(default_factory=dict)
    monthly_series: list[MonthBucket] = Field(default_factory=list)
    recent: list[Transaction] = Field(default_factory=list)
    budget: Optional[BudgetStatus] = None
