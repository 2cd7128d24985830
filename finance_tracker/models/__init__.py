"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.transaction import (
    DEFAULT_CATEGORIES,
    CsvExport,
    ImportResult,
    Theme,
    Transaction,
    TransactionInput,
    TransactionType,
    TransactionUpdate,
    UserSettings,
    new_transaction_id,
)
from finance_tracker.models.summary import (
    BudgetLevel,
    BudgetStatus,
    DashboardSummary,
    MonthBucket,
    Totals,
    TransactionFilter,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "DEFAULT_CATEGORIES",
    "CsvExport",
    "ImportResult",
    "Theme",
    "Transaction",
    "TransactionInput",
    "TransactionType",
    "TransactionUpdate",
    "UserSettings",
    "new_transaction_id",
    # Derived models
    "BudgetLevel",
    "BudgetStatus",
    "DashboardSummary",
    "MonthBucket",
    "Totals",
    "TransactionFilter",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
