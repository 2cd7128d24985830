"""
Main Orchestrator for Finance Tracker

This module ties the components together behind one facade that the
presentation layer calls:
1. Transactions (validate → persist → audit)
2. Settings (budget, currency, theme)
3. CSV transfer (import merges into the store, export names the file)
4. Dashboard (totals, category split, monthly trend, recent, budget)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing persists without passing validation
- Validation problems come back as messages, never as exceptions
- Every mutation is audited

The facade holds no session state. Filters, edit targets and chart
objects belong to the presentation layer.
"""

import datetime as dt
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Optional, Union

from finance_tracker.audit import AuditLogger, configure_logging
from finance_tracker.config import TrackerSettings, get_settings
from finance_tracker.models.summary import DashboardSummary, TransactionFilter
from finance_tracker.models.transaction import (
    CsvExport,
    ImportResult,
    Theme,
    Transaction,
    TransactionInput,
    TransactionUpdate,
    UserSettings,
)
from finance_tracker.queries import Aggregator
from finance_tracker.services.csv_codec import decode, encode, export_filename
from finance_tracker.services.storage import (
    InMemoryKeyValueStore,
    NotFoundError,
    RecordStore,
    StorageError,
    create_backend,
)
from finance_tracker.validation import TransactionValidator, parse_amount, parse_date


NOT_FOUND_MESSAGE = "Transaction not found"

InputLike = Union[TransactionInput, Mapping[str, Any]]


def _as_input(data: InputLike) -> TransactionInput:
    if isinstance(data, TransactionInput):
        return data
    return TransactionInput.model_validate(data)


def format_money(amount: Decimal, currency: str) -> str:
    """Format an amount the way the dashboard shows it, e.g. '₹1234.50'."""
    return f"{currency}{amount:.2f}"


class FinanceTracker:
    """
    Facade over the record store, aggregator, codec and validator.

    Every method takes and returns plain data (pydantic models, lists,
    strings), so any UI can drive it.
    """

    def __init__(
        self,
        store: Optional[RecordStore] = None,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[TrackerSettings] = None,
    ):
        self._settings = settings or get_settings().tracker
        self._store = store or RecordStore(create_backend())
        self._validator = validator or TransactionValidator()
        self._aggregator = Aggregator(self._store, self._settings)
        self._audit = audit_logger or AuditLogger()

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def aggregator(self) -> Aggregator:
        return self._aggregator

    @property
    def audit(self) -> AuditLogger:
        return self._audit

    @contextmanager
    def _storage_operation(self, operation: str) -> Iterator[None]:
        """Audit storage failures, then let them propagate."""
        try:
            yield
        except StorageError as e:
            self._audit.log_storage_error(operation, str(e))
            raise

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def add_transaction(self, data: InputLike) -> tuple[Optional[Transaction], list[str]]:
        """
        Validate and store a new transaction.

        Returns:
            (transaction, []) on success, (None, errors) otherwise
        """
        data = _as_input(data)
        errors = self._validator.validate_transaction(data)
        if errors:
            self._audit.log_validation_failed("transaction", errors)
            return None, errors

        transaction = Transaction(
            type=data.type,
            category=data.category,
            amount=parse_amount(data.amount),
            date=parse_date(data.date),
            description=data.description or None,
        )
        with self._storage_operation("add_transaction"):
            stored = self._store.add(transaction)

        self._audit.log_transaction_added(
            transaction_id=stored.id,
            transaction_type=stored.type.value,
            amount=str(stored.amount),
        )
        return stored, []

    def edit_transaction(
        self,
        transaction_id: str,
        data: InputLike,
    ) -> tuple[Optional[Transaction], list[str]]:
        """
        Validate and apply an edit.

        Fields missing from `data` keep their stored values. The merged
        record is validated as a whole.
        """
        data = _as_input(data)
        with self._storage_operation("edit_transaction"):
            try:
                existing = self._store.require(transaction_id)
            except NotFoundError:
                self._audit.log_validation_failed(
                    "transaction", [NOT_FOUND_MESSAGE], entity_id=transaction_id
                )
                return None, [NOT_FOUND_MESSAGE]

        merged = TransactionInput.from_transaction(existing).model_copy(
            update=data.model_dump(exclude_unset=True)
        )
        errors = self._validator.validate_transaction(merged)
        if errors:
            self._audit.log_validation_failed("transaction", errors, entity_id=transaction_id)
            return None, errors

        changes = TransactionUpdate(
            type=merged.type,
            category=merged.category,
            amount=parse_amount(merged.amount),
            date=parse_date(merged.date),
            description=merged.description or None,
        )
        with self._storage_operation("edit_transaction"):
            updated = self._store.update(transaction_id, changes)
        if updated is None:
            # Removed between the read and the write
            return None, [NOT_FOUND_MESSAGE]

        changed = sorted(
            name for name in changes.model_fields_set
            if getattr(existing, name) != getattr(updated, name)
        )
        self._audit.log_transaction_updated(transaction_id, changed)
        return updated, []

    def delete_transaction(self, transaction_id: str) -> list[Transaction]:
        """Delete by id; unknown ids are a no-op. Returns what remains."""
        with self._storage_operation("delete_transaction"):
            before = self._store.list_transactions()
            remaining = self._store.delete(transaction_id)
        self._audit.log_transaction_deleted(
            transaction_id, found=len(remaining) < len(before)
        )
        return remaining

    def history(self, criteria: Optional[TransactionFilter] = None) -> list[Transaction]:
        """Transaction history, filtered and newest first."""
        return self._aggregator.filtered(criteria or TransactionFilter())

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def set_monthly_budget(self, amount: Any) -> Optional[str]:
        """
        Validate and save the monthly budget.

        Returns an error message, or None once saved.
        """
        error = self._validator.validate_budget(amount)
        if error:
            self._audit.log_validation_failed("budget", [error])
            return error

        with self._storage_operation("set_monthly_budget"):
            settings = self._store.get_settings().model_copy(
                update={"monthly_budget": parse_amount(amount)}
            )
            self._store.save_settings(settings)
        self._audit.log_settings_saved(settings.currency, str(settings.monthly_budget))
        return None

    def set_currency(self, currency: str) -> Optional[str]:
        """
        Validate and save a new currency symbol, keeping the budget.

        Returns an error message, or None once saved.
        """
        error = self._validator.validate_currency(currency)
        if error:
            self._audit.log_validation_failed("currency", [error])
            return error

        with self._storage_operation("set_currency"):
            current = self._store.get_settings()
            settings = UserSettings(currency=currency, monthly_budget=current.monthly_budget)
            self._store.save_settings(settings)
        budget = str(settings.monthly_budget) if settings.monthly_budget else None
        self._audit.log_settings_saved(settings.currency, budget)
        return None

    def set_theme(self, theme: Union[Theme, str]) -> Theme:
        theme = Theme(theme)
        with self._storage_operation("set_theme"):
            self._store.save_theme(theme)
        self._audit.log_theme_saved(theme.value)
        return theme

    def clear_all_data(self) -> None:
        """Remove every transaction and the saved settings."""
        with self._storage_operation("clear_all_data"):
            self._store.clear_all()
        self._audit.log_data_cleared()

    # -------------------------------------------------------------------------
    # CSV transfer
    # -------------------------------------------------------------------------

    def import_csv(self, text: str) -> ImportResult:
        """
        Decode CSV text and append the accepted rows to the store.

        Existing transactions are kept.
        """
        result = decode(text)
        if result.transactions:
            with self._storage_operation("import_csv"):
                merged = [*self._store.list_transactions(), *result.transactions]
                self._store.replace_all(merged)
            self._audit.log_transactions_replaced(len(merged))
        self._audit.log_csv_imported(result.imported, result.skipped)
        return result

    def export_csv(self, today: Optional[dt.date] = None) -> Optional[CsvExport]:
        """
        Export every transaction.

        Returns None when there is nothing to export.
        """
        with self._storage_operation("export_csv"):
            transactions = self._store.list_transactions()
        content = encode(transactions)
        if content is None:
            return None

        export = CsvExport(
            filename=export_filename(today, prefix=self._settings.export_filename_prefix),
            content=content,
            row_count=len(transactions),
        )
        self._audit.log_csv_exported(export.filename, export.row_count)
        return export

    # -------------------------------------------------------------------------
    # Dashboard
    # -------------------------------------------------------------------------

    def dashboard(self, reference_date: Optional[dt.date] = None) -> DashboardSummary:
        """Everything the dashboard shows, computed from one read of settings."""
        settings = self._store.get_settings()
        return DashboardSummary(
            currency=settings.currency,
            totals=self._aggregator.totals(),
            by_category=self._aggregator.by_category(),
            monthly_series=self._aggregator.monthly_series(reference_date=reference_date),
            recent=self._aggregator.recent(),
            budget=self._aggregator.budget_status(settings),
        )


def create_tracker(use_storage: bool = True) -> FinanceTracker:
    """
    Factory function to create a ready-to-use tracker.

    Args:
        use_storage: Whether to use the configured backend.
                    Set to False for an in-memory tracker.
    """
    settings = get_settings()
    configure_logging(settings.tracker.debug_mode)

    if use_storage:
        store = RecordStore(create_backend(settings.storage))
    else:
        store = RecordStore(InMemoryKeyValueStore())

    return FinanceTracker(store=store, settings=settings.tracker)
