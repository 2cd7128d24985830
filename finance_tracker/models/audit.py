"""
Audit Models for Finance Tracker

Every mutation of the store is logged for audit purposes.
This provides:
1. Traceability of edits, imports and deletions
2. Debugging information when an import goes wrong
3. Ability to reconstruct what happened to the user's data

DESIGN DECISION: Audit events are immutable records. They are emitted,
never edited.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every mutating operation of the tracker has its own event type.
    """
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    TRANSACTIONS_REPLACED = "transactions_replaced"

    # Settings
    SETTINGS_SAVED = "settings_saved"
    THEME_SAVED = "theme_saved"
    DATA_CLEARED = "data_cleared"

    # CSV transfer
    CSV_EXPORTED = "csv_exported"
    CSV_IMPORTED = "csv_imported"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # System events
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'settings', 'csv')"
    )
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction_id, "expense", "12.50")
        event = AuditEventBuilder.csv_imported(imported=10, skipped=2)
    """

    @staticmethod
    def transaction_added(
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction added: {transaction_type} {amount}",
            details={
                "type": transaction_type,
                "amount": amount,
            },
        )

    @staticmethod
    def transaction_updated(
        transaction_id: str,
        changed_fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction updated: {', '.join(changed_fields) or 'no changes'}",
            details={
                "changed_fields": changed_fields,
            },
        )

    @staticmethod
    def transaction_deleted(
        transaction_id: str,
        found: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=(
                "Transaction deleted" if found
                else "Delete requested for unknown transaction"
            ),
            details={
                "found": found,
            },
        )

    @staticmethod
    def transactions_replaced(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_REPLACED,
            entity_type="transaction",
            description=f"Transaction list replaced with {count} records",
            details={
                "count": count,
            },
        )

    @staticmethod
    def settings_saved(currency: str, monthly_budget: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SETTINGS_SAVED,
            entity_type="settings",
            description="Settings saved",
            details={
                "currency": currency,
                "monthly_budget": monthly_budget,
            },
        )

    @staticmethod
    def theme_saved(theme: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.THEME_SAVED,
            entity_type="settings",
            description=f"Theme set to {theme}",
            details={
                "theme": theme,
            },
        )

    @staticmethod
    def data_cleared() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_CLEARED,
            severity=AuditSeverity.WARNING,
            description="All transactions and settings cleared",
        )

    @staticmethod
    def csv_exported(filename: str, row_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CSV_EXPORTED,
            entity_type="csv",
            entity_id=filename,
            description=f"Exported {row_count} transactions to {filename}",
            details={
                "row_count": row_count,
            },
        )

    @staticmethod
    def csv_imported(imported: int, skipped: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CSV_IMPORTED,
            severity=AuditSeverity.WARNING if skipped else AuditSeverity.INFO,
            entity_type="csv",
            description=f"Imported {imported} transactions, skipped {skipped} rows",
            details={
                "imported": imported,
                "skipped": skipped,
            },
        )

    @staticmethod
    def validation_failed(
        subject: str,
        errors: list[str],
        entity_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=subject,
            entity_id=entity_id,
            description=f"{subject.capitalize()} validation failed with {len(errors)} issues",
            details={
                "errors": errors,
            },
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )
