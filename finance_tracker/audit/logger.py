"""
Audit Logger

DESIGN DECISION: Every mutation of the user's data is logged.
This provides:
1. Traceability of edits, imports and deletions
2. Debugging capability for failed imports
3. A history the user can inspect

The audit logger:
- Is synchronous, like every other operation of the tracker
- Gracefully handles failures (never crashes the app if logging fails)
"""

import logging
from typing import Optional

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def get_logger(name: str):
    """A structlog logger using the configuration above."""
    return structlog.get_logger(name)


def configure_logging(debug: bool = False) -> None:
    """Route structlog output through the stdlib root logger at the right level."""
    logging.basicConfig(
        format="%(message)s",
        level=logging.DEBUG if debug else logging.INFO,
    )


class AuditLogger:
    """
    Central audit logging service.

    Keeps the most recent events in memory so the presentation layer
    can show a short activity history.
    """

    def __init__(self, history_size: int = 100):
        if history_size < 1:
            raise ValueError(f"history_size must be at least 1: {history_size}")
        self._logger = get_logger("finance_tracker.audit")
        self._history: list[AuditEvent] = []
        self._history_size = history_size

    @property
    def history(self) -> list[AuditEvent]:
        """Recent events, oldest first."""
        return list(self._history)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be written.
        """
        self._history.append(event)
        del self._history[:-self._history_size]

        log_dict = event.to_log_dict()
        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except (TypeError, ValueError, OSError) as e:
            # Unserializable details or a broken handler; the event is
            # still in history
            logging.getLogger(__name__).warning("audit log write failed: %s", e)
            return False
        return True

    def log_transaction_added(
        self,
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> None:
        """Log a new transaction."""
        self.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
        ))

    def log_transaction_updated(
        self,
        transaction_id: str,
        changed_fields: list[str],
    ) -> None:
        """Log an edit."""
        self.log(AuditEventBuilder.transaction_updated(
            transaction_id=transaction_id,
            changed_fields=changed_fields,
        ))

    def log_transaction_deleted(self, transaction_id: str, found: bool) -> None:
        """Log a delete, including deletes of unknown ids."""
        self.log(AuditEventBuilder.transaction_deleted(
            transaction_id=transaction_id,
            found=found,
        ))

    def log_transactions_replaced(self, count: int) -> None:
        self.log(AuditEventBuilder.transactions_replaced(count))

    def log_settings_saved(
        self,
        currency: str,
        monthly_budget: Optional[str],
    ) -> None:
        self.log(AuditEventBuilder.settings_saved(currency, monthly_budget))

    def log_theme_saved(self, theme: str) -> None:
        self.log(AuditEventBuilder.theme_saved(theme))

    def log_data_cleared(self) -> None:
        self.log(AuditEventBuilder.data_cleared())

    def log_csv_exported(self, filename: str, row_count: int) -> None:
        self.log(AuditEventBuilder.csv_exported(filename, row_count))

    def log_csv_imported(self, imported: int, skipped: int) -> None:
        self.log(AuditEventBuilder.csv_imported(imported, skipped))

    def log_validation_failed(
        self,
        subject: str,
        errors: list[str],
        entity_id: Optional[str] = None,
    ) -> None:
        """Log rejected user input."""
        self.log(AuditEventBuilder.validation_failed(
            subject=subject,
            errors=errors,
            entity_id=entity_id,
        ))

    def log_storage_error(self, operation: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_error(operation, error_message))
