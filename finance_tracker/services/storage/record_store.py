"""
Record Store

Holds the transaction list, user settings and theme preference in a
key-value backend, in the same JSON layout the browser app uses.

DESIGN DECISION: Every mutation reads the full list, changes it and
writes the full list back. There are no partial or delta writes, so
the stored value is always a complete, valid collection.
"""

from collections.abc import Iterable
from typing import Optional, Union

from pydantic import TypeAdapter, ValidationError

from finance_tracker.audit import get_logger
from finance_tracker.config import StorageSettings, get_settings
from finance_tracker.models.transaction import (
    DEFAULT_CATEGORIES,
    Theme,
    Transaction,
    TransactionType,
    TransactionUpdate,
    UserSettings,
    new_transaction_id,
    utcnow,
)
from finance_tracker.services.storage.interface import (
    CorruptDataError,
    DuplicateError,
    KeyValueStore,
    NotFoundError,
)


logger = get_logger(__name__)

_TRANSACTION_LIST = TypeAdapter(list[Transaction])


class RecordStore:
    """
    CRUD over the persisted transaction list plus settings.

    The store holds no state of its own; every call goes to the backend.
    """

    def __init__(
        self,
        backend: KeyValueStore,
        storage_settings: Optional[StorageSettings] = None,
        default_currency: Optional[str] = None,
    ):
        """
        Args:
            backend: Where values are persisted
            storage_settings: Key names. Loaded from the environment if None.
            default_currency: Currency used before the user saves settings.
                Taken from tracker settings if None.
        """
        settings = get_settings()
        self._backend = backend
        self._keys = storage_settings or settings.storage
        self._default_currency = default_currency or settings.tracker.default_currency

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def list_transactions(self) -> list[Transaction]:
        """All transactions in storage order."""
        raw = self._backend.get_item(self._keys.transactions_key)
        if raw is None:
            return []
        try:
            return _TRANSACTION_LIST.validate_json(raw)
        except ValidationError as e:
            raise CorruptDataError(
                f"Stored transactions are unreadable ({e.error_count()} errors)"
            ) from e

    def _save(self, transactions: list[Transaction]) -> None:
        seen = set()
        for transaction in transactions:
            if transaction.id in seen:
                raise DuplicateError(f"Duplicate transaction id: {transaction.id}")
            seen.add(transaction.id)

        payload = _TRANSACTION_LIST.dump_json(transactions, by_alias=True)
        self._backend.set_item(self._keys.transactions_key, payload.decode("utf-8"))

    def get(self, transaction_id: str) -> Optional[Transaction]:
        """Find a transaction by id."""
        for transaction in self.list_transactions():
            if transaction.id == transaction_id:
                return transaction
        return None

    def require(self, transaction_id: str) -> Transaction:
        """
        Find a transaction by id.

        Raises:
            NotFoundError: If no transaction has this id
        """
        transaction = self.get(transaction_id)
        if transaction is None:
            raise NotFoundError(f"Transaction not found: {transaction_id}")
        return transaction

    def add(self, transaction: Transaction) -> Transaction:
        """
        Append a transaction.

        A fresh id and creation timestamp are always assigned, whatever
        the incoming record carries.
        """
        stored = transaction.model_copy(update={
            "id": new_transaction_id(),
            "created_at": utcnow(),
        })
        transactions = self.list_transactions()
        transactions.append(stored)
        self._save(transactions)
        logger.debug("transaction_added", transaction_id=stored.id)
        return stored

    def update(
        self,
        transaction_id: str,
        changes: TransactionUpdate,
    ) -> Optional[Transaction]:
        """
        Merge `changes` into the matching transaction.

        Returns:
            The updated transaction, or None if the id is unknown
        """
        transactions = self.list_transactions()
        for index, existing in enumerate(transactions):
            if existing.id == transaction_id:
                updated = changes.apply_to(existing)
                transactions[index] = updated
                self._save(transactions)
                logger.debug(
                    "transaction_updated",
                    transaction_id=transaction_id,
                    fields=sorted(changes.model_fields_set),
                )
                return updated

        logger.debug("transaction_update_missing", transaction_id=transaction_id)
        return None

    def delete(self, transaction_id: str) -> list[Transaction]:
        """
        Remove the matching transaction, if any.

        Deleting an unknown id is a no-op. Returns the remaining list.
        """
        remaining = [t for t in self.list_transactions() if t.id != transaction_id]
        self._save(remaining)
        return remaining

    def replace_all(self, transactions: Iterable[Transaction]) -> None:
        """Overwrite the whole transaction list."""
        self._save(list(transactions))

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def default_settings(self) -> UserSettings:
        return UserSettings(currency=self._default_currency, monthly_budget=None)

    def get_settings(self) -> UserSettings:
        """Saved settings, or defaults if nothing was saved."""
        raw = self._backend.get_item(self._keys.settings_key)
        if raw is None:
            return self.default_settings()
        try:
            return UserSettings.model_validate_json(raw)
        except ValidationError as e:
            raise CorruptDataError(
                f"Stored settings are unreadable ({e.error_count()} errors)"
            ) from e

    def save_settings(self, settings: UserSettings) -> None:
        """Overwrite settings wholesale."""
        self._backend.set_item(
            self._keys.settings_key,
            settings.model_dump_json(by_alias=True),
        )

    def get_theme(self) -> Theme:
        """Saved theme; light if unset or unrecognised."""
        raw = self._backend.get_item(self._keys.theme_key)
        try:
            return Theme(raw) if raw else Theme.LIGHT
        except ValueError:
            logger.warning("unknown_theme_ignored", theme=raw)
            return Theme.LIGHT

    def save_theme(self, theme: Theme) -> None:
        self._backend.set_item(self._keys.theme_key, Theme(theme).value)

    def clear_all(self) -> None:
        """Remove transactions and settings. The theme is kept."""
        self._backend.remove_item(self._keys.transactions_key)
        self._backend.remove_item(self._keys.settings_key)

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def get_categories(
        self,
        transaction_type: Optional[Union[TransactionType, str]] = None,
    ) -> Union[list[str], dict[str, list[str]]]:
        """
        Default categories.

        With a type, the list for that type; without, all lists keyed
        by type value.
        """
        if transaction_type is not None:
            return list(DEFAULT_CATEGORIES[TransactionType(transaction_type)])
        return {t.value: list(names) for t, names in DEFAULT_CATEGORIES.items()}

    def get_used_categories(self) -> list[str]:
        """Distinct categories of stored transactions, first-seen order."""
        return list(dict.fromkeys(t.category for t in self.list_transactions()))
